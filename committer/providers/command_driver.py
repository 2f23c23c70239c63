from __future__ import annotations

import shlex
import subprocess

from ..config import ProviderConfig
from ..exceptions import ConfigurationError, TransportError
from .base import BaseDriver

DEFAULT_COMMANDS = {
    "claude": "claude-code",
    "gemini": "gemini-cli",
}

_LABELS = {
    "claude": "Claude Code",
    "gemini": "Gemini CLI",
}


class CommandDriver(BaseDriver):
    """Driver for local CLI tools that read a prompt on stdin.

    The whole prompt is written to the process's standard input, the
    stream is closed, and the full standard output is the raw response.
    Output is decoded as UTF-8 with undecodable bytes replaced. One
    invocation per call; nothing is retried.
    """

    def __init__(self, config: ProviderConfig, debug: bool = False) -> None:
        super().__init__(config, debug)
        self.command = config.command or DEFAULT_COMMANDS.get(config.name, "")
        if not self.command:
            raise ConfigurationError(
                f"Provider '{config.name}' has no command configured"
            )
        self.args = list(config.args or [])
        self.label = _LABELS.get(config.name, config.name)

    def _argv(self) -> list[str]:
        try:
            base = shlex.split(self.command)
        except ValueError as exc:
            raise ConfigurationError(
                f"Invalid command for provider '{self.name}': {exc}"
            ) from exc
        return base + self.args

    def execute(self, prompt: str) -> str:
        argv = self._argv()
        if self.debug:
            print(f"DEBUG(Driver:{self.name}): invoke")
            print(f"  argv={argv} prompt_len={len(prompt)}")
        try:
            result = subprocess.run(
                argv,
                input=prompt,
                capture_output=True,
                encoding="utf-8",
                errors="replace",
                check=False,
            )
        except FileNotFoundError as exc:
            raise TransportError(
                f"{self.label} command not found: {self.command}. Install it "
                "or configure the correct command with 'committer config'"
            ) from exc
        except OSError as exc:
            raise TransportError(f"Failed to execute {self.label}: {exc}") from exc

        stdout = result.stdout or ""
        stderr = result.stderr or ""
        if self.debug:
            print(
                "DEBUG(Driver:{}): exit={} stdout_len={} stderr_len={}".format(
                    self.name, result.returncode, len(stdout), len(stderr)
                )
            )
        if result.returncode != 0:
            detail = stderr.strip() or (
                f"{self.label} exited with code {result.returncode}"
            )
            raise TransportError(f"{self.label} error: {detail}")
        if not stdout.strip():
            raise TransportError(f"No output from {self.label}")
        return stdout.strip()
