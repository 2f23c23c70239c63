"""Configuration management for committer."""

from __future__ import annotations

import copy
import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from .exceptions import ConfigurationError

CONFIG_DIR_NAME = ".committer"
CONFIG_FILE_NAME = "config.json"

DEFAULT_CONFIG: Dict[str, Any] = {
    "providers": {
        "claude": {
            "enabled": True,
            "command": "claude-code",
            "args": [],
        },
        "gemini": {
            "enabled": False,
            "command": "gemini-cli",
            "args": [],
        },
        "api": {
            "enabled": False,
            "endpoint": "http://localhost:1234/v1/chat/completions",
            "apiKey": "",
            "model": "gpt-3.5-turbo",
        },
    },
    "defaultProvider": "claude",
    "contextFiles": {
        "searchPaths": [".", ".github", "docs"],
        "defaultFile": "COMMITTER.md",
    },
    "branch": {
        "maxLength": 50,
        "includePrefixes": True,
        "includeTicketNumbers": True,
        "separator": "/",
    },
    "commit": {
        "maxLength": 72,
        "includeScope": True,
        "conventionalCommits": True,
        "includeBody": False,
    },
}


@dataclass
class ProviderConfig:
    """Settings for one named provider."""

    name: str
    enabled: bool = False
    command: Optional[str] = None
    args: List[str] = field(default_factory=list)
    endpoint: Optional[str] = None
    api_key: Optional[str] = None
    model: Optional[str] = None
    # Explicit backend kind ("command" | "http"); inferred when unset.
    type: Optional[str] = None

    @classmethod
    def from_dict(cls, name: str, data: Dict[str, Any]) -> "ProviderConfig":
        raw_args = data.get("args") or []
        if isinstance(raw_args, str):
            raw_args = [raw_args]
        return cls(
            name=name,
            enabled=bool(data.get("enabled", False)),
            command=data.get("command") or None,
            args=[str(a) for a in raw_args],
            endpoint=data.get("endpoint") or None,
            api_key=data.get("apiKey") or data.get("api_key") or None,
            model=data.get("model") or None,
            type=data.get("type") or None,
        )


@dataclass
class ContextFile:
    """Contents of a project context file (``COMMITTER.md`` by default)."""

    path: str
    content: str


def config_home() -> Path:
    """Directory holding ``config.json``; ``COMMITTER_CONFIG_HOME`` wins."""
    override = os.environ.get("COMMITTER_CONFIG_HOME")
    if override:
        return Path(override).expanduser()
    return Path.home() / CONFIG_DIR_NAME


def parse_config_value(raw: str) -> Any:
    """Decode a ``config --set`` value as JSON, else keep the raw string."""
    try:
        return json.loads(raw)
    except ValueError:
        return raw


def get_nested(data: Dict[str, Any], dotted_key: str) -> Any:
    current: Any = data
    for part in dotted_key.split("."):
        if not isinstance(current, dict) or part not in current:
            return None
        current = current[part]
    return current


def set_nested(data: Dict[str, Any], dotted_key: str, value: Any) -> None:
    parts = dotted_key.split(".")
    last = parts.pop()
    target = data
    for part in parts:
        if not isinstance(target.get(part), dict):
            target[part] = {}
        target = target[part]
    target[last] = value


class ConfigManager:
    """File-backed JSON configuration with dotted-path access.

    Writes are not synchronized; concurrent writers to the same file
    must be avoided by the caller.
    """

    def __init__(self, config_dir: Optional[Path] = None) -> None:
        self.config_dir = Path(config_dir) if config_dir else config_home()
        self.config_file = self.config_dir / CONFIG_FILE_NAME

    def _ensure_config_dir(self) -> None:
        try:
            self.config_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise ConfigurationError(
                f"Failed to create config directory: {exc}"
            ) from exc

    def load_config(self) -> Dict[str, Any]:
        """Return stored settings merged over the defaults.

        The file is created with defaults on first use. Stored top-level
        keys replace the defaults wholesale.
        """
        self._ensure_config_dir()
        if not self.config_file.exists():
            defaults = copy.deepcopy(DEFAULT_CONFIG)
            self.save_config(defaults)
            return defaults
        try:
            stored = json.loads(self.config_file.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            raise ConfigurationError(f"Failed to load config: {exc}") from exc
        if not isinstance(stored, dict):
            raise ConfigurationError(
                f"Failed to load config: {self.config_file} is not a JSON object"
            )
        merged = copy.deepcopy(DEFAULT_CONFIG)
        merged.update(stored)
        return merged

    def save_config(self, data: Dict[str, Any]) -> None:
        self._ensure_config_dir()
        try:
            self.config_file.write_text(json.dumps(data, indent=2), encoding="utf-8")
        except OSError as exc:
            raise ConfigurationError(f"Failed to save config: {exc}") from exc

    def get(self, key: str) -> Any:
        return get_nested(self.load_config(), key)

    def set(self, key: str, value: Any) -> None:
        data = self.load_config()
        set_nested(data, key, value)
        self.save_config(data)

    def list(self) -> Dict[str, Any]:
        return self.load_config()

    def default_provider(self, data: Optional[Dict[str, Any]] = None) -> str:
        env_provider = os.environ.get("COMMITTER_PROVIDER")
        if env_provider:
            return env_provider
        data = data if data is not None else self.load_config()
        return str(data.get("defaultProvider") or "claude")

    def provider_config(
        self, name: str, data: Optional[Dict[str, Any]] = None
    ) -> Optional[ProviderConfig]:
        """Return the named provider's settings, or None when absent."""
        data = data if data is not None else self.load_config()
        providers = data.get("providers") or {}
        entry = providers.get(name)
        if not isinstance(entry, dict):
            return None
        return ProviderConfig.from_dict(name, entry)

    def find_context_file(
        self, custom_path: Optional[str] = None, cwd: Optional[Path] = None
    ) -> Optional[Path]:
        """Locate the context file, checking the configured search paths."""
        base = Path(cwd) if cwd else Path.cwd()
        if custom_path:
            candidate = (base / Path(custom_path).expanduser()).resolve(strict=False)
            if not candidate.is_file():
                raise ConfigurationError(f"Context file not found: {custom_path}")
            return candidate

        settings = self.load_config().get("contextFiles") or {}
        search_paths = settings.get("searchPaths") or []
        default_file = settings.get("defaultFile") or "COMMITTER.md"
        for search_path in search_paths:
            candidate = base / search_path / default_file
            if candidate.is_file():
                return candidate.resolve(strict=False)
        return None

    def read_context_file(self, path: Optional[Path]) -> Optional[ContextFile]:
        if not path:
            return None
        try:
            content = Path(path).read_text(encoding="utf-8")
        except OSError as exc:
            raise ConfigurationError(f"Failed to read context file: {exc}") from exc
        return ContextFile(path=str(path), content=content.strip())
