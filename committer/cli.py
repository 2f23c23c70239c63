"""Command-line interface for committer."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any, Callable, Optional

from . import __version__
from .branch import BranchGenerator
from .commit import CommitGenerator
from .config import ConfigManager, parse_config_value
from .exceptions import CommitterError, ValidationError
from .suggestions import BranchSuggestion, ChangeStatus, CommitSuggestion

RESET = "\033[0m"
BOLD = "\033[1m"
CYAN = "\033[96m"
GREEN = "\033[92m"
YELLOW = "\033[93m"
DIM = "\033[2m"
RED = "\033[91m"

CHANGE_ICONS = {
    ChangeStatus.ADDED: "+",
    ChangeStatus.MODIFIED: "~",
    ChangeStatus.DELETED: "-",
    ChangeStatus.RENAMED: ">",
    ChangeStatus.COPIED: "=",
    ChangeStatus.TYPECHANGE: "*",
    ChangeStatus.UNMERGED: "!",
}


def _configure_logging(debug: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(levelname)s: %(message)s",
    )


class CLI:
    """Argument parsing and console presentation."""

    def __init__(
        self,
        config_manager: Optional[ConfigManager] = None,
        confirm: Optional[Callable[[str], bool]] = None,
    ) -> None:
        self._config_manager = config_manager
        self._confirm = confirm or self._ask_yes_no
        self.parser = self._create_parser()

    # ------------------------------------------------------------------
    # Parser
    # ------------------------------------------------------------------
    def _create_parser(self) -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(
            prog="committer",
            description="AI-powered branch name and commit message generator",
        )
        parser.add_argument(
            "--version", action="version", version=f"%(prog)s {__version__}"
        )
        sub = parser.add_subparsers(dest="command")

        common = argparse.ArgumentParser(add_help=False)
        common.add_argument(
            "-p",
            "--provider",
            help="AI provider name (claude, gemini, api, ...); "
            "defaults to the configured defaultProvider",
        )
        common.add_argument(
            "-c", "--context", help="Context file (.md) for additional information"
        )
        common.add_argument(
            "--debug", action="store_true", help="Print provider debug output"
        )

        sub.add_parser(
            "branch",
            parents=[common],
            help="Generate a branch name based on git history and context",
        )
        commit = sub.add_parser(
            "commit",
            parents=[common],
            help="Generate a commit message based on staged changes",
        )
        commit.add_argument(
            "-a",
            "--auto-stage",
            action="store_true",
            help="Automatically stage all changes before generating commit",
        )

        config = sub.add_parser("config", help="Configure AI providers and settings")
        group = config.add_mutually_exclusive_group()
        group.add_argument("-s", "--set", metavar="KEY=VALUE", help="Set a value")
        group.add_argument("-g", "--get", metavar="KEY", help="Get a value")
        group.add_argument(
            "-l", "--list", action="store_true", help="List all configuration"
        )
        return parser

    def _manager(self) -> ConfigManager:
        if self._config_manager is None:
            self._config_manager = ConfigManager()
        return self._config_manager

    # ------------------------------------------------------------------
    # Entry
    # ------------------------------------------------------------------
    def run(self, args: Optional[list[str]] = None) -> int:
        try:
            parsed = self.parser.parse_args(args)
        except SystemExit as exc:
            return int(exc.code or 0)

        if parsed.command is None:
            self.parser.print_help()
            return 0

        _configure_logging(getattr(parsed, "debug", False))
        handlers = {
            "branch": self._run_branch,
            "commit": self._run_commit,
            "config": self._run_config,
        }
        try:
            return handlers[parsed.command](parsed)
        except CommitterError as exc:
            self._print_error(parsed.command, exc)
            return 1
        except KeyboardInterrupt:
            print(f"\n{YELLOW}Aborted.{RESET}", file=sys.stderr)
            return 130

    def _print_error(self, command: str, exc: Exception) -> None:
        headings = {
            "branch": "Error generating branch name:",
            "commit": "Error generating commit message:",
            "config": "Configuration error:",
        }
        print(f"{RED}{headings.get(command, 'Error:')}{RESET}", file=sys.stderr)
        print(f"{RED}{exc}{RESET}", file=sys.stderr)

    @staticmethod
    def _ask_yes_no(question: str) -> bool:
        if not sys.stdin.isatty():
            return False
        answer = input(f"{question} [Y/n] ").strip().lower()
        return answer in {"", "y", "yes"}

    # ------------------------------------------------------------------
    # branch
    # ------------------------------------------------------------------
    def _run_branch(self, parsed: argparse.Namespace) -> int:
        generator = BranchGenerator(
            config_manager=self._manager(),
            provider=parsed.provider,
            debug=parsed.debug,
        )
        result = generator.suggest_for_repo(parsed.context)
        if result.used_fallback:
            print(f"{YELLOW}AI provider unavailable, using basic branch name.{RESET}")
        self._print_branch_suggestions(result.suggestions)
        return 0

    def _print_branch_suggestions(self, suggestions: list[BranchSuggestion]) -> None:
        print(f"{GREEN}{BOLD}Branch name suggestions:{RESET}\n")
        for index, suggestion in enumerate(suggestions, start=1):
            print(f"{CYAN}{index}. {suggestion.name}{RESET}")
            if suggestion.description:
                print(f"{DIM}   {suggestion.description}{RESET}")
            print()
        print(f"{YELLOW}Tips:{RESET}")
        print(f"{DIM}  Create with: git checkout -b <branch-name>{RESET}\n")

    # ------------------------------------------------------------------
    # commit
    # ------------------------------------------------------------------
    def _run_commit(self, parsed: argparse.Namespace) -> int:
        generator = CommitGenerator(
            config_manager=self._manager(),
            provider=parsed.provider,
            debug=parsed.debug,
        )
        request = generator.collect(parsed.context, auto_stage=parsed.auto_stage)
        if not request.changes:
            print(f"{YELLOW}No staged changes found.{RESET}")
            unstaged = generator.unstaged_changes()
            if not unstaged:
                raise ValidationError("Nothing to commit. Stage some changes first.")
            print(f"{DIM}Unstaged changes detected:{RESET}")
            for change in unstaged:
                print(f"{DIM}  {change.status.value}: {change.file}{RESET}")
            print()
            if not self._confirm("Stage all changes and generate commit message?"):
                raise ValidationError("Nothing to commit. Stage some changes first.")
            request = generator.collect(parsed.context, auto_stage=True)

        result = generator.suggest(request)
        if result.used_fallback:
            print(
                f"{YELLOW}AI provider unavailable, using basic commit message.{RESET}"
            )
        self._print_commit_suggestions(result.suggestions)
        print(f"{YELLOW}Staged changes:{RESET}")
        for change in request.changes:
            icon = CHANGE_ICONS.get(change.status, "?")
            print(f"{DIM}  {icon} {change.file}{RESET}")
        print()
        print(f"{YELLOW}Tips:{RESET}")
        print(f'{DIM}  Commit with: git commit -m "<message>"{RESET}\n')
        return 0

    def _print_commit_suggestions(self, suggestions: list[CommitSuggestion]) -> None:
        print(f"{GREEN}{BOLD}Commit message suggestions:{RESET}\n")
        for index, suggestion in enumerate(suggestions, start=1):
            print(f"{CYAN}{index}. {suggestion.message}{RESET}")
            if suggestion.body:
                print(f"{DIM}   Body:{RESET}")
                for line in suggestion.body.split("\n"):
                    print(f"{DIM}   {line}{RESET}")
            if suggestion.type:
                print(f"{DIM}   Type: {suggestion.type}{RESET}")
            print()

    # ------------------------------------------------------------------
    # config
    # ------------------------------------------------------------------
    def _run_config(self, parsed: argparse.Namespace) -> int:
        manager = self._manager()
        if parsed.set:
            key, sep, raw_value = parsed.set.partition("=")
            if not key or not sep:
                raise ValidationError("Invalid format. Use: key=value")
            value = parse_config_value(raw_value)
            manager.set(key, value)
            print(f"{GREEN}Set {key} = {json.dumps(value)}{RESET}")
            return 0
        if parsed.get:
            value = manager.get(parsed.get)
            if value is None:
                print(f"{YELLOW}Configuration key '{parsed.get}' not found{RESET}")
                return 0
            print(f"{GREEN}{parsed.get}:{RESET}")
            if isinstance(value, (dict, list)):
                print(json.dumps(value, indent=2))
            else:
                print(value)
            return 0
        self._print_config(manager.list())
        return 0

    def _print_config(self, data: dict[str, Any]) -> None:
        print(f"{GREEN}{BOLD}Current configuration:{RESET}\n")
        print(f"{CYAN}Providers:{RESET}")
        for name, settings in (data.get("providers") or {}).items():
            if not isinstance(settings, dict):
                continue
            status = (
                f"{GREEN}enabled{RESET}"
                if settings.get("enabled")
                else f"{RED}disabled{RESET}"
            )
            print(f"  {name}: {status}")
            if settings.get("command"):
                print(f"{DIM}    command: {settings['command']}{RESET}")
            if settings.get("endpoint"):
                print(f"{DIM}    endpoint: {settings['endpoint']}{RESET}")
        context_files = data.get("contextFiles") or {}
        branch = data.get("branch") or {}
        commit = data.get("commit") or {}
        print()
        print(f"{CYAN}Settings:{RESET}")
        print(f"{DIM}  Default provider: {data.get('defaultProvider')}{RESET}")
        print(f"{DIM}  Context file: {context_files.get('defaultFile')}{RESET}")
        print(f"{DIM}  Branch max length: {branch.get('maxLength')}{RESET}")
        print(f"{DIM}  Commit max length: {commit.get('maxLength')}{RESET}")
        conventional = "yes" if commit.get("conventionalCommits") else "no"
        print(f"{DIM}  Conventional commits: {conventional}{RESET}\n")


def main(argv: Optional[list[str]] = None) -> int:
    return CLI().run(argv)


if __name__ == "__main__":
    sys.exit(main())
