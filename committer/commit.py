"""Commit message suggestion workflow for committer."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from .config import ConfigManager
from .exceptions import CommitterError, ValidationError
from .fallback import generate_commit_message_fallback
from .git import CommitInfo, GitRepo
from .llm import LLMClient
from .prompts import build_commit_prompt
from .suggestions import CommitSuggestion, FileChange

logger = logging.getLogger(__name__)

RECENT_COMMIT_COUNT = 5


@dataclass
class CommitRequest:
    """Everything gathered from the repository for one commit prompt."""

    changes: list[FileChange]
    diff: str = ""
    recent_commits: list[CommitInfo] = field(default_factory=list)
    context_path: Optional[Path] = None


@dataclass
class CommitSuggestionResult:
    suggestions: list[CommitSuggestion]
    used_fallback: bool = False
    error: Optional[str] = None


class CommitGenerator:
    """Suggests commit messages for staged changes."""

    def __init__(
        self,
        repo_path: Optional[str] = None,
        config_manager: Optional[ConfigManager] = None,
        provider: Optional[str] = None,
        debug: bool = False,
    ) -> None:
        """Initialize the commit generator.

        Args:
            repo_path: Path to the Git repository. Defaults to the cwd.
            config_manager: Optional configuration store override.
            provider: Provider name; the configured default when omitted.
            debug: Whether to enable driver debug output.
        """
        self._config = config_manager or ConfigManager()
        self.git_repo = GitRepo(repo_path)
        self.provider = provider
        self.debug = debug

    def collect(
        self, context: Optional[str] = None, auto_stage: bool = False
    ) -> CommitRequest:
        """Gather staged changes, diff, history and the context file.

        Git reads and the context-file lookup run concurrently and are
        combined once all have finished.
        """
        if auto_stage:
            self.git_repo.stage_all()
        with ThreadPoolExecutor(max_workers=4) as pool:
            changes = pool.submit(self.git_repo.get_staged_changes)
            diff = pool.submit(self.git_repo.get_detailed_diff, True)
            commits = pool.submit(
                self.git_repo.get_recent_commits, RECENT_COMMIT_COUNT
            )
            context_path = pool.submit(
                self._config.find_context_file, context, self.git_repo.repo_path
            )
            return CommitRequest(
                changes=changes.result(),
                diff=diff.result(),
                recent_commits=commits.result(),
                context_path=context_path.result(),
            )

    def unstaged_changes(self) -> list[FileChange]:
        return self.git_repo.get_unstaged_changes()

    def stage_all(self) -> None:
        self.git_repo.stage_all()

    def max_length(self) -> int:
        value = self._config.get("commit.maxLength")
        try:
            return int(value) if value else 72
        except (TypeError, ValueError):
            return 72

    def suggest(self, request: CommitRequest) -> CommitSuggestionResult:
        """Ask the provider for suggestions, or fall back to local rules.

        Any provider failure (configuration, transport, malformed
        response) yields the deterministic suggestion built from the file
        list instead of an error.

        Raises:
            ValidationError: If the request holds no staged changes.
        """
        if not request.changes:
            raise ValidationError("Nothing to commit. Stage some changes first.")

        max_length = self.max_length()
        context = self._config.read_context_file(request.context_path)
        prompt = build_commit_prompt(
            request.changes,
            request.diff,
            request.recent_commits,
            context,
            max_length=max_length,
        )
        try:
            client = LLMClient(self.provider, self._config, debug=self.debug)
            suggestions = client.suggest_commit_messages(prompt)
        except CommitterError as exc:
            logger.warning(
                "AI provider unavailable (%s), using basic commit message", exc
            )
            return CommitSuggestionResult(
                suggestions=generate_commit_message_fallback(
                    request.changes, max_length
                ),
                used_fallback=True,
                error=str(exc),
            )
        return CommitSuggestionResult(suggestions=suggestions)

    def suggest_for_staged(
        self, context: Optional[str] = None, auto_stage: bool = False
    ) -> CommitSuggestionResult:
        return self.suggest(self.collect(context, auto_stage=auto_stage))
