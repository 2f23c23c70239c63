"""Branch name suggestion workflow for committer."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from .config import ConfigManager
from .exceptions import CommitterError
from .fallback import generate_branch_name_fallback
from .git import GitRepo, RepositoryInfo
from .llm import LLMClient
from .prompts import build_branch_prompt
from .suggestions import BranchSuggestion

logger = logging.getLogger(__name__)


@dataclass
class BranchRequest:
    repo_info: RepositoryInfo
    context_path: Optional[Path] = None


@dataclass
class BranchSuggestionResult:
    suggestions: list[BranchSuggestion] = field(default_factory=list)
    used_fallback: bool = False
    error: Optional[str] = None


class BranchGenerator:
    """Suggests branch names from repository history and conventions."""

    def __init__(
        self,
        repo_path: Optional[str] = None,
        config_manager: Optional[ConfigManager] = None,
        provider: Optional[str] = None,
        debug: bool = False,
    ) -> None:
        self._config = config_manager or ConfigManager()
        self.git_repo = GitRepo(repo_path)
        self.provider = provider
        self.debug = debug

    def max_length(self) -> int:
        value = self._config.get("branch.maxLength")
        try:
            return int(value) if value else 50
        except (TypeError, ValueError):
            return 50

    def collect(self, context: Optional[str] = None) -> BranchRequest:
        with ThreadPoolExecutor(max_workers=2) as pool:
            repo_info = pool.submit(self.git_repo.get_repository_info)
            context_path = pool.submit(
                self._config.find_context_file, context, self.git_repo.repo_path
            )
            return BranchRequest(
                repo_info=repo_info.result(), context_path=context_path.result()
            )

    def build_prompt(self, request: BranchRequest) -> str:
        context_file = self._config.read_context_file(request.context_path)
        return build_branch_prompt(
            request.repo_info, context_file, max_length=self.max_length()
        )

    def suggest(self, request: BranchRequest) -> BranchSuggestionResult:
        """Ask the provider for names, or derive one from the repository.

        Provider failures yield the rule-based name built from the branch
        prefixes and the latest commit subject.
        """
        prompt = self.build_prompt(request)
        try:
            client = LLMClient(self.provider, self._config, debug=self.debug)
            suggestions = client.suggest_branch_names(prompt)
        except CommitterError as exc:
            logger.warning("AI provider unavailable (%s), using basic branch name", exc)
            return BranchSuggestionResult(
                suggestions=generate_branch_name_fallback(
                    request.repo_info, self.max_length()
                ),
                used_fallback=True,
                error=str(exc),
            )
        return BranchSuggestionResult(suggestions=suggestions)

    def suggest_for_repo(self, context: Optional[str] = None) -> BranchSuggestionResult:
        return self.suggest(self.collect(context))
