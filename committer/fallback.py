"""Rule-based suggestions used when no AI provider can answer."""

from __future__ import annotations

import re
from typing import Iterable, Optional

from .suggestions import (
    BranchSuggestion,
    ChangeStatus,
    CommitSuggestion,
    CommitType,
    FileChange,
)

_SLUG_RE = re.compile(r"[^a-z0-9]+")


def generate_commit_message_fallback(
    changes: Optional[Iterable[FileChange]], max_length: int = 72
) -> list[CommitSuggestion]:
    """Summarize the change list as a single conventional subject."""
    change_list = list(changes or [])
    if not change_list:
        return [
            CommitSuggestion(message="chore: update files", type=CommitType.CHORE.value)
        ]

    statuses = [change.status for change in change_list]
    commit_type = CommitType.CHORE
    action = "update"
    if all(status is ChangeStatus.ADDED for status in statuses):
        commit_type = CommitType.FEAT
        action = "add"
    elif all(status is ChangeStatus.DELETED for status in statuses):
        action = "remove"

    if len(change_list) == 1:
        target = change_list[0].file
    else:
        target = f"{len(change_list)} files"
    message = f"{commit_type.value}: {action} {target}"[:max_length]
    return [CommitSuggestion(message=message, type=commit_type.value)]


def slugify(text: str, limit: int = 30) -> str:
    return _SLUG_RE.sub("-", text.lower()).strip("-")[:limit]


def generate_branch_name_fallback(
    repo_info=None, max_length: int = 50
) -> list[BranchSuggestion]:
    """Derive a branch name from the repo's prefix habit and last commit."""
    prefix = "feature"
    base = "new-branch"
    if repo_info is not None:
        pattern = getattr(repo_info, "branch_pattern", None)
        if pattern is not None and pattern.prefixes:
            prefix = pattern.prefixes[0]
        commits = getattr(repo_info, "recent_commits", None) or []
        if commits:
            base = slugify(commits[0].message) or base
    name = f"{prefix}/{base}"[:max_length]
    return [BranchSuggestion(name=name, description="Basic branch name suggestion")]
