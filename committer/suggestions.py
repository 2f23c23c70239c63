"""Suggestion records and the small closed vocabularies around them."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class SuggestionKind(str, Enum):
    BRANCH = "branch"
    COMMIT = "commit"


class CommitType(str, Enum):
    """Conventional commit types, in classification order."""

    FEAT = "feat"
    FIX = "fix"
    DOCS = "docs"
    STYLE = "style"
    REFACTOR = "refactor"
    TEST = "test"
    CHORE = "chore"


class ChangeStatus(str, Enum):
    """File change kinds reported by ``git diff --name-status``."""

    ADDED = "added"
    MODIFIED = "modified"
    DELETED = "deleted"
    RENAMED = "renamed"
    COPIED = "copied"
    UNMERGED = "unmerged"
    TYPECHANGE = "typechange"
    UNKNOWN = "unknown"

    @classmethod
    def from_code(cls, code: str) -> "ChangeStatus":
        """Map a status letter (``A``, ``M``, ``R100``...) to a member."""
        letter = (code or "").strip()[:1].upper()
        return _STATUS_CODES.get(letter, cls.UNKNOWN)


_STATUS_CODES = {
    "A": ChangeStatus.ADDED,
    "M": ChangeStatus.MODIFIED,
    "D": ChangeStatus.DELETED,
    "R": ChangeStatus.RENAMED,
    "C": ChangeStatus.COPIED,
    "U": ChangeStatus.UNMERGED,
    "T": ChangeStatus.TYPECHANGE,
}


@dataclass(frozen=True)
class FileChange:
    """A changed path and how it changed."""

    status: ChangeStatus
    file: str


def _text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


@dataclass(frozen=True)
class BranchSuggestion:
    """A candidate branch name."""

    name: str
    description: Optional[str] = None

    @classmethod
    def from_item(cls, item: Any) -> Optional["BranchSuggestion"]:
        """Build a record from one parsed JSON element.

        Returns None when the element carries no usable name.
        """
        if isinstance(item, dict):
            name = _text(item.get("name") or item.get("branch"))
            if not name:
                return None
            return cls(name=name, description=_text(item.get("description")))
        if isinstance(item, str):
            name = _text(item)
            return cls(name=name) if name else None
        return None


@dataclass(frozen=True)
class CommitSuggestion:
    """A candidate commit subject with optional body and type."""

    message: str
    body: Optional[str] = None
    type: Optional[str] = None

    @classmethod
    def from_item(cls, item: Any) -> Optional["CommitSuggestion"]:
        """Build a record from one parsed JSON element.

        A missing ``type`` is inferred from the message text.
        """
        # Imported here; parser imports this module at load time.
        from .parser import detect_commit_type

        if isinstance(item, dict):
            message = _text(item.get("message") or item.get("subject"))
            if not message:
                return None
            commit_type = _text(item.get("type")) or detect_commit_type(message)
            return cls(message=message, body=_text(item.get("body")), type=commit_type)
        if isinstance(item, str):
            message = _text(item)
            if not message:
                return None
            return cls(message=message, type=detect_commit_type(message))
        return None
