"""Turn normalized backend text into typed suggestion records."""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Union

from .suggestions import (
    BranchSuggestion,
    CommitSuggestion,
    CommitType,
    SuggestionKind,
)

logger = logging.getLogger(__name__)

MAX_BRANCH_FALLBACKS = 5
MAX_COMMIT_FALLBACKS = 4
COMMIT_SUBJECT_LIMIT = 72

_LIST_MARKER_RE = re.compile(r"^\d+\.|^-|^\*")
_LEADING_MARKER_RE = re.compile(r"^\d+\.\s*|^-\s*|^\*\s*")
_WRAPPING_QUOTES_RE = re.compile(r"^['\"`]|['\"`]$")

# Checked in order once the canonical vocabulary has no hit.
_SECONDARY_TYPE_KEYWORDS = (
    (("add", "new"), CommitType.FEAT),
    (("fix", "bug"), CommitType.FIX),
    (("update", "change"), CommitType.CHORE),
    (("remove", "delete"), CommitType.CHORE),
    (("test",), CommitType.TEST),
    (("doc",), CommitType.DOCS),
)

Suggestions = Union[list[BranchSuggestion], list[CommitSuggestion]]


def detect_commit_type(text: str) -> str:
    """Classify free text into a conventional commit type (default feat)."""
    lowered = text.lower()
    for commit_type in CommitType:
        if commit_type.value in lowered:
            return commit_type.value
    for keywords, commit_type in _SECONDARY_TYPE_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            return commit_type.value
    return CommitType.FEAT.value


def extract_branch_name(line: str) -> str:
    cleaned = _LEADING_MARKER_RE.sub("", line, count=1).strip()
    tokens = cleaned.split()
    return tokens[0] if tokens else cleaned


def clean_commit_message(line: str) -> str:
    cleaned = _LEADING_MARKER_RE.sub("", line, count=1)
    cleaned = _WRAPPING_QUOTES_RE.sub("", cleaned)
    return cleaned.strip()[:COMMIT_SUBJECT_LIMIT]


def parse_json_payload(text: str) -> list[Any]:
    """Strictly parse ``text`` as JSON and return a list of raw elements.

    Raises:
        json.JSONDecodeError: when ``text`` is not JSON at all.
        RecursionError: when nesting exceeds the interpreter's limit.
    """
    parsed = json.loads(text)
    if isinstance(parsed, list):
        return parsed
    if isinstance(parsed, dict):
        nested = parsed.get("suggestions") or parsed.get("results")
        if nested:
            return nested if isinstance(nested, list) else [nested]
    return [parsed]


def _fallback_branches(lines: list[str]) -> list[BranchSuggestion]:
    names: list[str] = []
    for line in lines:
        if not (
            _LIST_MARKER_RE.match(line) or "feature/" in line or "fix/" in line
        ):
            continue
        name = extract_branch_name(line)
        if name:
            names.append(name)
        if len(names) == MAX_BRANCH_FALLBACKS:
            break
    if not names:
        names = ["feature/update"]
    return [
        BranchSuggestion(name=name, description=f"Generated suggestion {index}")
        for index, name in enumerate(names, start=1)
    ]


def _fallback_commits(lines: list[str]) -> list[CommitSuggestion]:
    results: list[CommitSuggestion] = []
    for line in lines:
        if len(line) <= 10 or "```" in line:
            continue
        message = clean_commit_message(line)
        if not message:
            continue
        results.append(
            CommitSuggestion(message=message, type=detect_commit_type(line))
        )
        if len(results) == MAX_COMMIT_FALLBACKS:
            break
    if not results:
        results.append(
            CommitSuggestion(
                message="chore: update files", type=CommitType.CHORE.value
            )
        )
    return results


def fallback_parse(text: str, kind: SuggestionKind) -> Suggestions:
    """Line-heuristic extraction used when strict parsing fails.

    Never raises and never returns an empty list.
    """
    lines = [line for line in (text or "").split("\n") if line.strip()]
    if SuggestionKind(kind) is SuggestionKind.BRANCH:
        return _fallback_branches(lines)
    return _fallback_commits(lines)


def build_records(items: list[Any], kind: SuggestionKind) -> Suggestions:
    """Convert raw parsed elements to records, dropping unusable ones."""
    factory = (
        BranchSuggestion.from_item
        if SuggestionKind(kind) is SuggestionKind.BRANCH
        else CommitSuggestion.from_item
    )
    records = []
    for item in items:
        record = factory(item)
        if record is not None:
            records.append(record)
    return records


def parse_suggestions(text: str, kind: SuggestionKind) -> Suggestions:
    """Parse normalized text, degrading to heuristics on structural failure."""
    try:
        items = parse_json_payload(text)
    except (ValueError, RecursionError) as exc:
        logger.warning(
            "Failed to parse JSON %s response (%s), attempting fallback parsing",
            SuggestionKind(kind).value,
            exc,
        )
        return fallback_parse(text, kind)

    records = build_records(items, kind)
    if not records:
        logger.warning(
            "JSON %s response held no usable suggestions, using fallback parsing",
            SuggestionKind(kind).value,
        )
        return fallback_parse(text, kind)
    return records
