"""Raw backend text cleanup ahead of structural parsing.

Models wrap their answers in conversational prose, markdown fences, or
both. ``normalize_response`` peels that wrapping off and returns the most
likely JSON payload, or the cleaned text when no structure is visible.
"""

from __future__ import annotations

import re

# Each preamble is only stripped at the start of a line, first match only.
_PREAMBLE_PATTERNS = (
    re.compile(r"^Here are.*?suggestions?:?\s*", re.IGNORECASE | re.MULTILINE),
    re.compile(r"^I'll.*?suggestions?:?\s*", re.IGNORECASE | re.MULTILINE),
    re.compile(r"^Based on.*?:\s*", re.IGNORECASE | re.MULTILINE),
)

# First "[" to last "]"; an unrelated bracketed aside in prose is swept in.
_JSON_ARRAY_RE = re.compile(r"\[.*\]", re.DOTALL)

_CODE_FENCE_RE = re.compile(r"```(?:json)?\s*(.*?)\s*```", re.DOTALL)


def strip_preambles(text: str) -> str:
    """Remove conversational lead-ins such as "Here are some suggestions:"."""
    cleaned = text.strip()
    for pattern in _PREAMBLE_PATTERNS:
        cleaned = pattern.sub("", cleaned, count=1)
    return cleaned


def normalize_response(raw: str) -> str:
    """Return the best-effort JSON payload contained in ``raw``.

    A bracketed array wins over a code fence.
    """
    cleaned = strip_preambles(raw)

    array_match = _JSON_ARRAY_RE.search(cleaned)
    if array_match:
        return array_match.group(0)

    fence_match = _CODE_FENCE_RE.search(cleaned)
    if fence_match:
        return fence_match.group(1)

    return cleaned
