from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any

from ..config import ProviderConfig
from ..exceptions import ProviderResponseInvalid
from ..normalizer import normalize_response
from ..parser import Suggestions, fallback_parse, parse_suggestions
from ..suggestions import BranchSuggestion, CommitSuggestion, SuggestionKind

logger = logging.getLogger(__name__)

MIN_RESPONSE_LENGTH = 10

_JSON_INSTRUCTIONS = {
    SuggestionKind.BRANCH: (
        "\n\nRespond only with valid JSON array format containing "
        "branch name suggestions."
    ),
    SuggestionKind.COMMIT: (
        "\n\nRespond only with valid JSON array format containing "
        "commit message suggestions."
    ),
}


class BaseDriver(ABC):
    """Abstract base for one configured AI backend.

    Each driver only knows how to turn a prompt into raw text
    (``execute``). Prompt finishing, validation, normalization and
    parsing are shared here so every backend degrades the same way when
    the model ignores the requested format.
    """

    label = "AI provider"

    def __init__(self, config: ProviderConfig, debug: bool = False) -> None:
        self.config = config
        self.debug = debug

    @property
    def name(self) -> str:
        return self.config.name

    @abstractmethod
    def execute(self, prompt: str) -> str:
        """Send ``prompt`` to the backend and return its raw text.

        Must raise TransportError (or MalformedResponseError for a bad
        envelope) rather than returning partial output.
        """
        raise NotImplementedError

    def generate_branch_name(self, prompt: str) -> list[BranchSuggestion]:
        return self._generate(prompt, SuggestionKind.BRANCH)  # type: ignore[return-value]

    def generate_commit_message(self, prompt: str) -> list[CommitSuggestion]:
        return self._generate(prompt, SuggestionKind.COMMIT)  # type: ignore[return-value]

    def _generate(self, prompt: str, kind: SuggestionKind) -> Suggestions:
        full_prompt = prompt + _JSON_INSTRUCTIONS[kind]
        response = self.execute(full_prompt)
        self.validate_response(response)
        return self.parse_response(response, kind)

    def validate_response(self, response: Any) -> bool:
        if not response or not isinstance(response, str):
            raise ProviderResponseInvalid("Invalid response from AI provider")
        if len(response) < MIN_RESPONSE_LENGTH:
            raise ProviderResponseInvalid("Response too short from AI provider")
        return True

    def parse_response(self, response: str, kind: SuggestionKind) -> Suggestions:
        """Normalize then parse; heuristics take over if anything breaks."""
        try:
            cleaned = normalize_response(response)
            if self.debug:
                preview = cleaned[:300].replace("\n", "\\n")
                print(f"DEBUG(Driver:{self.name}): normalized '{preview}'")
            return parse_suggestions(cleaned, kind)
        except (TypeError, ValueError, AttributeError, RecursionError) as exc:
            logger.warning(
                "%s response parsing failed (%s), using fallback", self.label, exc
            )
            return fallback_parse(response, kind)
