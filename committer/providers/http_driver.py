from __future__ import annotations

import os
import socket
from typing import Any, Optional

import httpx

from ..config import ProviderConfig
from ..exceptions import ConfigurationError, MalformedResponseError, TransportError
from .base import BaseDriver

DEFAULT_MODEL = "gpt-3.5-turbo"
DEFAULT_TIMEOUT = 30.0
MAX_TOKENS = 500
TEMPERATURE = 0.7

SYSTEM_PROMPT = (
    "You are a helpful assistant that generates git branch names and commit "
    "messages. Always respond with valid JSON arrays."
)

_RESOLUTION_MARKERS = (
    "name or service not known",
    "nodename nor servname",
    "getaddrinfo failed",
    "temporary failure in name resolution",
    "no address associated with hostname",
)


def _is_name_resolution_failure(exc: BaseException) -> bool:
    """True when a connect error was caused by DNS, not a refused socket."""
    seen: set[int] = set()
    current: Optional[BaseException] = exc
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        if isinstance(current, socket.gaierror):
            return True
        text = str(current).lower()
        if any(marker in text for marker in _RESOLUTION_MARKERS):
            return True
        current = current.__cause__ or current.__context__
    return False


def _request_timeout() -> float:
    timeout_env = os.environ.get("COMMITTER_HTTP_TIMEOUT")
    try:
        return float(timeout_env) if timeout_env else DEFAULT_TIMEOUT
    except ValueError:
        return DEFAULT_TIMEOUT


class ChatCompletionsDriver(BaseDriver):
    """Driver for OpenAI-compatible ``/chat/completions`` endpoints.

    ``endpoint`` is the full URL the payload is posted to, so local
    servers (LM Studio, llama.cpp, Ollama's compatibility layer) work
    without path rewriting.
    """

    label = "API"

    def __init__(self, config: ProviderConfig, debug: bool = False) -> None:
        super().__init__(config, debug)
        if not config.endpoint:
            raise ConfigurationError("API endpoint is required for API provider")
        self.endpoint = config.endpoint
        self.api_key = config.api_key
        self.model = config.model or DEFAULT_MODEL
        self._request_timeout = _request_timeout()

    def build_payload(self, prompt: str) -> dict[str, Any]:
        return {
            "model": self.model,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            "max_tokens": MAX_TOKENS,
            "temperature": TEMPERATURE,
        }

    def build_headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    def execute(self, prompt: str) -> str:
        if self.debug:
            print(f"DEBUG(Driver:{self.name}): invoke")
            print(
                f"  endpoint={self.endpoint} model={self.model} "
                f"timeout={self._request_timeout}"
            )
        try:
            response = httpx.post(
                self.endpoint,
                headers=self.build_headers(),
                json=self.build_payload(prompt),
                timeout=self._request_timeout,
            )
        except httpx.ConnectError as exc:
            if _is_name_resolution_failure(exc):
                raise TransportError(
                    f"API endpoint not found: {self.endpoint}"
                ) from exc
            raise TransportError(
                f"Cannot connect to API endpoint: {self.endpoint}. "
                "Check if the service is running."
            ) from exc
        except httpx.TimeoutException as exc:
            raise TransportError(
                "API request timed out after {:g}s: {}".format(
                    self._request_timeout, self.endpoint
                )
            ) from exc
        except httpx.HTTPError as exc:
            raise TransportError(f"API request failed: {exc}") from exc

        status = int(getattr(response, "status_code", 200))
        if self.debug:
            print(f"DEBUG(Driver:{self.name}): status={status}")
        if status < 200 or status >= 300:
            raise TransportError(
                f"API error ({status}): {self._error_message(response)}"
            )
        return self._extract_content(response)

    @staticmethod
    def _error_message(response: Any) -> str:
        try:
            data = response.json()
        except (ValueError, RecursionError):
            data = None
        if isinstance(data, dict):
            error = data.get("error")
            if isinstance(error, dict) and error.get("message"):
                return str(error["message"])
        return str(getattr(response, "reason_phrase", "") or "Unknown error")

    @staticmethod
    def _extract_content(response: Any) -> str:
        try:
            data = response.json()
        except (ValueError, RecursionError) as exc:
            raise MalformedResponseError("Invalid response format from API") from exc
        choices = data.get("choices") if isinstance(data, dict) else None
        if not isinstance(choices, list) or not choices:
            raise MalformedResponseError("Invalid response format from API")
        first = choices[0]
        message = first.get("message") if isinstance(first, dict) else None
        content = message.get("content") if isinstance(message, dict) else None
        if not isinstance(content, str) or not content.strip():
            raise MalformedResponseError("No content in API response")
        return content.strip()
