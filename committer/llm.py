"""Provider selection and the client facade used by the generators.

Selection is a pure function of configuration: the provider name picks a
configured entry, the entry must be enabled, and its fields decide which
backend variant serves it.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from .config import ConfigManager, ProviderConfig
from .exceptions import ConfigurationError
from .providers.base import BaseDriver
from .providers.command_driver import DEFAULT_COMMANDS, CommandDriver
from .providers.http_driver import ChatCompletionsDriver
from .suggestions import BranchSuggestion, CommitSuggestion

logger = logging.getLogger(__name__)

COMMAND_BACKEND = "command"
HTTP_BACKEND = "http"
DEFAULT_HTTP_PROVIDER = "api"

_BACKENDS: Dict[str, type[BaseDriver]] = {
    COMMAND_BACKEND: CommandDriver,
    HTTP_BACKEND: ChatCompletionsDriver,
}


def backend_kind(provider: ProviderConfig) -> str:
    """Return which backend serves ``provider``.

    An explicit ``type`` wins; otherwise an endpoint means HTTP and a
    command means a local subprocess. Bare entries for the built-in
    names fall back to their usual backend (``claude``/``gemini`` run
    their default CLI, ``api`` is HTTP and still needs an endpoint).
    """
    if provider.type:
        kind = provider.type.strip().lower()
        if kind in {"subprocess", "cli"}:
            kind = COMMAND_BACKEND
        if kind not in _BACKENDS:
            raise ConfigurationError(
                f"Unsupported provider type '{provider.type}' for '{provider.name}'"
            )
        return kind
    if provider.endpoint:
        return HTTP_BACKEND
    if provider.command or provider.name in DEFAULT_COMMANDS:
        return COMMAND_BACKEND
    if provider.name == DEFAULT_HTTP_PROVIDER:
        return HTTP_BACKEND
    raise ConfigurationError(f"Unsupported provider: {provider.name}")


def select_provider(
    name: str, settings: Dict[str, Any], debug: bool = False
) -> BaseDriver:
    """Build the driver for ``name`` from an already loaded config mapping."""
    providers = settings.get("providers") or {}
    entry = providers.get(name)
    if not isinstance(entry, dict):
        raise ConfigurationError(f"Provider '{name}' not found in configuration")
    provider = ProviderConfig.from_dict(name, entry)
    if not provider.enabled:
        raise ConfigurationError(
            f"Provider '{name}' is disabled. Enable it with: committer config"
        )
    driver_cls = _BACKENDS[backend_kind(provider)]
    if debug:
        print(f"DEBUG: provider '{name}' -> {driver_cls.__name__}")
    return driver_cls(provider, debug=debug)


def get_provider(
    name: Optional[str],
    config_manager: Optional[ConfigManager] = None,
    debug: bool = False,
) -> BaseDriver:
    """Load configuration and return the enabled driver for ``name``.

    Raises:
        ConfigurationError: unknown, disabled or unusable provider.
    """
    manager = config_manager or ConfigManager()
    settings = manager.load_config()
    provider_name = name or manager.default_provider(settings)
    return select_provider(provider_name, settings, debug=debug)


class LLMClient:
    """Provider-aware client for branch and commit suggestions.

    Holds no state between calls beyond the resolved driver, so one
    client can serve repeated or concurrent requests.
    """

    def __init__(
        self,
        provider_name: Optional[str] = None,
        config_manager: Optional[ConfigManager] = None,
        debug: bool = False,
    ) -> None:
        self.debug = debug
        self._driver = get_provider(provider_name, config_manager, debug=debug)
        self.provider = self._driver.name

    @property
    def driver(self) -> BaseDriver:
        return self._driver

    def suggest_branch_names(self, prompt: str) -> list[BranchSuggestion]:
        suggestions = self._driver.generate_branch_name(prompt)
        logger.debug(
            "provider %s returned %d branch suggestions",
            self.provider,
            len(suggestions),
        )
        return suggestions

    def suggest_commit_messages(self, prompt: str) -> list[CommitSuggestion]:
        suggestions = self._driver.generate_commit_message(prompt)
        logger.debug(
            "provider %s returned %d commit suggestions",
            self.provider,
            len(suggestions),
        )
        return suggestions
