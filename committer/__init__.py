"""committer - AI-powered branch name and commit message suggestions."""

from importlib import import_module
from typing import TYPE_CHECKING

__version__ = "0.1.0"

# Public API (lazy-exported to avoid import-time side effects)
__all__ = [
    # Config
    "ConfigManager", "ProviderConfig",
    # Providers
    "LLMClient", "get_provider", "BaseDriver", "CommandDriver",
    "ChatCompletionsDriver",
    # Parsing
    "normalize_response", "parse_suggestions", "fallback_parse",
    # Records
    "BranchSuggestion", "CommitSuggestion", "FileChange",
    # Workflows
    "BranchGenerator", "CommitGenerator",
    # Exceptions
    "CommitterError", "ConfigurationError", "TransportError",
    "MalformedResponseError", "ProviderResponseInvalid", "GitError",
    "ValidationError",
]


def __getattr__(name: str):
    """Lazy attribute loader to avoid importing heavy modules at package import time.

    Importing ``committer`` alone must not pull in httpx or touch the
    configuration directory.
    """
    mapping = {
        # Config
        "ConfigManager": ("committer.config", "ConfigManager"),
        "ProviderConfig": ("committer.config", "ProviderConfig"),
        # Providers
        "LLMClient": ("committer.llm", "LLMClient"),
        "get_provider": ("committer.llm", "get_provider"),
        "BaseDriver": ("committer.providers.base", "BaseDriver"),
        "CommandDriver": ("committer.providers.command_driver", "CommandDriver"),
        "ChatCompletionsDriver": (
            "committer.providers.http_driver",
            "ChatCompletionsDriver",
        ),
        # Parsing
        "normalize_response": ("committer.normalizer", "normalize_response"),
        "parse_suggestions": ("committer.parser", "parse_suggestions"),
        "fallback_parse": ("committer.parser", "fallback_parse"),
        # Records
        "BranchSuggestion": ("committer.suggestions", "BranchSuggestion"),
        "CommitSuggestion": ("committer.suggestions", "CommitSuggestion"),
        "FileChange": ("committer.suggestions", "FileChange"),
        # Workflows
        "BranchGenerator": ("committer.branch", "BranchGenerator"),
        "CommitGenerator": ("committer.commit", "CommitGenerator"),
        # Exceptions
        "CommitterError": ("committer.exceptions", "CommitterError"),
        "ConfigurationError": ("committer.exceptions", "ConfigurationError"),
        "TransportError": ("committer.exceptions", "TransportError"),
        "MalformedResponseError": ("committer.exceptions", "MalformedResponseError"),
        "ProviderResponseInvalid": ("committer.exceptions", "ProviderResponseInvalid"),
        "GitError": ("committer.exceptions", "GitError"),
        "ValidationError": ("committer.exceptions", "ValidationError"),
    }
    if name in mapping:
        mod_name, attr = mapping[name]
        mod = import_module(mod_name)
        value = getattr(mod, attr)
        globals()[name] = value  # cache for future access
        return value
    raise AttributeError(f"module 'committer' has no attribute {name!r}")


if TYPE_CHECKING:
    # For type checkers and IDEs, provide direct imports
    from .branch import BranchGenerator
    from .commit import CommitGenerator
    from .config import ConfigManager, ProviderConfig
    from .exceptions import (
        CommitterError,
        ConfigurationError,
        GitError,
        MalformedResponseError,
        ProviderResponseInvalid,
        TransportError,
        ValidationError,
    )
    from .llm import LLMClient, get_provider
    from .normalizer import normalize_response
    from .parser import fallback_parse, parse_suggestions
    from .providers.base import BaseDriver
    from .providers.command_driver import CommandDriver
    from .providers.http_driver import ChatCompletionsDriver
    from .suggestions import BranchSuggestion, CommitSuggestion, FileChange
