import pytest

from committer.config import DEFAULT_CONFIG, ProviderConfig
from committer.exceptions import ConfigurationError
from committer.llm import (
    COMMAND_BACKEND,
    HTTP_BACKEND,
    LLMClient,
    backend_kind,
    get_provider,
    select_provider,
)
from committer.providers.command_driver import CommandDriver
from committer.providers.http_driver import ChatCompletionsDriver
from committer.suggestions import BranchSuggestion, CommitSuggestion


def _settings(**providers):
    return {"providers": providers, "defaultProvider": "claude"}


def test_enabled_command_provider_selected():
    settings = _settings(claude={"enabled": True, "command": "claude-code"})
    driver = select_provider("claude", settings)
    assert isinstance(driver, CommandDriver)
    assert driver.name == "claude"


def test_enabled_endpoint_provider_selected():
    settings = _settings(
        api={"enabled": True, "endpoint": "http://localhost:1234/v1/chat/completions"}
    )
    assert isinstance(select_provider("api", settings), ChatCompletionsDriver)


def test_unknown_provider():
    with pytest.raises(ConfigurationError) as exc_info:
        select_provider("nope", _settings())
    assert str(exc_info.value) == "Provider 'nope' not found in configuration"


def test_disabled_provider():
    settings = _settings(gemini={"enabled": False, "command": "gemini-cli"})
    with pytest.raises(ConfigurationError, match="Provider 'gemini' is disabled"):
        select_provider("gemini", settings)


@pytest.mark.parametrize(
    "config, expected",
    [
        (ProviderConfig(name="x", command="tool"), COMMAND_BACKEND),
        (ProviderConfig(name="x", endpoint="http://h/v1"), HTTP_BACKEND),
        (ProviderConfig(name="x", command="tool", endpoint="http://h"), HTTP_BACKEND),
        (ProviderConfig(name="x", endpoint="http://h", type="command"), COMMAND_BACKEND),
        (ProviderConfig(name="x", type="cli", command="tool"), COMMAND_BACKEND),
        (ProviderConfig(name="x", type="HTTP", endpoint="http://h"), HTTP_BACKEND),
    ],
)
def test_backend_kind(config, expected):
    assert backend_kind(config) == expected


def test_backend_kind_rejects_unusable_entries():
    with pytest.raises(ConfigurationError, match="Unsupported provider: bare"):
        backend_kind(ProviderConfig(name="bare"))
    with pytest.raises(ConfigurationError, match="Unsupported provider type"):
        backend_kind(ProviderConfig(name="x", type="grpc", command="tool"))


def test_get_provider_uses_default_from_config(config_manager):
    driver = get_provider(None, config_manager)
    assert driver.name == "claude"
    assert isinstance(driver, CommandDriver)


def test_get_provider_env_override(monkeypatch, config_manager):
    config_manager.set("providers.api.enabled", True)
    monkeypatch.setenv("COMMITTER_PROVIDER", "api")
    driver = get_provider(None, config_manager)
    assert isinstance(driver, ChatCompletionsDriver)


def test_get_provider_explicit_name_disabled_by_default(config_manager):
    assert DEFAULT_CONFIG["providers"]["gemini"]["enabled"] is False
    with pytest.raises(ConfigurationError):
        get_provider("gemini", config_manager)


class _StubDriver:
    name = "claude"

    def generate_branch_name(self, prompt):
        return [BranchSuggestion(name="feature/" + prompt)]

    def generate_commit_message(self, prompt):
        return [CommitSuggestion(message="feat: " + prompt, type="feat")]


def test_client_delegates_to_driver(monkeypatch, config_manager):
    monkeypatch.setattr(
        "committer.llm.get_provider", lambda name, manager, debug=False: _StubDriver()
    )
    client = LLMClient(config_manager=config_manager)
    assert client.provider == "claude"
    assert client.suggest_branch_names("x") == [BranchSuggestion(name="feature/x")]
    assert client.suggest_commit_messages("y")[0].message == "feat: y"


@pytest.mark.parametrize("name, command", [("claude", "claude-code"), ("gemini", "gemini-cli")])
def test_bare_builtin_cli_entry_uses_default_command(name, command):
    driver = select_provider(name, _settings(**{name: {"enabled": True}}))
    assert isinstance(driver, CommandDriver)
    assert driver.command == command


def test_bare_api_entry_needs_endpoint():
    assert backend_kind(ProviderConfig(name="api")) == HTTP_BACKEND
    with pytest.raises(ConfigurationError, match="API endpoint is required"):
        select_provider("api", _settings(api={"enabled": True}))
