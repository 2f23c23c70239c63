import logging

import pytest

from committer.config import ProviderConfig
from committer.exceptions import ProviderResponseInvalid, TransportError
from committer.providers import base as base_mod
from committer.providers.base import BaseDriver
from committer.suggestions import BranchSuggestion, CommitSuggestion


class FakeDriver(BaseDriver):
    label = "Fake"

    def __init__(self, response, debug=False):
        super().__init__(ProviderConfig(name="fake", enabled=True), debug=debug)
        self.response = response
        self.prompts = []

    def execute(self, prompt):
        self.prompts.append(prompt)
        if isinstance(self.response, Exception):
            raise self.response
        return self.response


def test_branch_instruction_appended_to_prompt():
    driver = FakeDriver('[{"name":"feature/x","description":"d"}]')
    driver.generate_branch_name("PROMPT")
    assert driver.prompts == [
        "PROMPT\n\nRespond only with valid JSON array format containing "
        "branch name suggestions."
    ]


def test_commit_instruction_appended_to_prompt():
    driver = FakeDriver('[{"message":"feat: add x","type":"feat"}]')
    driver.generate_commit_message("PROMPT")
    assert driver.prompts[0].endswith(
        "containing commit message suggestions."
    )


def test_branch_pipeline_parses_wrapped_json():
    driver = FakeDriver(
        'Here are suggestions:\n[{"name":"feature/login","description":"add login"}]'
    )
    assert driver.generate_branch_name("p") == [
        BranchSuggestion(name="feature/login", description="add login")
    ]


def test_commit_pipeline_uses_heuristics_for_prose():
    driver = FakeDriver("1. fix: handle null user in session\n2. docs: update readme")
    result = driver.generate_commit_message("p")
    assert result == [
        CommitSuggestion(message="fix: handle null user in session", type="fix"),
        CommitSuggestion(message="docs: update readme", type="docs"),
    ]


@pytest.mark.parametrize("response", ["", "short", None, 42])
def test_invalid_responses_rejected_before_parsing(monkeypatch, response):
    calls = []
    monkeypatch.setattr(
        base_mod, "parse_suggestions", lambda *a, **k: calls.append(a) or []
    )
    driver = FakeDriver(response)
    with pytest.raises(ProviderResponseInvalid):
        driver.generate_branch_name("p")
    assert calls == []


def test_short_response_message():
    driver = FakeDriver("too short")
    with pytest.raises(ProviderResponseInvalid, match="too short"):
        driver.generate_commit_message("p")


def test_transport_errors_propagate():
    driver = FakeDriver(TransportError("boom"))
    with pytest.raises(TransportError, match="boom"):
        driver.generate_branch_name("p")


def test_greedy_brackets_degrade_to_heuristics():
    driver = FakeDriver('Use [brackets] carefully\n[{"name": "x"}]')
    result = driver.generate_branch_name("p")
    assert result == [
        BranchSuggestion(name="feature/update", description="Generated suggestion 1")
    ]


def test_parse_error_inside_pipeline_uses_fallback(monkeypatch, caplog):
    def broken(text, kind):
        raise AttributeError("nope")

    monkeypatch.setattr(base_mod, "parse_suggestions", broken)
    driver = FakeDriver("1. feature/login\n2. fix/crash")
    with caplog.at_level(logging.WARNING, logger="committer.providers.base"):
        result = driver.generate_branch_name("p")
    assert [s.name for s in result] == ["feature/login", "fix/crash"]
    assert "Fake response parsing failed" in caplog.text


def test_debug_prints_normalized_preview(capsys):
    driver = FakeDriver('[{"name":"feature/x"}]', debug=True)
    driver.generate_branch_name("p")
    out = capsys.readouterr().out
    assert "DEBUG(Driver:fake): normalized" in out


def test_name_comes_from_config():
    assert FakeDriver("x" * 20).name == "fake"


def test_deeply_nested_brackets_never_raise():
    driver = FakeDriver("[" * 100000 + "]" * 100000)
    result = driver.generate_branch_name("p")
    assert result == [
        BranchSuggestion(name="feature/update", description="Generated suggestion 1")
    ]
