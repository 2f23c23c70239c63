import socket

import httpx
import pytest

from committer.config import ProviderConfig
from committer.exceptions import (
    ConfigurationError,
    MalformedResponseError,
    TransportError,
)
from committer.providers.http_driver import ChatCompletionsDriver

ENDPOINT = "http://localhost:1234/v1/chat/completions"


def _driver(**overrides):
    data = {
        "name": "api",
        "enabled": True,
        "endpoint": ENDPOINT,
        "api_key": "sk-test",
        "model": "local-model",
    }
    data.update(overrides)
    return ChatCompletionsDriver(ProviderConfig(**data))


def _response(status=200, **kwargs):
    return httpx.Response(status, request=httpx.Request("POST", ENDPOINT), **kwargs)


def _completion(content):
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


def _install(monkeypatch, result, calls=None):
    def fake_post(url, **kwargs):
        if calls is not None:
            calls.append((url, kwargs))
        if isinstance(result, Exception):
            raise result
        return result

    monkeypatch.setattr(httpx, "post", fake_post)


def test_request_shape_and_content(monkeypatch):
    calls = []
    _install(monkeypatch, _response(json=_completion("  hello there  ")), calls)

    assert _driver().execute("the prompt") == "hello there"

    url, kwargs = calls[0]
    assert url == ENDPOINT
    assert kwargs["headers"]["Authorization"] == "Bearer sk-test"
    assert kwargs["headers"]["Content-Type"] == "application/json"
    assert kwargs["timeout"] == 30.0
    payload = kwargs["json"]
    assert payload["model"] == "local-model"
    assert payload["max_tokens"] == 500
    assert payload["temperature"] == 0.7
    assert payload["messages"][0]["role"] == "system"
    assert payload["messages"][1] == {"role": "user", "content": "the prompt"}


def test_no_authorization_header_without_key():
    driver = _driver(api_key=None)
    assert "Authorization" not in driver.build_headers()


def test_default_model():
    assert _driver(model=None).model == "gpt-3.5-turbo"


def test_endpoint_required():
    with pytest.raises(ConfigurationError, match="API endpoint is required"):
        _driver(endpoint=None)


def test_timeout_from_environment(monkeypatch):
    monkeypatch.setenv("COMMITTER_HTTP_TIMEOUT", "5")
    calls = []
    _install(monkeypatch, _response(json=_completion("content here")), calls)
    _driver().execute("p")
    assert calls[0][1]["timeout"] == 5.0


def test_connection_refused(monkeypatch):
    _install(monkeypatch, httpx.ConnectError("[Errno 111] Connection refused"))
    with pytest.raises(TransportError) as exc_info:
        _driver().execute("p")
    assert str(exc_info.value) == (
        f"Cannot connect to API endpoint: {ENDPOINT}. Check if the service is running."
    )


def test_name_resolution_failure_by_message(monkeypatch):
    _install(
        monkeypatch,
        httpx.ConnectError("[Errno -2] Name or service not known"),
    )
    with pytest.raises(TransportError, match="API endpoint not found"):
        _driver().execute("p")


def test_name_resolution_failure_by_cause(monkeypatch):
    def fake_post(url, **kwargs):
        try:
            raise socket.gaierror(-3, "lookup failed")
        except socket.gaierror as exc:
            raise httpx.ConnectError("connect failed") from exc

    monkeypatch.setattr(httpx, "post", fake_post)
    with pytest.raises(TransportError, match="API endpoint not found"):
        _driver().execute("p")


def test_timeout(monkeypatch):
    _install(monkeypatch, httpx.ReadTimeout("timed out"))
    with pytest.raises(TransportError) as exc_info:
        _driver().execute("p")
    assert str(exc_info.value) == f"API request timed out after 30s: {ENDPOINT}"


def test_other_http_errors(monkeypatch):
    _install(monkeypatch, httpx.RemoteProtocolError("server hung up"))
    with pytest.raises(TransportError, match="API request failed: server hung up"):
        _driver().execute("p")


def test_error_status_uses_error_message(monkeypatch):
    _install(
        monkeypatch,
        _response(500, json={"error": {"message": "model overloaded"}}),
    )
    with pytest.raises(TransportError) as exc_info:
        _driver().execute("p")
    assert str(exc_info.value) == "API error (500): model overloaded"


def test_error_status_falls_back_to_reason_phrase(monkeypatch):
    _install(monkeypatch, _response(404, text="nothing here"))
    with pytest.raises(TransportError) as exc_info:
        _driver().execute("p")
    assert str(exc_info.value) == "API error (404): Not Found"


def test_missing_choices(monkeypatch):
    _install(monkeypatch, _response(json={"object": "chat.completion"}))
    with pytest.raises(MalformedResponseError, match="Invalid response format"):
        _driver().execute("p")


def test_non_json_body(monkeypatch):
    _install(monkeypatch, _response(text="<html>proxy</html>"))
    with pytest.raises(MalformedResponseError, match="Invalid response format"):
        _driver().execute("p")


@pytest.mark.parametrize("content", [None, "", "   "])
def test_missing_content(monkeypatch, content):
    _install(monkeypatch, _response(json=_completion(content)))
    with pytest.raises(MalformedResponseError, match="No content in API response"):
        _driver().execute("p")


def test_generate_commit_message_end_to_end(monkeypatch):
    content = (
        "Here are some commit message suggestions:\n"
        '[{"message": "fix: handle empty diff", "type": "fix"}]'
    )
    _install(monkeypatch, _response(json=_completion(content)))
    result = _driver().generate_commit_message("diff here")
    assert [(s.message, s.type) for s in result] == [("fix: handle empty diff", "fix")]


@pytest.mark.parametrize(
    "text",
    [
        "[Errno -2] Name or service not known",
        "[Errno 8] nodename nor servname provided, or not known",
        "[Errno 11001] getaddrinfo failed",
        "[Errno -3] Temporary failure in name resolution",
        "[Errno -5] No address associated with hostname",
    ],
)
def test_name_resolution_detected_from_message_alone(monkeypatch, text):
    _install(monkeypatch, httpx.ConnectError(text))
    with pytest.raises(TransportError) as exc_info:
        _driver().execute("p")
    assert str(exc_info.value) == f"API endpoint not found: {ENDPOINT}"
    assert exc_info.value.__cause__.__cause__ is None


@pytest.mark.parametrize(
    "status, body, reason",
    [
        (502, "<html><body>Bad Gateway</body></html>", "Bad Gateway"),
        (503, "", "Service Unavailable"),
        (400, '["not", "an", "object"]', "Bad Request"),
    ],
)
def test_non_json_error_body_uses_reason_phrase(monkeypatch, status, body, reason):
    _install(monkeypatch, _response(status, text=body))
    with pytest.raises(TransportError) as exc_info:
        _driver().execute("p")
    assert str(exc_info.value) == f"API error ({status}): {reason}"
