from collections.abc import Generator
from pathlib import Path

import pytest


@pytest.fixture(autouse=True)
def isolated_config(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> Generator[Path, None, None]:
    # Never read or write the user's real ~/.committer during tests
    config_home = tmp_path / ".committer"
    monkeypatch.setenv("COMMITTER_CONFIG_HOME", str(config_home))
    monkeypatch.delenv("COMMITTER_PROVIDER", raising=False)
    monkeypatch.delenv("COMMITTER_HTTP_TIMEOUT", raising=False)
    yield config_home


@pytest.fixture
def config_manager(isolated_config: Path):
    from committer.config import ConfigManager

    return ConfigManager(isolated_config)


@pytest.fixture(autouse=True)
def _block_real_http(monkeypatch):
    """Fail loudly if a test forgets to stub httpx.post."""
    import httpx

    def fake_post(url, *args, **kwargs):  # noqa: D401
        raise AssertionError(f"unexpected real HTTP call to {url}")

    monkeypatch.setattr(httpx, "post", fake_post)
