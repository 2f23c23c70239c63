import pytest


def test_lazy_imports_and_caching():
    import committer  # triggers committer.__getattr__

    # First access loads and caches
    Manager1 = committer.ConfigManager
    from committer.config import ConfigManager as RealManager

    assert Manager1 is RealManager
    # Second access should use cached value
    assert "ConfigManager" in vars(committer)
    assert committer.ConfigManager is RealManager


@pytest.mark.parametrize("name", [
    "LLMClient", "CommandDriver", "ChatCompletionsDriver", "parse_suggestions",
    "BranchGenerator", "ProviderResponseInvalid",
])
def test_public_names_resolve(name):
    import committer

    assert getattr(committer, name) is not None
    assert name in committer.__all__


def test_unknown_attribute_raises():
    import committer

    with pytest.raises(AttributeError):
        getattr(committer, "TotallyUnknownSymbol")


def test_version():
    import committer

    assert committer.__version__ == "0.1.0"
