# tests/test_auth.py
import pytest

from workdrive.auth import StaticTokenProvider, TokenProvider


def test_static_token_provider_returns_token():
    provider = StaticTokenProvider(" 1000.abc \n")

    assert isinstance(provider, TokenProvider)
    assert provider.generate_access_token() == "1000.abc"
    assert provider.generate_access_token() == "1000.abc"


@pytest.mark.parametrize("token", ["", "   "])
def test_static_token_provider_rejects_empty_token(token):
    with pytest.raises(ValueError, match="cannot be empty"):
        StaticTokenProvider(token)


def test_token_provider_is_abstract():
    with pytest.raises(TypeError):
        TokenProvider()
