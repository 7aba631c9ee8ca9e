# auth.py
from abc import ABC, abstractmethod


class TokenProvider(ABC):
    """
    Supplies OAuth access tokens to the adapter.
    The adapter asks for a token before every request, so implementations
    that talk to an OAuth server are expected to handle refresh themselves.
    """

    @abstractmethod
    def generate_access_token(self) -> str:
        pass


class StaticTokenProvider(TokenProvider):
    """Hands out a fixed, already issued access token."""

    def __init__(self, access_token: str):
        if not access_token or not access_token.strip():
            raise ValueError("Access token cannot be empty.")
        self.access_token = access_token.strip()

    def generate_access_token(self) -> str:
        return self.access_token
