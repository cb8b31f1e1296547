"""
Sheetbase Core - Credentials.

Supplies the bearer token attached to every remote call. Acquiring the
token (OAuth consent, service accounts) happens elsewhere; a missing token
is a fatal precondition failure, never a retryable one.
"""

from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable

from sheetbase.exceptions import CredentialMissingException


class TokenProvider(ABC):
    """Source of bearer tokens for the remote store."""

    @abstractmethod
    async def get_token(self) -> str:
        """Return a bearer token or raise CredentialMissingException."""
        ...


class StaticTokenProvider(TokenProvider):
    """Token fixed at construction (settings, environment)."""

    def __init__(self, token: str | None):
        self._token = (token or "").strip()

    async def get_token(self) -> str:
        if not self._token:
            raise CredentialMissingException()
        return self._token


class CallableTokenProvider(TokenProvider):
    """Token fetched from an async callable on every call (refreshing sources)."""

    def __init__(self, fetch: Callable[[], Awaitable[str | None]]):
        self._fetch = fetch

    async def get_token(self) -> str:
        token = ((await self._fetch()) or "").strip()
        if not token:
            raise CredentialMissingException()
        return token
