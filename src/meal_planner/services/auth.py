"""Request authentication."""

from dataclasses import dataclass
from typing import Protocol
from uuid import UUID


class AuthClient(Protocol):
    """Interface for resolving access tokens to users."""

    def get_user_id(self, access_token: str) -> UUID | None:
        """Return the user id for a token, or None when invalid."""


@dataclass
class AuthService:
    """Resolves the caller's identity from a bearer token."""

    client: AuthClient

    def authenticate(self, authorization: str | None) -> UUID | None:
        """Return the user id for an ``Authorization: Bearer`` header."""
        if not authorization:
            return None
        scheme, _, token = authorization.partition(" ")
        if scheme.lower() != "bearer" or not token.strip():
            return None
        return self.client.get_user_id(token.strip())
