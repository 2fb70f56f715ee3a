"""Supabase auth token verification."""

import logging
from dataclasses import dataclass
from uuid import UUID

from supabase import AuthError, Client

from meal_planner.services.auth import AuthClient

_logger = logging.getLogger(__name__)


@dataclass
class SupabaseAuthClient(AuthClient):
    """Resolves access tokens through Supabase auth."""

    client: Client

    def get_user_id(self, access_token: str) -> UUID | None:
        """Return the user id for a valid token, otherwise None."""
        try:
            response = self.client.auth.get_user(access_token)
        except AuthError as exc:
            _logger.info("Rejected access token: %s", exc)
            return None
        if response is None or response.user is None:
            return None
        return UUID(response.user.id)
