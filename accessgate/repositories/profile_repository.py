"""
Profile Repository.

Reads the permission-bearing ``profiles`` row for a user id from Supabase.
Failures propagate: the session layer owns the fallback policy.
"""

from __future__ import annotations

from accessgate.client import SupabaseConnection
from accessgate.logger import StructuredLogger
from accessgate.models.identity import Profile
from accessgate.repositories.base_repository import BaseRepository


class ProfileNotFoundError(LookupError):
    """No profile row exists for the requested user id."""

    def __init__(self, user_id: str) -> None:
        super().__init__(f"No profile found for user {user_id}")
        self.user_id = user_id


class ProfileRepository(BaseRepository):
    """``ProfileStore`` over the Supabase ``profiles`` table.

    The role column is authoritative.  It is never read from
    ``user_metadata``, which the user controls at sign-up.
    """

    TABLE = "profiles"

    def __init__(
        self,
        connection: SupabaseConnection,
        logger: StructuredLogger,
        table: str = "",
    ) -> None:
        super().__init__(connection, logger, table)

    def fetch_profile_by_user_id(self, user_id: str) -> Profile:
        """Fetch the profile for *user_id*.

        Raises:
            ProfileNotFoundError: No row for *user_id*.
            pydantic.ValidationError: The row carries an unrecognised role.
            RuntimeError: Supabase is not configured.
            Exception: Any network / PostgREST error from the client.
        """
        response = (
            self.supabase.table(self._table)
            .select("*")
            .eq("id", user_id)
            .maybe_single()
            .execute()
        )
        if response is None or not response.data:
            raise ProfileNotFoundError(user_id)
        profile = Profile.model_validate(response.data)
        self._logger.debug(
            "Loaded profile for %s (role: %s).", user_id, profile.role,
        )
        return profile
