"""
Base Repository.

Shared infrastructure for repositories: the Supabase connection, the
logger, and the table each repository reads.
"""

from __future__ import annotations

from supabase import Client as SupabaseClient

from accessgate.client import SupabaseConnection
from accessgate.logger import StructuredLogger


class BaseRepository:
    """Base class for all repositories. Receives dependencies via __init__."""

    TABLE: str = ""

    def __init__(
        self,
        connection: SupabaseConnection,
        logger: StructuredLogger,
        table: str = "",
    ) -> None:
        self._connection = connection
        self._logger = logger
        self._table: str = table or self.TABLE

    @property
    def supabase(self) -> SupabaseClient:
        """Returns the Supabase client.  Raises ``RuntimeError`` when unconfigured."""
        return self._connection.client
