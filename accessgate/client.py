"""
Supabase Connection.

Owns the single Supabase client used by both external collaborators:
the identity provider (``client.auth``) and the profile store
(``client.table``).  This module only manages the connection; it
contains no auth or query logic.

Usage (dependency injection at app startup)::

    from accessgate.client import SupabaseConnection
    from accessgate.logger import StructuredLogger

    connection = SupabaseConnection(
        supabase_url=config.SUPABASE_URL,
        supabase_key=config.SUPABASE_ANON_KEY.get_secret_value(),
        logger=StructuredLogger(name="supabase"),
    )
"""

from __future__ import annotations

from typing import Optional

from supabase import Client as SupabaseClient
from supabase import create_client

from accessgate.logger import StructuredLogger


class SupabaseConnection:
    """Holds the Supabase client, fully configured at construction time.

    When ``supabase_url`` or ``supabase_key`` is empty the client is
    **not** created.  The ``client`` property then raises
    ``RuntimeError``, which the collaborators classify as a network
    error, so an unconfigured build still starts and reports failures
    through the normal ``AuthResult`` path.

    Parameters
    ----------
    supabase_url:
        The Supabase project URL (e.g. ``https://xyz.supabase.co``).
    supabase_key:
        The Supabase anonymous key.
    logger:
        A ``StructuredLogger`` instance for structured JSON log output.
    client:
        Pre-built client, bypassing ``create_client`` (tests, custom options).
    """

    def __init__(
        self,
        supabase_url: str,
        supabase_key: str,
        logger: StructuredLogger,
        client: Optional[SupabaseClient] = None,
    ) -> None:
        self._logger: StructuredLogger = logger
        self._client: Optional[SupabaseClient] = client

        if self._client is not None:
            return

        if supabase_url and supabase_key:
            try:
                self._client = create_client(supabase_url, supabase_key)
                self._logger.info("Supabase client initialized.")
            except (ValueError, TypeError) as exc:
                self._logger.warning(
                    "Supabase credential format error: %s. Provider calls will fail.",
                    exc,
                )
            except Exception as exc:
                self._logger.error(
                    "Unexpected Supabase initialization failure: %s.",
                    exc,
                    exc_info=True,
                )
        else:
            self._logger.warning(
                "Supabase credentials not configured; provider calls will fail."
            )

    @property
    def client(self) -> SupabaseClient:
        """Return the initialised Supabase client.

        Raises
        ------
        RuntimeError
            If the client was not initialised.
        """
        if self._client is None:
            raise RuntimeError(
                "Supabase client is not initialised. "
                "Check SUPABASE_URL and SUPABASE_ANON_KEY."
            )
        return self._client

    @property
    def is_online(self) -> bool:
        """``True`` when the Supabase client is available."""
        return self._client is not None
