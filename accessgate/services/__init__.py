"""
Service Layer Package.

The ``create_services()`` factory wires the Supabase-backed collaborators,
the optional dev fixture source and the ``SessionManager`` together,
returning a typed dict that the presentation layer consumes without
knowing the internal dependency graph.
"""

from __future__ import annotations

from typing import Optional, TypedDict

from accessgate.auth import SessionManager
from accessgate.client import SupabaseConnection
from accessgate.config import AppConfig
from accessgate.fixtures import FixtureIdentitySource
from accessgate.logger import get_logger
from accessgate.repositories.profile_repository import ProfileRepository
from accessgate.services.identity_provider import SupabaseIdentityProvider


class ServiceContainer(TypedDict):
    """Typed container for the wired services.

    ``fixture_source`` is ``None`` in release builds.
    """

    identity_provider: SupabaseIdentityProvider
    profile_repository: ProfileRepository
    fixture_source: Optional[FixtureIdentitySource]
    session: SessionManager


def create_services(
    connection: SupabaseConnection,
    config: AppConfig,
) -> ServiceContainer:
    """
    Wire collaborators and the session manager together.

    This is the single composition root for the auth layer.  Dev
    impersonation is selected here, from configuration, and nowhere else.

    Args:
        connection: Supabase connection shared by both collaborators.
        config: Application configuration.

    Returns:
        ServiceContainer mapping service names to fully-wired instances.
    """
    identity_provider = SupabaseIdentityProvider(
        connection=connection,
        logger=get_logger("identity_provider"),
        password_reset_redirect_url=config.PASSWORD_RESET_REDIRECT_URL,
    )
    profile_repository = ProfileRepository(
        connection=connection,
        logger=get_logger("profiles"),
        table=config.PROFILES_TABLE,
    )

    fixture_source: Optional[FixtureIdentitySource] = None
    if config.is_development:
        fixture_source = FixtureIdentitySource(logger=get_logger("dev_fixtures"))

    session = SessionManager(
        provider=identity_provider,
        profile_store=profile_repository,
        logger=get_logger("session"),
        dev_identities=fixture_source,
        default_dev_role=config.DEV_DEFAULT_ROLE,
    )

    return ServiceContainer(
        identity_provider=identity_provider,
        profile_repository=profile_repository,
        fixture_source=fixture_source,
        session=session,
    )
