from __future__ import annotations

import os

# Console-only logging for the test run; must be set before the config
# singleton is first built.
os.environ["LOG_FILE"] = ""
os.environ.setdefault("APP_ENV", "production")

import pytest

from accessgate.auth import SessionManager
from accessgate.fixtures import FixtureIdentitySource
from accessgate.logger import StructuredLogger
from accessgate.models.enums import Role
from accessgate.models.identity import Profile

from .helpers.fakes import ALICE, BOB, FakeIdentityProvider, FakeProfileStore


@pytest.fixture
def logger() -> StructuredLogger:
    return StructuredLogger(name="tests")


@pytest.fixture
def provider() -> FakeIdentityProvider:
    p = FakeIdentityProvider()
    p.register("alice@example.com", "correct-horse", ALICE)
    p.register("bob@example.com", "battery-staple", BOB)
    return p


@pytest.fixture
def profiles() -> FakeProfileStore:
    return FakeProfileStore(
        profiles={
            ALICE.id: Profile(id=ALICE.id, role=Role.STAFF, name="Alice"),
            BOB.id: Profile(id=BOB.id, role=Role.LOCATION_ADMIN, name="Bob"),
        }
    )


@pytest.fixture
def release_session(provider, profiles, logger):
    session = SessionManager(provider=provider, profile_store=profiles, logger=logger)
    session.start()
    yield session
    session.close()


@pytest.fixture
def dev_session(provider, profiles, logger):
    session = SessionManager(
        provider=provider,
        profile_store=profiles,
        logger=logger,
        dev_identities=FixtureIdentitySource(logger=logger),
    )
    session.start()
    yield session
    session.close()
