"""
Development Identity Fixtures.

Canned identities for dev-mode impersonation, one per role.
``FixtureIdentitySource`` is the only way ``SessionManager`` reaches this
table, and the composition root constructs it only for development
builds, so release builds have no path to a fixture identity.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping, NamedTuple

from accessgate.logger import StructuredLogger
from accessgate.models.enums import Role
from accessgate.models.identity import Identity, Profile
from accessgate.roles import RoleLike, parse_role


class DevUser(NamedTuple):
    """A fixture row: the identity and profile installed together."""

    identity: Identity
    profile: Profile


def _dev_user(user_id: str, email: str, role: Role, name: str) -> DevUser:
    return DevUser(
        identity=Identity(id=user_id, email=email),
        profile=Profile(id=user_id, role=role, name=name),
    )


DEV_USERS: Mapping[Role, DevUser] = MappingProxyType({
    Role.SUPER_ADMIN: _dev_user(
        "dev-super-admin", "admin@example.com", Role.SUPER_ADMIN, "Super Admin (Dev)",
    ),
    Role.LOCATION_ADMIN: _dev_user(
        "dev-location-admin", "manager@example.com", Role.LOCATION_ADMIN,
        "Location Manager (Dev)",
    ),
    Role.STAFF: _dev_user(
        "dev-staff", "staff@example.com", Role.STAFF, "Staff Member (Dev)",
    ),
    Role.CUSTOMER: _dev_user(
        "dev-customer", "customer@example.com", Role.CUSTOMER, "Customer (Dev)",
    ),
})


class FixtureIdentitySource:
    """Synchronous identity source backed by ``DEV_USERS``.

    Parameters
    ----------
    logger:
        Structured logger; lookups of unknown roles are logged here.
    fixtures:
        Override table, mainly for tests.  Defaults to ``DEV_USERS``.
    """

    def __init__(
        self,
        logger: StructuredLogger,
        fixtures: Mapping[Role, DevUser] = DEV_USERS,
    ) -> None:
        self._logger = logger
        self._fixtures = fixtures

    @property
    def roles(self) -> tuple[Role, ...]:
        """Roles that have a fixture, in table order."""
        return tuple(self._fixtures)

    def lookup(self, role: RoleLike) -> DevUser:
        """Return the fixture for *role*.

        Raises:
            UnknownRoleError: If *role* is not a recognised role.
            KeyError: If the role is valid but has no fixture.
        """
        dev_user = self._fixtures[parse_role(role)]
        self._logger.debug("Serving dev fixture %s.", dev_user.identity.id)
        return dev_user
