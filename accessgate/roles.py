"""
Role Resolution.

Single source of truth for role ordering and permission checks.  Every
function here is pure: it reads a profile, never the session.

The total order is ``customer < staff < location_admin < super_admin``.
``satisfies`` compares by rank; ``is_super_admin`` is deliberately an
exact match so that a role ranked above super_admin in the future does
not silently open super-admin-only surfaces.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping, Optional, Union

from accessgate.models.enums import Role
from accessgate.models.identity import Profile

RoleLike = Union[Role, str]


class UnknownRoleError(ValueError):
    """Raised when a string does not name a known ``Role``."""

    def __init__(self, value: object) -> None:
        super().__init__(f"Unknown role: {value!r}")
        self.value = value


# Higher number = more permissions.
ROLE_RANKS: Mapping[Role, int] = MappingProxyType({
    Role.CUSTOMER: 1,
    Role.STAFF: 2,
    Role.LOCATION_ADMIN: 3,
    Role.SUPER_ADMIN: 4,
})

LOWEST_ROLE: Role = min(ROLE_RANKS, key=ROLE_RANKS.__getitem__)


def parse_role(value: RoleLike) -> Role:
    """Return the ``Role`` named by *value*.

    Only the canonical lowercase values are accepted; ``" STAFF "`` is
    rejected rather than normalised, matching how ``Profile`` validates
    rows from the profile store.

    Raises:
        UnknownRoleError: If *value* is not a recognised role.
    """
    if isinstance(value, Role):
        return value
    try:
        return Role(value)
    except ValueError:
        raise UnknownRoleError(value) from None


def coerce_role(value: object) -> Optional[Role]:
    """Like ``parse_role`` but returns ``None`` instead of raising."""
    if value is None:
        return None
    try:
        return parse_role(value)  # type: ignore[arg-type]
    except UnknownRoleError:
        return None


def rank(role: RoleLike) -> int:
    """Rank of *role* in the total order (1 = lowest)."""
    return ROLE_RANKS[parse_role(role)]


def satisfies(profile: Optional[Profile], required_role: RoleLike) -> bool:
    """``True`` when *profile* ranks at or above *required_role*.

    Returns ``False`` for a missing profile or an unrecognised profile
    role.  An unrecognised *required_role* is a programming error and
    raises ``UnknownRoleError``.
    """
    required = parse_role(required_role)
    if profile is None:
        return False
    held = coerce_role(getattr(profile, "role", None))
    if held is None:
        return False
    return ROLE_RANKS[held] >= ROLE_RANKS[required]


def is_admin(profile: Optional[Profile]) -> bool:
    """Location admin or above."""
    return satisfies(profile, Role.LOCATION_ADMIN)


def is_super_admin(profile: Optional[Profile]) -> bool:
    """Exact super_admin match, not a ranked comparison."""
    if profile is None:
        return False
    return coerce_role(getattr(profile, "role", None)) is Role.SUPER_ADMIN
