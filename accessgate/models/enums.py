"""
Shared Enumerations for accessgate Models.

All string enumerations for type-safe field constraints.
StrEnum values compare equal to their string equivalents, so records
coming back from the profile store (``role = 'staff'``) validate directly.
"""

from __future__ import annotations

from enum import StrEnum


class Role(StrEnum):
    """Permission tiers, declared from lowest to highest rank.

    The declaration order *is* the total order.  Ranks live in
    ``accessgate.roles.ROLE_RANKS``; never compare two roles with ``<``
    (that would compare the strings alphabetically).
    """

    CUSTOMER = "customer"
    STAFF = "staff"
    LOCATION_ADMIN = "location_admin"
    SUPER_ADMIN = "super_admin"


class SessionStatus(StrEnum):
    """States of the session state machine."""

    LOADING = "loading"
    UNAUTHENTICATED = "unauthenticated"
    AUTHENTICATED_REAL = "authenticated_real"
    AUTHENTICATED_DEV = "authenticated_dev"


class AuthChangeEvent(StrEnum):
    """Events pushed by the identity provider's change-notification stream."""

    INITIAL_SESSION = "INITIAL_SESSION"
    SIGNED_IN = "SIGNED_IN"
    SIGNED_OUT = "SIGNED_OUT"
    TOKEN_REFRESHED = "TOKEN_REFRESHED"
    USER_UPDATED = "USER_UPDATED"
    PASSWORD_RECOVERY = "PASSWORD_RECOVERY"
    MFA_CHALLENGE_VERIFIED = "MFA_CHALLENGE_VERIFIED"


class GateDecision(StrEnum):
    """Outcome of evaluating a role gate."""

    PENDING = "PENDING"
    GRANTED = "GRANTED"
    DENIED = "DENIED"
