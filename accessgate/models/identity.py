"""
Identity and Profile Models.

``Identity`` is the authenticated principal's minimal public record;
``Profile`` is the permission-bearing record keyed by the identity's id.
Both come either from Supabase (real session) or from the dev fixture
table, never a mix of the two.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel

from accessgate.models.enums import Role


class Identity(BaseModel):
    """The currently authenticated principal."""

    id: str  # Supabase UUID or fixture id
    email: Optional[str] = None

    model_config = {"from_attributes": True, "frozen": True}


class Profile(BaseModel):
    """Permission-bearing record associated with an ``Identity``.

    Rows from the ``profiles`` table carry more columns than these; the
    extras are ignored.  An unrecognised ``role`` value fails validation,
    which the session layer treats as a failed fetch.
    """

    role: Role
    id: Optional[str] = None
    name: Optional[str] = None

    model_config = {"from_attributes": True, "frozen": True, "extra": "ignore"}


def default_profile(user_id: Optional[str] = None) -> Profile:
    """Lowest-privilege profile substituted when the profile store fails."""
    return Profile(id=user_id, role=Role.CUSTOMER)
