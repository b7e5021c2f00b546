"""
Session State Snapshot.

``SessionState`` is the immutable aggregate ``{user, profile, loading,
dev_mode}`` handed to presentation code.  ``SessionManager`` builds a new
snapshot on every committed transition; readers never see a half-applied
change.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel

from accessgate.models.enums import Role, SessionStatus
from accessgate.models.identity import Identity, Profile


class SessionState(BaseModel):
    """Read-only view of the current session."""

    user: Optional[Identity] = None
    profile: Optional[Profile] = None
    loading: bool = True
    dev_mode: bool = False

    model_config = {"frozen": True}

    @property
    def status(self) -> SessionStatus:
        if self.dev_mode and self.user is not None:
            return SessionStatus.AUTHENTICATED_DEV
        if self.loading:
            return SessionStatus.LOADING
        if self.user is None:
            return SessionStatus.UNAUTHENTICATED
        return SessionStatus.AUTHENTICATED_REAL

    @property
    def role(self) -> Optional[Role]:
        return self.profile.role if self.profile is not None else None

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None and self.profile is not None
