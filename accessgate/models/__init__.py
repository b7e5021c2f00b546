from __future__ import annotations

"""
Data Models Package.

Re-exports all Pydantic models for short imports:
    from accessgate.models import Identity, Profile, SessionState, Role
"""

from accessgate.models.enums import AuthChangeEvent, GateDecision, Role, SessionStatus
from accessgate.models.identity import Identity, Profile, default_profile
from accessgate.models.auth_models import AuthErrorCode, AuthResult
from accessgate.models.session_state import SessionState

__all__ = [
    "AuthChangeEvent",
    "AuthErrorCode",
    "AuthResult",
    "GateDecision",
    "Identity",
    "Profile",
    "Role",
    "SessionState",
    "SessionStatus",
    "default_profile",
]
