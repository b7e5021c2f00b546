"""Session, role resolution and role gating for the mobile app's auth layer."""

from accessgate.auth import SessionManager
from accessgate.gating import RoleGate, evaluate_gate
from accessgate.models import Identity, Profile, Role, SessionState
from accessgate.roles import ROLE_RANKS, is_admin, is_super_admin, satisfies

__all__ = [
    "Identity",
    "Profile",
    "ROLE_RANKS",
    "Role",
    "RoleGate",
    "SessionManager",
    "SessionState",
    "evaluate_gate",
    "is_admin",
    "is_super_admin",
    "satisfies",
]
