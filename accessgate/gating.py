"""
Role Gating.

Presentation-neutral gates that decide whether protected content is
shown for the current session.  A gate never renders anything itself:
it hands back the caller's content, the caller's fallback, or an
``AccessRestricted`` description the view layer can draw.

Usage::

    gate = RoleGate(Role.LOCATION_ADMIN, fallback=not_authorized_label)
    widget = gate.render(session.state, lambda: build_admin_panel(parent))
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Generic, Optional, TypeVar, Union

from accessgate.models.enums import GateDecision, Role
from accessgate.models.identity import Profile
from accessgate.models.session_state import SessionState
from accessgate.roles import RoleLike, parse_role, satisfies

T = TypeVar("T")
Content = Union[T, Callable[[], T]]


@dataclass(frozen=True)
class AccessRestricted:
    """What to tell a user who lacks the required role."""

    required_role: Role
    current_role: str
    message: str

    title: str = "Access Restricted"


def evaluate_gate(
    profile: Optional[Profile],
    required_role: RoleLike,
    loading: bool,
) -> GateDecision:
    """Decide a gate.  While loading the answer is ``PENDING``, never allow or deny."""
    if loading:
        return GateDecision.PENDING
    if satisfies(profile, required_role):
        return GateDecision.GRANTED
    return GateDecision.DENIED


def restricted_message(required_role: Role, profile: Optional[Profile]) -> AccessRestricted:
    label = required_role.value.replace("_", " ", 1)
    return AccessRestricted(
        required_role=required_role,
        current_role=str(profile.role) if profile is not None else "none",
        message=f"This content requires {label} permissions.",
    )


class RoleGate(Generic[T]):
    """Reusable gate for one required role.

    Parameters
    ----------
    required_role:
        Minimum role (ranked).  An unknown role raises ``UnknownRoleError``.
    fallback:
        Returned when access is denied.  ``None`` renders nothing.
    show_message:
        Return an ``AccessRestricted`` instead of *fallback* on denial.
    """

    def __init__(
        self,
        required_role: RoleLike,
        fallback: Optional[Content[T]] = None,
        show_message: bool = False,
    ) -> None:
        self.required_role: Role = parse_role(required_role)
        self._fallback = fallback
        self._show_message = show_message

    def decide(self, state: SessionState) -> GateDecision:
        return evaluate_gate(state.profile, self.required_role, state.loading)

    def render(
        self,
        state: SessionState,
        content: Content[T],
    ) -> Union[T, AccessRestricted, None]:
        """Resolve *content*, the fallback, a restriction notice, or ``None``.

        Callables are only invoked for the branch that is taken, so a
        denied gate never builds the protected view.
        """
        decision = self.decide(state)
        if decision is GateDecision.PENDING:
            return None
        if decision is GateDecision.GRANTED:
            return _resolve(content)
        if self._show_message:
            return restricted_message(self.required_role, state.profile)
        return _resolve(self._fallback)


def _resolve(content: Optional[Content[T]]) -> Optional[T]:
    if callable(content):
        return content()
    return content


def admin_only(fallback: Optional[Content[T]] = None) -> RoleGate[T]:
    return RoleGate(Role.LOCATION_ADMIN, fallback=fallback)


def super_admin_only(fallback: Optional[Content[T]] = None) -> RoleGate[T]:
    # Ranked like every other gate; use roles.is_super_admin for an exact match.
    return RoleGate(Role.SUPER_ADMIN, fallback=fallback)


def staff_only(fallback: Optional[Content[T]] = None) -> RoleGate[T]:
    return RoleGate(Role.STAFF, fallback=fallback)
