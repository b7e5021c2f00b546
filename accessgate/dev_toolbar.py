"""
Dev Toolbar View-Model.

Everything the floating dev toolbar needs, without any widget code:
labels and colours per role, the status line, and actions forwarding to
``SessionManager``.  In release builds ``visible`` is ``False`` and the
actions do nothing, because the manager has no fixture source.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from accessgate.auth import SessionManager
from accessgate.models.enums import Role
from accessgate.models.session_state import SessionState

ROLE_COLORS: dict[str, str] = {
    Role.SUPER_ADMIN: "#e74c3c",
    Role.LOCATION_ADMIN: "#f39c12",
    Role.STAFF: "#3498db",
    Role.CUSTOMER: "#2ecc71",
    "none": "#95a5a6",
}

ROLE_LABELS: dict[str, str] = {
    Role.SUPER_ADMIN: "Super Admin",
    Role.LOCATION_ADMIN: "Location Admin",
    Role.STAFF: "Staff",
    Role.CUSTOMER: "Customer",
}


def role_color(role: Optional[str]) -> str:
    return ROLE_COLORS.get(role or "none", ROLE_COLORS["none"])


def role_label(role: Optional[str]) -> str:
    if role is None:
        return "none"
    return ROLE_LABELS.get(role, role)


@dataclass(frozen=True)
class RoleButton:
    role: Role
    label: str
    color: str
    active: bool


class DevToolbarModel:
    """View-model backing the dev toolbar.

    Parameters
    ----------
    session:
        The application's ``SessionManager``.
    """

    def __init__(self, session: SessionManager) -> None:
        self._session = session
        self.expanded: bool = False

    @property
    def visible(self) -> bool:
        return self._session.is_development

    def current_role(self, state: Optional[SessionState] = None) -> str:
        state = state or self._session.state
        return str(state.role) if state.role is not None else "none"

    def status_text(self, state: Optional[SessionState] = None) -> str:
        state = state or self._session.state
        if state.dev_mode:
            return f"Mock: {role_label(self.current_role(state))}"
        return "Real Auth"

    def collapsed_icon(self, state: Optional[SessionState] = None) -> str:
        state = state or self._session.state
        return "\U0001F6E0\ufe0f" if state.dev_mode else "\U0001F510"

    def status_color(self, state: Optional[SessionState] = None) -> str:
        return role_color(self.current_role(state))

    def role_buttons(self, state: Optional[SessionState] = None) -> list[RoleButton]:
        """One button per fixture role; empty unless dev mode is active."""
        state = state or self._session.state
        if not state.dev_mode:
            return []
        current = self.current_role(state)
        return [
            RoleButton(
                role=role,
                label=role_label(role),
                color=role_color(role),
                active=current == role,
            )
            for role in self._session.dev_roles
        ]

    # -- Actions ---------------------------------------------------------

    def toggle(self) -> None:
        self.expanded = not self.expanded

    def enable(self) -> None:
        self._session.enable_dev_mode()

    def select_role(self, role: Role) -> None:
        self._session.switch_dev_role(role)

    def exit(self) -> None:
        self._session.disable_dev_mode()
