from __future__ import annotations

import pytest

from accessgate.gating import (
    AccessRestricted,
    RoleGate,
    admin_only,
    evaluate_gate,
    staff_only,
    super_admin_only,
)
from accessgate.models.enums import GateDecision, Role
from accessgate.models.identity import Identity, Profile
from accessgate.models.session_state import SessionState
from accessgate.roles import UnknownRoleError


def _state(role=None, loading=False) -> SessionState:
    if role is None:
        return SessionState(loading=loading)
    return SessionState(
        user=Identity(id="uid-1", email="u@example.com"),
        profile=Profile(id="uid-1", role=role),
        loading=loading,
    )


def test_loading_is_pending_even_for_super_admin():
    profile = Profile(role=Role.SUPER_ADMIN)
    assert evaluate_gate(profile, Role.CUSTOMER, loading=True) is GateDecision.PENDING
    assert evaluate_gate(None, Role.CUSTOMER, loading=True) is GateDecision.PENDING


def test_evaluate_gate_grants_and_denies_by_rank():
    assert evaluate_gate(Profile(role=Role.STAFF), Role.STAFF, False) is GateDecision.GRANTED
    assert evaluate_gate(Profile(role=Role.STAFF), Role.LOCATION_ADMIN, False) is GateDecision.DENIED
    assert evaluate_gate(None, Role.CUSTOMER, False) is GateDecision.DENIED


def test_render_while_loading_builds_nothing():
    built = []
    gate = RoleGate(Role.CUSTOMER, fallback=lambda: built.append("fallback"))

    assert gate.render(_state(Role.SUPER_ADMIN, loading=True), lambda: built.append("content")) is None
    assert built == []


def test_render_granted_returns_content():
    gate = RoleGate("staff")
    assert gate.render(_state(Role.LOCATION_ADMIN), "panel") == "panel"
    assert gate.render(_state(Role.STAFF), lambda: "built") == "built"


def test_render_denied_returns_fallback():
    assert RoleGate(Role.STAFF).render(_state(Role.CUSTOMER), "panel") is None
    gate = RoleGate(Role.STAFF, fallback="Not authorized")
    assert gate.render(_state(Role.CUSTOMER), "panel") == "Not authorized"
    lazy = RoleGate(Role.STAFF, fallback=lambda: "lazy fallback")
    assert lazy.render(_state(), "panel") == "lazy fallback"


def test_denied_never_builds_content():
    def _explode():
        raise AssertionError("protected content built")

    assert RoleGate(Role.SUPER_ADMIN).render(_state(Role.STAFF), _explode) is None


def test_show_message_describes_restriction():
    gate = RoleGate(Role.LOCATION_ADMIN, show_message=True)

    notice = gate.render(_state(Role.CUSTOMER), "panel")
    assert isinstance(notice, AccessRestricted)
    assert notice.title == "Access Restricted"
    assert notice.message == "This content requires location admin permissions."
    assert notice.current_role == "customer"
    assert notice.required_role is Role.LOCATION_ADMIN

    anonymous = gate.render(_state(), "panel")
    assert anonymous.current_role == "none"


def test_unknown_required_role_is_rejected_up_front():
    with pytest.raises(UnknownRoleError):
        RoleGate("owner")


def test_preconfigured_gates():
    assert admin_only().required_role is Role.LOCATION_ADMIN
    assert staff_only().required_role is Role.STAFF
    assert super_admin_only().required_role is Role.SUPER_ADMIN

    assert admin_only().decide(_state(Role.SUPER_ADMIN)) is GateDecision.GRANTED
    assert staff_only(fallback="no").render(_state(Role.CUSTOMER), "yes") == "no"
    assert super_admin_only().decide(_state(Role.LOCATION_ADMIN)) is GateDecision.DENIED


def test_gate_follows_live_session(dev_session):
    gate = admin_only(fallback="denied")
    dev_session.enable_dev_mode(Role.STAFF)
    assert gate.render(dev_session.state, "admin panel") == "denied"
    dev_session.switch_dev_role(Role.LOCATION_ADMIN)
    assert gate.render(dev_session.state, "admin panel") == "admin panel"
