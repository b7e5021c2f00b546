from __future__ import annotations

import pytest

from accessgate.auth import SessionManager
from accessgate.models.auth_models import AuthErrorCode
from accessgate.models.enums import Role, SessionStatus
from accessgate.models.identity import Identity, Profile

from .helpers.fakes import ALICE, BOB


def test_initial_state_is_loading(provider, profiles, logger):
    session = SessionManager(provider=provider, profile_store=profiles, logger=logger)
    state = session.state
    assert state.loading is True
    assert state.user is None and state.profile is None
    assert state.dev_mode is False
    assert state.status is SessionStatus.LOADING


def test_start_without_session_is_unauthenticated(release_session, provider):
    state = release_session.state
    assert state.status is SessionStatus.UNAUTHENTICATED
    assert state.loading is False
    assert len(provider.callbacks) == 1


def test_start_restores_persisted_session(provider, profiles, logger):
    provider.session = ALICE
    session = SessionManager(provider=provider, profile_store=profiles, logger=logger)
    session.start()
    try:
        assert session.user == ALICE
        assert session.profile.role is Role.STAFF
        assert session.loading is False
        assert session.state.status is SessionStatus.AUTHENTICATED_REAL
    finally:
        session.close()


def test_session_check_error_settles_unauthenticated(provider, profiles, logger):
    provider.get_session_error = ConnectionError("offline")
    session = SessionManager(provider=provider, profile_store=profiles, logger=logger)
    session.start()
    try:
        assert session.user is None
        assert session.loading is False
    finally:
        session.close()


def test_authenticate_is_driven_by_change_notification(release_session, profiles):
    result = release_session.authenticate("alice@example.com", "correct-horse")

    assert result.success is True
    assert result.user_id == ALICE.id
    assert release_session.user == ALICE
    assert release_session.profile == profiles.profiles[ALICE.id]
    assert release_session.loading is False
    assert profiles.calls == [ALICE.id]


def test_authenticate_failure_leaves_state_untouched(release_session):
    before = release_session.state
    result = release_session.authenticate("alice@example.com", "wrong")

    assert result.success is False
    assert result.error_code is AuthErrorCode.INVALID_CREDENTIALS
    assert result.error_message == "Invalid login credentials"
    assert release_session.state == before


def test_provider_error_is_returned_not_raised(release_session, provider):
    provider.failures["authenticate"] = TimeoutError("request timed out")
    result = release_session.sign_in("alice@example.com", "correct-horse")
    assert result.success is False
    assert result.error_code is AuthErrorCode.NETWORK_ERROR
    assert result.error_message == "request timed out"


def test_profile_fetch_failure_falls_back_to_lowest_role(release_session, profiles):
    profiles.error = ConnectionError("profiles unreachable")

    result = release_session.authenticate("alice@example.com", "correct-horse")

    assert result.success is True
    assert result.error_message is None
    assert release_session.user == ALICE
    assert release_session.profile.role is Role.CUSTOMER
    assert release_session.loading is False


def test_missing_profile_row_falls_back_to_lowest_role(release_session, provider):
    carol = Identity(id="uid-carol", email="carol@example.com")
    provider.register("carol@example.com", "pw", carol)

    release_session.authenticate("carol@example.com", "pw")

    assert release_session.profile.role is Role.CUSTOMER
    assert release_session.profile.id == carol.id
    assert release_session.has_role(Role.STAFF) is False


def test_create_account_does_not_touch_state(release_session, provider):
    before = release_session.state
    result = release_session.create_account(
        "new@example.com", "pw", {"first_name": "New"},
    )
    assert result.success is True
    assert result.user_id == "new-user"
    assert provider.last_attributes == {"first_name": "New"}
    assert release_session.state == before


def test_create_account_error_carries_message(release_session, provider):
    provider.failures["create_account"] = Exception("User already registered")
    result = release_session.sign_up("alice@example.com", "pw")
    assert result.success is False
    assert result.error_code is AuthErrorCode.EMAIL_ALREADY_EXISTS
    assert result.error_message == "User already registered"


def test_request_password_reset_does_not_touch_state(release_session, provider):
    before = release_session.state
    result = release_session.request_password_reset("alice@example.com")
    assert result.success is True
    assert "request_password_reset" in provider.calls
    assert release_session.state == before

    provider.failures["request_password_reset"] = Exception("over_email_send_rate_limit")
    failed = release_session.reset_password("alice@example.com")
    assert failed.error_code is AuthErrorCode.RATE_LIMITED


def test_end_session_clears_identity(release_session, provider):
    release_session.authenticate("alice@example.com", "correct-horse")

    result = release_session.end_session()

    assert result.success is True
    assert "end_session" in provider.calls
    state = release_session.state
    assert state.user is None and state.profile is None
    assert state.loading is False
    assert state.status is SessionStatus.UNAUTHENTICATED


def test_end_session_failure_keeps_identity(release_session, provider):
    release_session.authenticate("alice@example.com", "correct-horse")
    provider.failures["end_session"] = ConnectionError("offline")

    result = release_session.sign_out()

    assert result.success is False
    assert result.error_code is AuthErrorCode.NETWORK_ERROR
    assert release_session.user == ALICE


def test_signed_out_notification_clears_identity(release_session, provider):
    release_session.authenticate("alice@example.com", "correct-horse")
    provider.emit("SIGNED_OUT", None)
    assert release_session.user is None
    assert release_session.profile is None
    assert release_session.loading is False


def test_token_refresh_for_same_user_skips_profile_fetch(release_session, provider, profiles):
    release_session.authenticate("alice@example.com", "correct-horse")
    states = []
    release_session.add_listener(states.append)

    provider.emit("TOKEN_REFRESHED", ALICE)

    assert profiles.calls == [ALICE.id]
    assert all(not s.loading for s in states)
    assert release_session.profile.role is Role.STAFF


def test_signed_in_as_other_user_refetches(release_session, provider, profiles):
    release_session.authenticate("alice@example.com", "correct-horse")
    provider.emit("SIGNED_IN", BOB)
    assert release_session.user == BOB
    assert release_session.profile.role is Role.LOCATION_ADMIN
    assert profiles.calls == [ALICE.id, BOB.id]


def test_permission_helpers(release_session):
    assert release_session.has_role(Role.CUSTOMER) is False
    release_session.authenticate("bob@example.com", "battery-staple")
    assert release_session.has_role(Role.STAFF) is True
    assert release_session.is_admin() is True
    assert release_session.is_super_admin() is False
    assert release_session.ROLES[Role.SUPER_ADMIN] == 4


def test_listeners_receive_snapshots_and_can_unsubscribe(release_session):
    seen = []
    remove = release_session.add_listener(seen.append)

    release_session.authenticate("alice@example.com", "correct-horse")

    assert [s.loading for s in seen] == [True, False]
    assert seen[-1].profile.role is Role.STAFF

    remove()
    release_session.end_session()
    assert len(seen) == 2


def test_failing_listener_does_not_block_others(release_session):
    seen = []

    def _boom(state):
        raise RuntimeError("listener bug")

    release_session.add_listener(_boom)
    release_session.add_listener(seen.append)
    release_session.authenticate("alice@example.com", "correct-horse")

    assert seen[-1].user == ALICE


def test_close_unsubscribes_and_blocks_restart(provider, profiles, logger):
    session = SessionManager(provider=provider, profile_store=profiles, logger=logger)
    session.start()
    assert len(provider.callbacks) == 1

    session.close()
    session.close()

    assert provider.callbacks == []
    with pytest.raises(RuntimeError):
        session.start()


def test_start_twice_subscribes_once(release_session, provider):
    release_session.start()
    assert len(provider.callbacks) == 1
    assert provider.calls.count("get_session") == 2


def test_release_build_has_no_dev_surface(release_session):
    assert release_session.is_development is False
    assert release_session.dev_roles == ()


def test_profile_is_typed(release_session):
    release_session.authenticate("alice@example.com", "correct-horse")
    assert isinstance(release_session.profile, Profile)
    assert release_session.state.role is Role.STAFF
