"""
Authentication & Session State.

Provides an injectable ``SessionManager`` that owns the process-wide
``(user, profile, loading, dev_mode)`` aggregate, drives it from the
identity provider's change notifications, and exposes the auth and
dev-impersonation operations.

Usage::

    from accessgate.auth import SessionManager

    session = SessionManager(
        provider=identity_provider,
        profile_store=profile_repository,
        logger=StructuredLogger(name="session"),
        dev_identities=fixture_source,   # None in release builds
    )
    session.start()
    ...
    session.close()

Ordering
--------
Collaborator calls (session lookup, profile fetch, provider operations)
run outside the state lock.  Every transition commits in one lock
acquisition.  Session lookups and profile fetches carry a generation
token; a completion whose token is no longer the latest of its kind is
discarded, so a slow fetch can never overwrite a newer transition.
"""

from __future__ import annotations

import threading
from typing import Any, Callable, Mapping, Optional

from accessgate.fixtures import DevUser, FixtureIdentitySource
from accessgate.logger import StructuredLogger
from accessgate.models.auth_models import AuthResult
from accessgate.models.enums import AuthChangeEvent, Role
from accessgate.models.identity import Identity, Profile, default_profile
from accessgate.models.session_state import SessionState
from accessgate.providers import IdentityProvider, ProfileStore, Subscription
from accessgate.roles import (
    ROLE_RANKS,
    RoleLike,
    UnknownRoleError,
    is_admin,
    is_super_admin,
    satisfies,
)

StateListener = Callable[[SessionState], None]


class SessionManager:
    """Injectable owner of the session state machine.

    Parameters
    ----------
    provider:
        Remote identity provider (``SupabaseIdentityProvider`` in production).
    profile_store:
        Remote profile store (``ProfileRepository`` in production).
    logger:
        Structured JSON logger.
    dev_identities:
        Fixture-backed identity source.  Only development builds pass one;
        when ``None`` every dev operation is logged and ignored.
    default_dev_role:
        Role used by ``enable_dev_mode()`` when called without a role.
    """

    ROLES: Mapping[Role, int] = ROLE_RANKS

    def __init__(
        self,
        provider: IdentityProvider,
        profile_store: ProfileStore,
        logger: StructuredLogger,
        dev_identities: Optional[FixtureIdentitySource] = None,
        default_dev_role: Role = Role.SUPER_ADMIN,
    ) -> None:
        self._provider: IdentityProvider = provider
        self._profile_store: ProfileStore = profile_store
        self._logger: StructuredLogger = logger
        self._dev_identities: Optional[FixtureIdentitySource] = dev_identities
        self._default_dev_role: Role = default_dev_role

        self._lock: threading.RLock = threading.RLock()
        self._user: Optional[Identity] = None
        self._profile: Optional[Profile] = None
        self._loading: bool = True
        self._dev_mode: bool = False

        self._session_generation: int = 0
        self._profile_generation: int = 0

        self._subscription: Optional[Subscription] = None
        self._listeners: list[StateListener] = []
        self._closed: bool = False

    # ==================================================================
    # Lifecycle
    # ==================================================================

    def start(self) -> None:
        """Subscribe to provider notifications and run the initial session check."""
        with self._lock:
            if self._closed:
                raise RuntimeError("SessionManager has been closed.")
            subscribe = self._subscription is None
        if subscribe:
            subscription = self._provider.on_auth_state_change(self._on_auth_state_change)
            with self._lock:
                self._subscription = subscription
        self.check_session()

    def close(self) -> None:
        """Unsubscribe from the provider and drop any in-flight completions."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            subscription, self._subscription = self._subscription, None
            self._invalidate_pending_locked()
            self._listeners.clear()

        if subscription is not None:
            try:
                subscription.unsubscribe()
            except Exception as exc:
                self._logger.warning("Failed to unsubscribe from auth events: %s", exc)

    # ==================================================================
    # State access
    # ==================================================================

    @property
    def state(self) -> SessionState:
        """Consistent snapshot of the aggregate."""
        with self._lock:
            return self._snapshot_locked()

    @property
    def user(self) -> Optional[Identity]:
        with self._lock:
            return self._user

    @property
    def profile(self) -> Optional[Profile]:
        with self._lock:
            return self._profile

    @property
    def loading(self) -> bool:
        with self._lock:
            return self._loading

    @property
    def dev_mode(self) -> bool:
        with self._lock:
            return self._dev_mode

    @property
    def is_development(self) -> bool:
        """``True`` when dev operations are available in this build."""
        return self._dev_identities is not None

    @property
    def dev_roles(self) -> tuple[Role, ...]:
        """Roles offered by the fixture table; empty in release builds."""
        if self._dev_identities is None:
            return ()
        return self._dev_identities.roles

    def add_listener(self, listener: StateListener) -> Callable[[], None]:
        """Call *listener* with every new snapshot.  Returns an unsubscribe callable."""
        with self._lock:
            self._listeners.append(listener)

        def _remove() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return _remove

    # ==================================================================
    # Permission helpers
    # ==================================================================

    def has_role(self, required_role: RoleLike) -> bool:
        """True when the current profile ranks at or above *required_role*."""
        return satisfies(self.profile, required_role)

    def is_admin(self) -> bool:
        """True for location admins and above."""
        return is_admin(self.profile)

    def is_super_admin(self) -> bool:
        """True only when the role is exactly ``super_admin``."""
        return is_super_admin(self.profile)

    # ==================================================================
    # Auth operations
    # ==================================================================

    def create_account(
        self,
        email: str,
        password: str,
        attributes: Optional[Mapping[str, Any]] = None,
    ) -> AuthResult:
        """Register an account.  Never mutates session state."""
        return self._provider.create_account(email, password, attributes or {})

    def authenticate(self, email: str, password: str) -> AuthResult:
        """Sign in with a password.

        State is not touched here.  On success the provider's change
        notification drives the ``LOADING -> AUTHENTICATED_REAL`` transition.
        """
        return self._provider.authenticate(email, password)

    def end_session(self) -> AuthResult:
        """Leave dev mode, end the provider session, then clear identity.

        On provider failure the identity is left in place with
        ``dev_mode`` already cleared; treat a failed result as "session
        may not be fully cleared" and retry.  Listeners hear about the
        cleared dev flag only once the provider call has settled, so a
        fixture identity is never published as a real one on success.
        """
        with self._lock:
            was_dev = self._dev_mode
            self._dev_mode = False

        result = self._provider.end_session()
        if not result.success:
            if was_dev:
                self._notify()
            self._logger.warning(
                "Sign-out failed; session may not be fully cleared: %s",
                result.error_message,
                extra={"event": "SIGN_OUT_FAILED", "error_code": str(result.error_code)},
            )
            return result

        with self._lock:
            user = self._user
            self._invalidate_pending_locked()
            self._user = None
            self._profile = None
            self._loading = False
        self._notify()

        self._logger.info(
            "User signed out: %s",
            user.email if user is not None else "unknown",
            extra={
                "event": "SIGN_OUT",
                "user_id": user.id if user is not None else "unknown",
                "dev_mode": str(was_dev),
            },
        )
        return result

    def request_password_reset(self, email: str) -> AuthResult:
        """Ask the provider to send a reset email.  Never mutates session state."""
        return self._provider.request_password_reset(email)

    # Names used by the screens.
    sign_up = create_account
    sign_in = authenticate
    sign_out = end_session
    reset_password = request_password_reset

    # ==================================================================
    # Dev impersonation
    # ==================================================================

    def enable_dev_mode(self, role: Optional[RoleLike] = None) -> None:
        """Impersonate the fixture for *role*.  Ignored outside development builds."""
        if self._dev_identities is None:
            self._logger.warning(
                "Dev mode is only available in development builds.",
                extra={"event": "DEV_MODE_UNAVAILABLE"},
            )
            return

        dev_user = self._lookup_fixture(role if role is not None else self._default_dev_role)
        if dev_user is None:
            return

        with self._lock:
            if self._closed:
                return
            self._dev_mode = True
            self._invalidate_pending_locked()
            self._user = dev_user.identity
            self._profile = dev_user.profile
            self._loading = False
        self._notify()

        self._logger.info(
            "Dev mode enabled as %s.", dev_user.profile.role,
            extra={"event": "DEV_MODE_ENABLED", "role": str(dev_user.profile.role)},
        )

    def switch_dev_role(self, role: RoleLike) -> None:
        """Swap the impersonated fixture in place.  No-op unless dev mode is on."""
        if self._dev_identities is None or not self.dev_mode:
            self._logger.debug(
                "switch_dev_role(%s) ignored: dev mode is not active.", role,
                extra={"event": "DEV_MODE_UNAVAILABLE"},
            )
            return

        dev_user = self._lookup_fixture(role)
        if dev_user is None:
            return

        with self._lock:
            if not self._dev_mode:
                return
            self._user = dev_user.identity
            self._profile = dev_user.profile
        self._notify()

        self._logger.info(
            "Dev role switched to %s.", dev_user.profile.role,
            extra={"event": "DEV_ROLE_SWITCHED", "role": str(dev_user.profile.role)},
        )

    def disable_dev_mode(self) -> None:
        """Drop the fixture identity and pick a real session back up, if any."""
        with self._lock:
            if not self._dev_mode:
                return
            self._dev_mode = False
            self._invalidate_pending_locked()
            self._user = None
            self._profile = None
            self._loading = True
        self._notify()

        self._logger.info("Dev mode disabled.", extra={"event": "DEV_MODE_DISABLED"})
        self.check_session()

    # ==================================================================
    # Session check and provider notifications
    # ==================================================================

    def check_session(self) -> None:
        """Ask the provider for a persisted session and settle state from it."""
        with self._lock:
            if self._dev_mode or self._closed:
                return
            self._session_generation += 1
            token = self._session_generation
            changed = not self._loading
            self._loading = True
        if changed:
            self._notify()

        identity: Optional[Identity] = None
        try:
            identity = self._provider.get_session()
        except Exception as exc:
            self._logger.warning(
                "Session check error: %s", exc,
                extra={"event": "SESSION_CHECK"},
            )

        self._settle_session(token, AuthChangeEvent.INITIAL_SESSION, identity)

    def _on_auth_state_change(self, event: str, identity: Optional[Identity]) -> None:
        with self._lock:
            if self._closed:
                return
            if self._dev_mode:
                self._logger.debug(
                    "Auth event %s ignored while dev mode is active.", event,
                    extra={"event": "AUTH_STATE_CHANGE"},
                )
                return
            self._session_generation += 1
            token = self._session_generation

        self._logger.info(
            "Auth state change: %s", event,
            extra={
                "event": "AUTH_STATE_CHANGE",
                "auth_event": event,
                "user_id": identity.id if identity is not None else "none",
            },
        )
        self._settle_session(token, event, identity)

    def _settle_session(
        self,
        token: int,
        event: str,
        identity: Optional[Identity],
    ) -> None:
        fetch_token: Optional[int] = None
        with self._lock:
            if self._closed or self._dev_mode or token != self._session_generation:
                self._logger.debug(
                    "Discarding stale session result (%s).", event,
                    extra={"event": "STALE_RESULT_DISCARDED", "generation": token},
                )
                return

            if identity is None:
                self._profile_generation += 1
                self._user = None
                self._profile = None
                self._loading = False
            elif (
                event == AuthChangeEvent.TOKEN_REFRESHED
                and self._user is not None
                and self._user.id == identity.id
                and self._profile is not None
            ):
                self._user = identity
                self._loading = False
            else:
                self._profile_generation += 1
                fetch_token = self._profile_generation
                self._user = identity
                self._profile = None
                self._loading = True
        self._notify()

        if fetch_token is not None and identity is not None:
            self._load_profile(identity, fetch_token)

    def _load_profile(self, identity: Identity, token: int) -> None:
        """Fetch the profile, falling back to the lowest-privilege default."""
        try:
            profile = self._profile_store.fetch_profile_by_user_id(identity.id)
        except Exception as exc:
            self._logger.warning(
                "Fetch profile error for %s: %s. Using default profile.",
                identity.id,
                exc,
                extra={"event": "PROFILE_FETCH_FAILED", "user_id": identity.id},
            )
            profile = default_profile(identity.id)

        with self._lock:
            if (
                self._closed
                or self._dev_mode
                or token != self._profile_generation
                or self._user is None
                or self._user.id != identity.id
            ):
                self._logger.debug(
                    "Discarding stale profile for %s.", identity.id,
                    extra={"event": "STALE_RESULT_DISCARDED", "generation": token},
                )
                return
            self._profile = profile
            self._loading = False
        self._notify()

    # ==================================================================
    # Internals
    # ==================================================================

    def _lookup_fixture(self, role: RoleLike) -> Optional[DevUser]:
        if self._dev_identities is None:
            return None
        try:
            return self._dev_identities.lookup(role)
        except (UnknownRoleError, KeyError) as exc:
            self._logger.warning(
                "No dev fixture for role %r: %s", role, exc,
                extra={"event": "DEV_MODE_UNAVAILABLE"},
            )
            return None

    def _invalidate_pending_locked(self) -> None:
        self._session_generation += 1
        self._profile_generation += 1

    def _snapshot_locked(self) -> SessionState:
        return SessionState(
            user=self._user,
            profile=self._profile,
            loading=self._loading,
            dev_mode=self._dev_mode,
        )

    def _notify(self) -> None:
        with self._lock:
            snapshot = self._snapshot_locked()
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener(snapshot)
            except Exception as exc:
                self._logger.error(
                    "Session listener failed: %s", exc, exc_info=True,
                )
