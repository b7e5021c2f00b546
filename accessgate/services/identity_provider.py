"""
Supabase Identity Provider.

Adapter between the session layer and Supabase Auth.  Covers the four
provider operations (sign-up, sign-in, sign-out, password reset), the
startup session lookup, and the auth change-notification stream.

All auth operations return typed ``AuthResult`` models; the provider's
error message is passed through verbatim and classified into an
``AuthErrorCode`` for the UI.  Nothing here touches session state:
``SessionManager`` reacts to the change notifications instead.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional

from accessgate.client import SupabaseConnection
from accessgate.logger import StructuredLogger
from accessgate.models.auth_models import AuthResult
from accessgate.models.identity import Identity
from accessgate.providers import AuthStateCallback, Subscription
from accessgate.services.base_service import BaseService


def normalize_email(email: str) -> str:
    """Normalise an email address: strip whitespace and lowercase."""
    return email.strip().lower()


def identity_from_session(session: Any) -> Optional[Identity]:
    """Build an ``Identity`` from a Supabase ``Session`` (or ``None``)."""
    user = getattr(session, "user", None) if session is not None else None
    if user is None or not getattr(user, "id", None):
        return None
    return Identity(id=str(user.id), email=getattr(user, "email", None))


def _dump(response: Any) -> Optional[dict[str, Any]]:
    if response is None:
        return None
    if hasattr(response, "model_dump"):
        return response.model_dump(mode="json")
    if isinstance(response, Mapping):
        return dict(response)
    return None


class SupabaseIdentityProvider(BaseService):
    """``IdentityProvider`` backed by ``supabase.auth``.

    Parameters
    ----------
    connection:
        Shared Supabase connection.
    logger:
        Structured JSON logger.
    password_reset_redirect_url:
        Optional deep link Supabase embeds in the reset email.
    """

    def __init__(
        self,
        connection: SupabaseConnection,
        logger: StructuredLogger,
        password_reset_redirect_url: str = "",
    ) -> None:
        super().__init__(logger)
        self._connection: SupabaseConnection = connection
        self._reset_redirect: str = password_reset_redirect_url

    # ==================================================================
    # Account creation
    # ==================================================================

    def create_account(
        self,
        email: str,
        password: str,
        attributes: Mapping[str, Any],
    ) -> AuthResult:
        """Register a new account.

        Supabase usually requires email confirmation before a session
        exists, so success here does not imply a signed-in user.
        """
        email = normalize_email(email)
        try:
            response = self._connection.client.auth.sign_up({
                "email": email,
                "password": password,
                "options": {"data": dict(attributes)},
            })
        except Exception as exc:
            self._logger.warning(
                "Sign-up failed for %s: %s", email, exc,
                extra={"event": "SIGN_UP_FAILED", "email": email},
            )
            return AuthResult.from_exception(exc, email=email)

        user = getattr(response, "user", None)
        user_id: Optional[str] = str(user.id) if user is not None else None
        self._logger.info(
            "Account created for %s.", email,
            extra={"event": "SIGN_UP", "email": email, "user_id": str(user_id)},
        )
        return AuthResult.ok(user_id=user_id, email=email, data=_dump(response))

    # ==================================================================
    # Sign-in
    # ==================================================================

    def authenticate(self, email: str, password: str) -> AuthResult:
        """Password sign-in.  The resulting session arrives via the change stream."""
        email = normalize_email(email)
        try:
            response = self._connection.client.auth.sign_in_with_password({
                "email": email,
                "password": password,
            })
        except Exception as exc:
            self._logger.warning(
                "Sign-in failed for %s: %s", email, exc,
                extra={"event": "SIGN_IN_FAILED", "email": email},
            )
            return AuthResult.from_exception(exc, email=email)

        user = getattr(response, "user", None)
        return AuthResult.ok(
            user_id=str(user.id) if user is not None else None,
            email=email,
            data=_dump(response),
        )

    # ==================================================================
    # Sign-out
    # ==================================================================

    def end_session(self) -> AuthResult:
        try:
            self._connection.client.auth.sign_out()
        except Exception as exc:
            self._logger.warning(
                "Server-side sign_out failed: %s", exc,
                extra={"event": "SIGN_OUT_FAILED"},
            )
            return AuthResult.from_exception(exc)
        return AuthResult.ok()

    # ==================================================================
    # Password reset
    # ==================================================================

    def request_password_reset(self, email: str) -> AuthResult:
        email = normalize_email(email)
        options: dict[str, str] = {}
        if self._reset_redirect:
            options["redirect_to"] = self._reset_redirect
        try:
            self._connection.client.auth.reset_password_for_email(email, options)
        except Exception as exc:
            self._logger.warning(
                "Password reset error for %s: %s", email, exc,
                extra={"event": "PASSWORD_RESET_FAILED", "email": email},
            )
            return AuthResult.from_exception(exc, email=email)

        self._logger.info(
            "Password reset requested for %s.", email,
            extra={"event": "PASSWORD_RESET_REQUESTED", "email": email},
        )
        return AuthResult.ok(email=email)

    # ==================================================================
    # Session lookup and change stream
    # ==================================================================

    def get_session(self) -> Optional[Identity]:
        """Return the persisted session's identity, or ``None``.

        Raises whatever the client raises; ``SessionManager`` logs it.
        """
        return identity_from_session(self._connection.client.auth.get_session())

    def on_auth_state_change(self, callback: AuthStateCallback) -> Subscription:
        """Subscribe *callback* to Supabase auth events.

        The Supabase client passes ``(event, session)``; the callback
        receives ``(event, identity)`` so the session layer never sees
        provider types.
        """

        def _relay(event: Any, session: Any) -> None:
            callback(str(event), identity_from_session(session))

        return self._connection.client.auth.on_auth_state_change(_relay)
