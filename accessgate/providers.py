"""
Collaborator Contracts.

Structural interfaces for the two external collaborators the session
layer consumes.  The production implementations are
``SupabaseIdentityProvider`` and ``ProfileRepository``; tests supply fakes.
"""

from __future__ import annotations

from typing import Any, Callable, Mapping, Optional, Protocol

from accessgate.models.auth_models import AuthResult
from accessgate.models.identity import Identity, Profile

# (event name, identity or None).  Invoked on whatever thread the
# provider delivers notifications on.
AuthStateCallback = Callable[[str, Optional[Identity]], None]


class Subscription(Protocol):
    def unsubscribe(self) -> None: ...  # noqa: E704


class IdentityProvider(Protocol):
    """Remote identity provider.

    The four auth operations must return an ``AuthResult`` and never
    raise.  ``get_session`` may raise; the caller treats a failure as
    "no session".
    """

    def create_account(
        self, email: str, password: str, attributes: Mapping[str, Any],
    ) -> AuthResult: ...  # noqa: E704

    def authenticate(self, email: str, password: str) -> AuthResult: ...  # noqa: E704

    def end_session(self) -> AuthResult: ...  # noqa: E704

    def request_password_reset(self, email: str) -> AuthResult: ...  # noqa: E704

    def get_session(self) -> Optional[Identity]: ...  # noqa: E704

    def on_auth_state_change(self, callback: AuthStateCallback) -> Subscription: ...  # noqa: E704


class ProfileStore(Protocol):
    """Remote profile store.  Raises on any failure, including a missing row."""

    def fetch_profile_by_user_id(self, user_id: str) -> Profile: ...  # noqa: E704
