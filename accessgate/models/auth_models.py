"""
Authentication Pipeline Models.

Pydantic models and enumerations for the request/result contracts
between the identity provider, ``SessionManager`` and the UI layer.

Every provider-backed auth operation returns a structured ``AuthResult``
rather than raising, so callers branch on ``success`` and never inspect
raw exceptions.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any, Optional

from pydantic import BaseModel


# ---------------------------------------------------------------------------
# Error classification
# ---------------------------------------------------------------------------

class AuthErrorCode(StrEnum):
    """Categories of identity-provider failures."""

    INVALID_CREDENTIALS = "invalid_credentials"
    EMAIL_NOT_CONFIRMED = "email_not_confirmed"
    USER_BANNED = "user_banned"
    EMAIL_ALREADY_EXISTS = "email_already_exists"
    WEAK_PASSWORD = "weak_password"
    NETWORK_ERROR = "network_error"
    RATE_LIMITED = "rate_limited"
    VALIDATION_ERROR = "validation_error"
    UNKNOWN_ERROR = "unknown_error"


# ---------------------------------------------------------------------------
# Supabase error-code mapping
# ---------------------------------------------------------------------------

# Substrings found in Supabase auth error codes / messages.  Order matters:
# the first match wins.
SUPABASE_ERROR_MAP: dict[str, AuthErrorCode] = {
    "invalid_credentials": AuthErrorCode.INVALID_CREDENTIALS,
    "invalid login credentials": AuthErrorCode.INVALID_CREDENTIALS,
    "invalid_grant": AuthErrorCode.INVALID_CREDENTIALS,
    "email_not_confirmed": AuthErrorCode.EMAIL_NOT_CONFIRMED,
    "email not confirmed": AuthErrorCode.EMAIL_NOT_CONFIRMED,
    "user_banned": AuthErrorCode.USER_BANNED,
    "user_already_exists": AuthErrorCode.EMAIL_ALREADY_EXISTS,
    "already registered": AuthErrorCode.EMAIL_ALREADY_EXISTS,
    "weak_password": AuthErrorCode.WEAK_PASSWORD,
    "over_email_send_rate_limit": AuthErrorCode.RATE_LIMITED,
    "over_request_rate_limit": AuthErrorCode.RATE_LIMITED,
    "rate limit": AuthErrorCode.RATE_LIMITED,
    "validation_failed": AuthErrorCode.VALIDATION_ERROR,
    "invalid email": AuthErrorCode.VALIDATION_ERROR,
}


def classify_auth_error(exc: BaseException) -> AuthErrorCode:
    """Map a provider or network exception to an ``AuthErrorCode``."""
    # RuntimeError is what SupabaseConnection raises when unconfigured.
    if isinstance(exc, (ConnectionError, TimeoutError, RuntimeError)):
        return AuthErrorCode.NETWORK_ERROR

    haystack = " ".join(
        str(part).lower()
        for part in (getattr(exc, "code", None), exc)
        if part
    )
    for needle, code in SUPABASE_ERROR_MAP.items():
        if needle in haystack:
            return code
    return AuthErrorCode.UNKNOWN_ERROR


# ---------------------------------------------------------------------------
# Unified auth response
# ---------------------------------------------------------------------------

class AuthResult(BaseModel):
    """Unified response for sign-up, sign-in, sign-out and password reset.

    Attributes
    ----------
    success:
        ``True`` when the provider call completed without error.
    error_code:
        Structured error category (``None`` on success).
    error_message:
        The provider's error message, verbatim (``None`` on success).
    user_id:
        Id of the created / authenticated user, when the provider returned one.
    email:
        The normalised email address the call was made with.
    data:
        The provider's raw record, for callers that need more than the id.
    """

    success: bool
    error_code: Optional[AuthErrorCode] = None
    error_message: Optional[str] = None
    user_id: Optional[str] = None
    email: Optional[str] = None
    data: Optional[dict[str, Any]] = None

    model_config = {"from_attributes": True}

    @classmethod
    def ok(cls, **fields: Any) -> "AuthResult":
        return cls(success=True, **fields)

    @classmethod
    def from_exception(cls, exc: BaseException, email: Optional[str] = None) -> "AuthResult":
        return cls(
            success=False,
            error_code=classify_auth_error(exc),
            error_message=str(exc) or type(exc).__name__,
            email=email,
        )
