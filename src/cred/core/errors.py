"""Application error catalogue.

Errors are grouped per concern as flat ``(code, status, message)`` entries.
Raise them with ``raise AuthError(AuthError.USER_NOT_FOUND)``; the HTTP layer
turns any ``CustomError`` into ``{"error": message}`` with its status.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from firebase_admin import auth as firebase_auth


@dataclass(frozen=True)
class ErrorInfo:
    """A single catalogue entry."""

    code: int
    status: int
    message: str


class CustomError(Exception):
    """Base class for errors that carry an HTTP status and a numeric code."""

    def __init__(self, info: ErrorInfo) -> None:
        super().__init__(info.message)
        self.info = info

    @property
    def code(self) -> int:
        return self.info.code

    @property
    def status(self) -> int:
        return self.info.status

    @property
    def message(self) -> str:
        return self.info.message

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(code={self.code}, status={self.status}, "
            f"message={self.message!r})"
        )


class AuthError(CustomError):
    INVALID_TOKEN: ClassVar[ErrorInfo] = ErrorInfo(
        100, 401, "Invalid or expired authentication token"
    )
    NO_TOKEN_PROVIDED: ClassVar[ErrorInfo] = ErrorInfo(
        101, 401, "No authentication token provided"
    )
    USER_NOT_FOUND: ClassVar[ErrorInfo] = ErrorInfo(102, 404, "User not found")
    USER_ALREADY_EXISTS: ClassVar[ErrorInfo] = ErrorInfo(
        103, 409, "A user with this email already exists"
    )
    WEAK_PASSWORD: ClassVar[ErrorInfo] = ErrorInfo(
        104, 400, "Password must be at least 6 characters"
    )
    INVALID_EMAIL: ClassVar[ErrorInfo] = ErrorInfo(
        105, 400, "The email address is invalid"
    )
    USER_DISABLED: ClassVar[ErrorInfo] = ErrorInfo(
        106, 403, "This user account has been disabled"
    )
    UNAUTHORIZED: ClassVar[ErrorInfo] = ErrorInfo(
        107, 403, "You are not authorized to perform this action"
    )


class RequestError(CustomError):
    MISSING_CREDENTIALS: ClassVar[ErrorInfo] = ErrorInfo(
        200, 400, "Email and password are required"
    )
    INVALID_CLAIMS: ClassVar[ErrorInfo] = ErrorInfo(
        201, 400, "Claims must be a valid object"
    )


class ServiceError(CustomError):
    LIST_USERS_FAILED: ClassVar[ErrorInfo] = ErrorInfo(300, 500, "Failed to list users")
    CREATE_USER_FAILED: ClassVar[ErrorInfo] = ErrorInfo(
        301, 500, "Failed to create user"
    )


class InternalError(CustomError):
    NO_APP_PORT: ClassVar[ErrorInfo] = ErrorInfo(
        0, 500, "Could not find app port env variable"
    )
    NO_FIREBASE_CREDENTIALS: ClassVar[ErrorInfo] = ErrorInfo(
        1, 500, "Could not find Firebase credentials env variable"
    )


class InvalidCursorError(ValueError):
    """Raised when a pagination cursor document does not exist."""

    def __init__(self, collection_path: str, doc_id: str) -> None:
        super().__init__(
            f'Invalid pagination cursor: document "{doc_id}" does not exist '
            f'in collection "{collection_path}".'
        )
        self.collection_path = collection_path
        self.doc_id = doc_id


# ---------------------------------------------------------------------------
# Provider error mapping
# ---------------------------------------------------------------------------

PROVIDER_ERROR_MAP: dict[str, ErrorInfo] = {
    "auth/email-already-exists": AuthError.USER_ALREADY_EXISTS,
    "auth/invalid-email": AuthError.INVALID_EMAIL,
    "auth/weak-password": AuthError.WEAK_PASSWORD,
    "auth/invalid-password": AuthError.WEAK_PASSWORD,
    "auth/user-not-found": AuthError.USER_NOT_FOUND,
    "auth/user-disabled": AuthError.USER_DISABLED,
    "auth/id-token-expired": AuthError.INVALID_TOKEN,
    "auth/id-token-revoked": AuthError.INVALID_TOKEN,
    "auth/invalid-id-token": AuthError.INVALID_TOKEN,
    "auth/session-cookie-expired": AuthError.INVALID_TOKEN,
    "auth/session-cookie-revoked": AuthError.INVALID_TOKEN,
    "auth/invalid-session-cookie": AuthError.INVALID_TOKEN,
}

# Ordered: expired/revoked token errors subclass InvalidIdTokenError.
_SDK_ERROR_CODES: tuple[tuple[type[Exception], str], ...] = (
    (firebase_auth.EmailAlreadyExistsError, "auth/email-already-exists"),
    (firebase_auth.UserNotFoundError, "auth/user-not-found"),
    (firebase_auth.UserDisabledError, "auth/user-disabled"),
    (firebase_auth.ExpiredIdTokenError, "auth/id-token-expired"),
    (firebase_auth.RevokedIdTokenError, "auth/id-token-revoked"),
    (firebase_auth.ExpiredSessionCookieError, "auth/session-cookie-expired"),
    (firebase_auth.RevokedSessionCookieError, "auth/session-cookie-revoked"),
    (firebase_auth.InvalidSessionCookieError, "auth/invalid-session-cookie"),
    (firebase_auth.InvalidIdTokenError, "auth/invalid-id-token"),
)


# Messages raised by firebase_admin._auth_utils.validate_email / validate_password.
_SDK_VALIDATION_PREFIXES: tuple[tuple[tuple[str, ...], str], ...] = (
    (("Invalid email: ", "Malformed email address string: "), "auth/invalid-email"),
    (("Invalid password string.",), "auth/weak-password"),
)


def provider_error_code(error: BaseException) -> str | None:
    """Return the ``auth/...`` code string for a provider error, if any.

    The Admin SDK reports most failures as typed exceptions and validates
    email and password arguments locally with ``ValueError``; errors that
    already expose an ``auth/`` code string are passed through.
    """
    code = getattr(error, "code", None)
    if isinstance(code, str) and code.startswith("auth/"):
        return code

    for error_type, mapped in _SDK_ERROR_CODES:
        if isinstance(error, error_type):
            return mapped

    if isinstance(error, ValueError):
        text = str(error)
        for prefixes, mapped in _SDK_VALIDATION_PREFIXES:
            if text.startswith(prefixes):
                return mapped

    return None


def map_provider_error(error: BaseException) -> ErrorInfo | None:
    """Map a provider error onto a catalogue entry, or ``None`` if unmatched."""
    code = provider_error_code(error)
    if code is None:
        return None
    return PROVIDER_ERROR_MAP.get(code)
