"""Identity models returned by the auth service."""

from __future__ import annotations

from email.utils import formatdate
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


def _format_timestamp(timestamp_ms: int | None) -> str | None:
    """Render a provider millisecond timestamp as an RFC 1123 UTC string."""
    if timestamp_ms is None:
        return None
    return formatdate(timestamp_ms / 1000, usegmt=True)


class AuthUser(BaseModel):
    """Simplified user object returned by the service."""

    model_config = ConfigDict(populate_by_name=True)

    uid: str = Field(description="Provider user id")
    email: str | None = Field(default=None)
    display_name: str | None = Field(default=None, alias="displayName")
    photo_url: str | None = Field(default=None, alias="photoURL")
    email_verified: bool = Field(default=False, alias="emailVerified")
    disabled: bool = Field(default=False)
    custom_claims: dict[str, Any] | None = Field(default=None, alias="customClaims")
    created_at: str | None = Field(default=None, alias="createdAt")
    last_sign_in: str | None = Field(default=None, alias="lastSignIn")

    @classmethod
    def from_record(cls, user: Any) -> AuthUser:
        """Map a firebase_admin ``UserRecord`` to an ``AuthUser``."""
        metadata = getattr(user, "user_metadata", None)
        return cls(
            uid=user.uid,
            email=user.email,
            display_name=user.display_name,
            photo_url=user.photo_url,
            email_verified=bool(user.email_verified),
            disabled=bool(user.disabled),
            custom_claims=user.custom_claims,
            created_at=_format_timestamp(
                getattr(metadata, "creation_timestamp", None)
            ),
            last_sign_in=_format_timestamp(
                getattr(metadata, "last_sign_in_timestamp", None)
            ),
        )


class ListUsersResult(BaseModel):
    """One page of users plus the token for the next page."""

    model_config = ConfigDict(populate_by_name=True)

    users: list[AuthUser] = Field(default_factory=list)
    page_token: str | None = Field(default=None, alias="pageToken")


class DeleteUsersSummary(BaseModel):
    """Result summary of a bulk delete."""

    success_count: int
    failure_count: int
    errors: list[dict[str, Any]] = Field(default_factory=list)
