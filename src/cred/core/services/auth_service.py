"""Firebase Authentication service wrapper.

Provides a centralized interface for all Firebase Auth admin operations.
Route handlers depend on ``AuthService`` instead of calling ``firebase_admin.auth``
directly. The Admin SDK is blocking, so every call is pushed to a worker
thread.
"""

from __future__ import annotations

import asyncio
from datetime import timedelta
from typing import Any

import firebase_admin
from firebase_admin import auth
from loguru import logger

from src.cred.core.models.auth import AuthUser, DeleteUsersSummary, ListUsersResult

MAX_LIST_RESULTS = 1000
MAX_BULK_DELETE = 1000


class AuthService:
    def __init__(self, app: firebase_admin.App | None = None):
        self._app = app

    async def _call(self, fn, *args, **kwargs):
        return await asyncio.to_thread(fn, *args, app=self._app, **kwargs)

    # -- Token verification ------------------------------------------------

    async def verify_id_token(
        self, id_token: str, check_revoked: bool = False
    ) -> dict[str, Any]:
        """Verify an ID token and return the decoded claims.

        Set ``check_revoked`` to also reject tokens whose refresh tokens were
        revoked or whose user is disabled.
        """
        return await self._call(
            auth.verify_id_token, id_token, check_revoked=check_revoked
        )

    async def verify_session_cookie(
        self, session_cookie: str, check_revoked: bool = False
    ) -> dict[str, Any]:
        """Verify a session cookie and return the decoded claims."""
        return await self._call(
            auth.verify_session_cookie, session_cookie, check_revoked=check_revoked
        )

    # -- User CRUD ---------------------------------------------------------

    async def get_user_by_uid(self, uid: str) -> AuthUser:
        user = await self._call(auth.get_user, uid)
        return AuthUser.from_record(user)

    async def get_user_by_email(self, email: str) -> AuthUser:
        user = await self._call(auth.get_user_by_email, email)
        return AuthUser.from_record(user)

    async def create_user(
        self,
        email: str,
        password: str,
        display_name: str | None = None,
        **properties: Any,
    ) -> AuthUser:
        """Create a new user. ``email`` and ``password`` are required."""
        kwargs = _drop_unset(display_name=display_name, **properties)
        user = await self._call(
            auth.create_user, email=email, password=password, **kwargs
        )
        logger.info("Created user {}", user.uid)
        return AuthUser.from_record(user)

    async def update_user(self, uid: str, **properties: Any) -> AuthUser:
        """Update an existing user; properties left as ``None`` are not sent."""
        user = await self._call(auth.update_user, uid, **_drop_unset(**properties))
        return AuthUser.from_record(user)

    async def delete_user(self, uid: str) -> None:
        await self._call(auth.delete_user, uid)
        logger.info("Deleted user {}", uid)

    async def delete_users(self, uids: list[str]) -> DeleteUsersSummary:
        """Delete up to 1000 users at once and return the result summary."""
        if len(uids) > MAX_BULK_DELETE:
            raise ValueError(
                f"Cannot delete more than {MAX_BULK_DELETE} users in one call"
            )
        result = await self._call(auth.delete_users, uids)
        return DeleteUsersSummary(
            success_count=result.success_count,
            failure_count=result.failure_count,
            errors=[{"index": e.index, "reason": e.reason} for e in result.errors],
        )

    async def list_users(
        self, max_results: int = 100, page_token: str | None = None
    ) -> ListUsersResult:
        """List one page of users."""
        page = await self._call(
            auth.list_users,
            page_token=page_token,
            max_results=min(max_results, MAX_LIST_RESULTS),
        )
        return ListUsersResult(
            users=[AuthUser.from_record(u) for u in page.users],
            page_token=page.next_page_token or None,
        )

    # -- Custom claims (role management) ----------------------------------

    async def set_custom_claims(self, uid: str, claims: dict[str, Any]) -> None:
        """Set custom claims on a user, e.g. ``{"admin": True}``.

        This overwrites all existing claims; use ``merge_custom_claims`` to keep them.
        """
        await self._call(auth.set_custom_user_claims, uid, claims)

    async def merge_custom_claims(self, uid: str, claims: dict[str, Any]) -> None:
        user = await self._call(auth.get_user, uid)
        merged = {**(user.custom_claims or {}), **claims}
        await self._call(auth.set_custom_user_claims, uid, merged)

    async def clear_custom_claims(self, uid: str) -> None:
        await self._call(auth.set_custom_user_claims, uid, {})

    # -- Sessions ----------------------------------------------------------

    async def create_session_cookie(self, id_token: str, expires_in: int) -> str:
        """Create a session cookie from an ID token.

        ``expires_in`` is in milliseconds; the provider accepts 5 minutes to 14 days.
        """
        cookie = await self._call(
            auth.create_session_cookie,
            id_token,
            expires_in=timedelta(milliseconds=expires_in),
        )
        return cookie.decode() if isinstance(cookie, bytes) else cookie

    async def revoke_refresh_tokens(self, uid: str) -> None:
        """Revoke all refresh tokens for a user, invalidating their sessions."""
        await self._call(auth.revoke_refresh_tokens, uid)
        logger.info("Revoked refresh tokens for user {}", uid)

    # -- Email actions -----------------------------------------------------

    async def generate_password_reset_link(self, email: str) -> str:
        return await self._call(auth.generate_password_reset_link, email)

    async def generate_email_verification_link(self, email: str) -> str:
        return await self._call(auth.generate_email_verification_link, email)


def _drop_unset(**properties: Any) -> dict[str, Any]:
    return {key: value for key, value in properties.items() if value is not None}
