"""FastAPI dependency implementations."""

from __future__ import annotations

from typing import Any

from fastapi import Depends, Request
from loguru import logger

from src.cred.api.http.app_data import ApplicationDependencies
from src.cred.core.errors import AuthError
from src.cred.core.services import AuthService, FirestoreService
from src.cred.runtime.context import get_config


def get_auth_service(request: Request) -> AuthService:
    """Get the Firebase Auth service instance."""
    app_deps: ApplicationDependencies = request.app.state.app_dependencies
    return app_deps.auth_service


def get_firestore_service(request: Request) -> FirestoreService:
    """Get the Firestore service instance."""
    app_deps: ApplicationDependencies = request.app.state.app_dependencies
    return app_deps.firestore_service


async def require_auth(
    request: Request,
    auth_service: AuthService = Depends(get_auth_service),
) -> dict[str, Any]:
    """Require a valid ID token in the ``Authorization: Bearer <token>`` header.

    On success the decoded claims are stored on ``request.state.user`` and
    returned to the caller.
    """
    header = request.headers.get("Authorization")
    if not header or not header.startswith("Bearer "):
        raise AuthError(AuthError.NO_TOKEN_PROVIDED)

    id_token = header.split("Bearer ", 1)[1]

    try:
        decoded = await auth_service.verify_id_token(
            id_token, check_revoked=get_config().auth.check_revoked
        )
    except Exception as exc:
        logger.bind(error_type=type(exc).__name__).info("ID token rejected")
        raise AuthError(AuthError.INVALID_TOKEN) from None

    request.state.user = decoded
    return decoded


def require_role(role: str):
    """Create a dependency that requires a truthy custom claim named ``role``.

    Usage: ``dependencies=[Depends(require_role("admin"))]``. Token
    verification runs first through ``require_auth``.
    """

    async def dep(claims: dict[str, Any] = Depends(require_auth)) -> dict[str, Any]:
        if not claims.get(role):
            raise AuthError(AuthError.UNAUTHORIZED)
        return claims

    return dep
