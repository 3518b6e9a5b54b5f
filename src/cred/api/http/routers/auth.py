"""Authentication endpoints.

POST   /auth/session           - Create a session cookie
GET    /auth/me                - Get current user profile (authenticated)
GET    /auth/users             - List all users (admin)
POST   /auth/user              - Create a new user (admin)
GET    /auth/user/{uid}        - Get user by UID (admin)
PUT    /auth/user/{uid}        - Update a user (admin)
DELETE /auth/user/{uid}        - Delete a user (admin)
POST   /auth/user/{uid}/claims - Set custom claims (admin)
POST   /auth/user/{uid}/revoke - Revoke refresh tokens (admin)
"""

from typing import Any, TypeVar

from fastapi import APIRouter, Body, Depends, Query, status
from fastapi.responses import JSONResponse
from loguru import logger
from pydantic import BaseModel, ConfigDict, Field

from src.cred.api.http.deps import get_auth_service, require_auth, require_role
from src.cred.core.errors import (
    AuthError,
    RequestError,
    ServiceError,
    map_provider_error,
)
from src.cred.core.services import AuthService
from src.cred.runtime.context import get_config

ADMIN_ROLE = get_config().auth.admin_claim

router = APIRouter(tags=["auth"])
admin_router = APIRouter(
    tags=["auth-admin"],
    dependencies=[Depends(require_role(ADMIN_ROLE))],
)


class SessionRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id_token: Any = Field(default=None, alias="idToken")
    expires_in: Any = Field(default=None, alias="expiresIn")


class CreateUserRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    email: Any = None
    password: Any = None
    display_name: Any = Field(default=None, alias="displayName")


class UpdateUserRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    email: Any = None
    password: Any = None
    display_name: Any = Field(default=None, alias="displayName")
    photo_url: Any = Field(default=None, alias="photoURL")
    disabled: Any = None


class ClaimsRequest(BaseModel):
    claims: Any = None


RequestModel = TypeVar("RequestModel", bound=BaseModel)


def _read_body(model: type[RequestModel], payload: Any) -> RequestModel:
    """Pick the known fields out of a JSON object; any other body reads as empty.

    Fields are untyped so presence and type checks happen in the handlers and
    answer with the catalogue messages.
    """
    return model.model_validate(payload if isinstance(payload, dict) else {})


def _user_body(user) -> dict[str, Any]:
    return {"user": user.model_dump(by_alias=True)}


# -- Public (requires valid ID token but no special role) --------------------


@router.post("/session")
async def create_session(
    payload: Any = Body(default=None),
    auth_service: AuthService = Depends(get_auth_service),
) -> dict[str, str]:
    """Exchange an ID token for a longer-lived session cookie."""
    body = _read_body(SessionRequest, payload)
    if not body.id_token:
        raise AuthError(AuthError.NO_TOKEN_PROVIDED)
    if not isinstance(body.id_token, str):
        raise AuthError(AuthError.INVALID_TOKEN)

    expires_in = body.expires_in
    if isinstance(expires_in, bool) or not isinstance(expires_in, (int, float)):
        expires_in = get_config().auth.session_expires_in_ms

    try:
        session_cookie = await auth_service.create_session_cookie(
            body.id_token, int(expires_in)
        )
    except Exception as exc:
        logger.bind(error_type=type(exc).__name__).info("Session cookie refused")
        raise AuthError(AuthError.INVALID_TOKEN) from None

    return {"sessionCookie": session_cookie}


@router.get("/me")
async def get_me(
    claims: dict[str, Any] = Depends(require_auth),
    auth_service: AuthService = Depends(get_auth_service),
) -> dict[str, Any]:
    """Return the profile of the authenticated user."""
    uid = claims.get("uid") or claims.get("sub")
    if not uid:
        raise AuthError(AuthError.NO_TOKEN_PROVIDED)

    try:
        user = await auth_service.get_user_by_uid(uid)
    except Exception:
        raise AuthError(AuthError.USER_NOT_FOUND) from None
    return _user_body(user)


# -- Admin-only routes -------------------------------------------------------


@admin_router.get("/users")
async def list_users(
    max_results: int | None = Query(default=None, alias="maxResults"),
    page_token: str | None = Query(default=None, alias="pageToken"),
    auth_service: AuthService = Depends(get_auth_service),
) -> dict[str, Any]:
    if max_results is None:
        max_results = get_config().auth.list_users_default
    try:
        result = await auth_service.list_users(
            max_results=max_results, page_token=page_token
        )
    except Exception:
        logger.exception("Listing users failed")
        raise ServiceError(ServiceError.LIST_USERS_FAILED) from None
    return result.model_dump(by_alias=True)


@admin_router.post("/user")
async def create_user(
    payload: Any = Body(default=None),
    auth_service: AuthService = Depends(get_auth_service),
) -> JSONResponse:
    body = _read_body(CreateUserRequest, payload)
    if not body.email or not body.password:
        raise RequestError(RequestError.MISSING_CREDENTIALS)
    if not isinstance(body.email, str):
        raise AuthError(AuthError.INVALID_EMAIL)
    if not isinstance(body.password, str):
        raise AuthError(AuthError.WEAK_PASSWORD)

    try:
        user = await auth_service.create_user(
            email=body.email,
            password=body.password,
            display_name=body.display_name,
        )
    except Exception as exc:
        mapped = map_provider_error(exc)
        if mapped is not None:
            raise AuthError(mapped) from None
        logger.exception("Creating user failed")
        raise ServiceError(ServiceError.CREATE_USER_FAILED) from None

    return JSONResponse(status_code=status.HTTP_201_CREATED, content=_user_body(user))


@admin_router.get("/user/{uid}")
async def get_user_by_uid(
    uid: str, auth_service: AuthService = Depends(get_auth_service)
) -> dict[str, Any]:
    try:
        user = await auth_service.get_user_by_uid(uid)
    except Exception:
        raise AuthError(AuthError.USER_NOT_FOUND) from None
    return _user_body(user)


@admin_router.put("/user/{uid}")
async def update_user(
    uid: str,
    payload: Any = Body(default=None),
    auth_service: AuthService = Depends(get_auth_service),
) -> dict[str, Any]:
    body = _read_body(UpdateUserRequest, payload)
    try:
        user = await auth_service.update_user(
            uid,
            email=body.email,
            password=body.password,
            display_name=body.display_name,
            photo_url=body.photo_url,
            disabled=body.disabled,
        )
    except Exception:
        raise AuthError(AuthError.USER_NOT_FOUND) from None
    return _user_body(user)


@admin_router.delete("/user/{uid}")
async def delete_user(
    uid: str, auth_service: AuthService = Depends(get_auth_service)
) -> dict[str, str]:
    try:
        await auth_service.delete_user(uid)
    except Exception:
        raise AuthError(AuthError.USER_NOT_FOUND) from None
    return {"message": "User deleted successfully"}


@admin_router.post("/user/{uid}/claims")
async def set_custom_claims(
    uid: str,
    payload: Any = Body(default=None),
    auth_service: AuthService = Depends(get_auth_service),
) -> dict[str, str]:
    claims = _read_body(ClaimsRequest, payload).claims
    if not isinstance(claims, dict):
        raise RequestError(RequestError.INVALID_CLAIMS)

    try:
        await auth_service.set_custom_claims(uid, claims)
    except Exception:
        raise AuthError(AuthError.USER_NOT_FOUND) from None
    return {"message": "Custom claims updated successfully"}


@admin_router.post("/user/{uid}/revoke")
async def revoke_tokens(
    uid: str, auth_service: AuthService = Depends(get_auth_service)
) -> dict[str, str]:
    try:
        await auth_service.revoke_refresh_tokens(uid)
    except Exception:
        raise AuthError(AuthError.USER_NOT_FOUND) from None
    return {"message": "Refresh tokens revoked successfully"}


router.include_router(admin_router)
