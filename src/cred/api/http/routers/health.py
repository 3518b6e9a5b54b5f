"""Health check endpoints router for monitoring service availability."""

from typing import Any

from fastapi import APIRouter, Request
from starlette.responses import JSONResponse

from src.cred.runtime.context import get_config

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
async def health() -> dict[str, str]:
    """Liveness probe: 200 OK as long as the process is running."""
    return {"status": "healthy", "service": "api"}


@router.get("/ready", response_model=None)
async def readiness(request: Request) -> dict[str, Any] | JSONResponse:
    """Readiness probe: 200 once the Firebase dependencies are initialized, else 503."""
    app_deps = getattr(request.app.state, "app_dependencies", None)
    config = get_config()

    if app_deps is None:
        return JSONResponse(
            status_code=503,
            content={
                "status": "not_ready",
                "checks": {"firebase": {"status": "uninitialized"}},
            },
        )

    return {
        "status": "ready",
        "environment": config.app.environment,
        "checks": {
            "firebase": {
                "status": "healthy",
                "app": app_deps.firebase_app.name,
                "database_id": app_deps.database_id,
            }
        },
    }
