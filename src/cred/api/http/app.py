"""FastAPI application setup."""

import time
import uuid
from contextlib import asynccontextmanager

import firebase_admin
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger
from starlette.responses import JSONResponse

from src.cred.api.http.app_data import ApplicationDependencies
from src.cred.api.http.routers.auth import router as auth_router
from src.cred.api.http.routers.health import router as health_router
from src.cred.api.http.routers.site import router as site_router
from src.cred.api.utils.app_startup import configure_logging
from src.cred.core.errors import CustomError, InternalError
from src.cred.core.firebase import get_firestore_client, initialize_firebase
from src.cred.core.services import AuthService, FirestoreService
from src.cred.runtime.context import get_config

configure_logging()


@asynccontextmanager
async def lifespan(app: FastAPI):
    await startup()
    try:
        yield
    finally:
        await shutdown()


app = FastAPI(
    title=get_config().app.title,
    lifespan=lifespan,
    docs_url=None if get_config().app.environment == "production" else "/docs",
    redoc_url=None if get_config().app.environment == "production" else "/redoc",
)

__all__ = ["app", "startup", "shutdown", "main"]

# --- CORS configuration ---
if get_config().app.environment == "production" and (
    "*" in get_config().app.cors.origins
):
    raise RuntimeError(
        "CORS misconfigured: cannot use '*' with allow_credentials=True in production"
    )

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_config().app.cors.origins,
    allow_credentials=get_config().app.cors.allow_credentials,
    allow_methods=get_config().app.cors.allow_methods,
    allow_headers=get_config().app.cors.allow_headers,
)


# --- Error translation ---
@app.exception_handler(CustomError)
async def custom_error_handler(request: Request, exc: CustomError) -> JSONResponse:
    logger.bind(
        status_code=exc.status, error_code=exc.code, error_type=type(exc).__name__
    ).info("request.rejected")
    return JSONResponse(status_code=exc.status, content={"error": exc.message})


# --- Request logging middleware ---
@app.middleware("http")
async def log_requests(request: Request, call_next):
    request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())

    xff = request.headers.get("x-forwarded-for")
    client_ip = (
        xff.split(",")[0].strip()
        if xff
        else request.client.host
        if request.client
        else "unknown"
    )

    base_ctx = {
        "request_id": request_id,
        "method": request.method,
        "path": request.url.path,
        "client_ip": client_ip,
        "user_agent": request.headers.get("user-agent", "unknown"),
    }

    start = time.perf_counter()

    with logger.contextualize(**base_ctx):
        try:
            logger.info("request.start")
            response = await call_next(request)

            duration_ms = (time.perf_counter() - start) * 1000
            logger.bind(
                status_code=response.status_code,
                duration_ms=round(duration_ms, 1),
            ).info("request.end")

            response.headers.setdefault("X-Request-ID", request_id)
            return response

        except Exception as exc:
            duration_ms = (time.perf_counter() - start) * 1000
            logger.bind(
                status_code=500,
                duration_ms=round(duration_ms, 1),
                error_type=type(exc).__name__,
            ).exception("request.error")
            return JSONResponse(
                status_code=500,
                content={"error": "Internal Server Error", "request_id": request_id},
                headers={"X-Request-ID": request_id},
            )


# --- Router registration ---
app.include_router(auth_router, prefix="/auth")
app.include_router(health_router)
app.include_router(site_router)


# --- Lifecycle hooks ---
async def startup() -> None:
    config = get_config()
    logger.info("Starting up application in {} environment", config.app.environment)

    firebase_app = initialize_firebase(config.firebase)
    db = get_firestore_client(firebase_app, config.firebase.database_id)

    app.state.app_dependencies = ApplicationDependencies(
        firebase_app=firebase_app,
        auth_service=AuthService(firebase_app),
        firestore_service=FirestoreService(db),
        database_id=config.firebase.database_id,
    )
    logger.info(
        "Firebase Auth initialized - Firestore Database Id: {}",
        config.firebase.database_id,
    )


async def shutdown() -> None:
    logger.info("Shutting down application")
    app_dependencies: ApplicationDependencies | None = getattr(
        app.state, "app_dependencies", None
    )
    if app_dependencies is not None:
        firebase_admin.delete_app(app_dependencies.firebase_app)
        del app.state.app_dependencies


def get_port() -> int:
    """Return the configured listening port."""
    port = get_config().app.port
    if port is None:
        raise InternalError(InternalError.NO_APP_PORT)
    return port


def main() -> None:
    import uvicorn

    port = get_port()
    logger.info("> Listening on port {}", port)
    uvicorn.run(
        app,
        host=get_config().app.host,
        port=port,
        access_log=False,  # request logging happens in middleware
    )


if __name__ == "__main__":
    main()
