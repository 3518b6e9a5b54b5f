"""Firebase Admin SDK bootstrap."""

from __future__ import annotations

import firebase_admin
from firebase_admin import credentials, firestore
from google.cloud.firestore import Client as FirestoreClient
from loguru import logger

from src.cred.core.errors import InternalError
from src.cred.runtime.config.config_data import FirebaseConfig


def initialize_firebase(config: FirebaseConfig) -> firebase_admin.App:
    """Initialize (or reuse) the process-wide firebase_admin App."""
    if not config.credentials_file:
        raise InternalError(InternalError.NO_FIREBASE_CREDENTIALS)

    try:
        return firebase_admin.get_app(config.app_name)
    except ValueError:
        pass

    options = {"projectId": config.project_id} if config.project_id else None
    app = firebase_admin.initialize_app(
        credentials.Certificate(config.credentials_file),
        options,
        name=config.app_name,
    )
    logger.info("Firebase app '{}' initialized", app.name)
    return app


def get_firestore_client(
    app: firebase_admin.App, database_id: str | None = None
) -> FirestoreClient:
    """Return the Firestore client bound to ``app``."""
    if database_id and database_id != "(default)":
        return firestore.client(app, database_id=database_id)
    return firestore.client(app)
