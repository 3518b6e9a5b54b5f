from dataclasses import dataclass

import firebase_admin

from src.cred.core.services import AuthService, FirestoreService


@dataclass
class ApplicationDependencies:
    firebase_app: firebase_admin.App
    auth_service: AuthService
    firestore_service: FirestoreService
    database_id: str
