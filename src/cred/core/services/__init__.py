"""Core services exports."""

from .auth_service import AuthService
from .firestore_service import FirestoreService, ListOptions, WhereFilter

__all__ = [
    "AuthService",
    "FirestoreService",
    "ListOptions",
    "WhereFilter",
]
