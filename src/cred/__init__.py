"""CRED backend.

FastAPI service that delegates identity to Firebase Authentication and
document storage to Cloud Firestore.
"""

__version__ = "0.1.0"
