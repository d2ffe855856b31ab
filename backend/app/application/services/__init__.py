from .record_store import RecordStore
from .auth_service import AuthService

__all__ = [
    "RecordStore",
    "AuthService",
]
