from .record import (
    ClearResponse,
    ContactCreate,
    ContactResponse,
    ContactUpdate,
    ExportDocumentResponse,
    ImportResultResponse,
    StorageUsageResponse,
    UserResponse,
)
from .auth import AuthResponse, LoginRequest, RegisterRequest

__all__ = [
    "ContactCreate",
    "ContactUpdate",
    "ContactResponse",
    "UserResponse",
    "ExportDocumentResponse",
    "ImportResultResponse",
    "StorageUsageResponse",
    "ClearResponse",
    "RegisterRequest",
    "LoginRequest",
    "AuthResponse",
]
