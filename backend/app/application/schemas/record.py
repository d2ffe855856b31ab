"""Pydantic DTOs (Data Transfer Objects) for the contacts and users record stores."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


class ContactCreate(BaseModel):
    """Schema for creating a new contact."""

    name: str = Field(..., max_length=200, examples=["Ann"])
    mobile: str = Field(..., max_length=40, examples=["555-1212"])
    email: str = Field(..., max_length=320, examples=["ann@example.com"])
    address: str | None = Field(None, max_length=500)


class ContactUpdate(BaseModel):
    """Schema for updating a contact. All fields optional; omitted fields are kept."""

    name: str | None = Field(None, max_length=200)
    mobile: str | None = Field(None, max_length=40)
    email: str | None = Field(None, max_length=320)
    address: str | None = Field(None, max_length=500)


class ContactResponse(BaseModel):
    """Schema returned to the client."""

    id: int
    name: str
    mobile: str
    email: str
    address: str | None = None
    created: datetime
    updated: datetime


class UserResponse(BaseModel):
    """User read model. The password hash is never part of it."""

    id: int
    username: str
    email: str | None = None
    created: datetime
    updated: datetime


class ExportDocumentResponse(BaseModel):
    """Export file format shared by producers and importers."""

    version: int
    database_name: str = Field(..., serialization_alias="databaseName")
    exported_at: datetime = Field(..., serialization_alias="exportedAt")
    count: int
    records: list[dict[str, Any]]


class ImportResultResponse(BaseModel):
    imported_count: int = Field(..., serialization_alias="importedCount")
    skipped_count: int = Field(..., serialization_alias="skippedCount")


class StorageUsageResponse(BaseModel):
    available: bool
    usage_bytes: int
    quota_bytes: int
    percentage: float
    level: str


class ClearResponse(BaseModel):
    removed: int
