"""Contact CRUD, search, bulk import/export and storage endpoints."""

from typing import Any

from fastapi import APIRouter, Body, Depends, Query, status

from app.application.schemas import (
    ClearResponse,
    ContactCreate,
    ContactResponse,
    ContactUpdate,
    ExportDocumentResponse,
    ImportResultResponse,
    StorageUsageResponse,
)
from app.application.services import RecordStore
from app.domain.entities import Record
from app.infrastructure.dependencies import get_contact_store
from app.presentation.api.v1.endpoints.errors import store_errors

router = APIRouter(prefix="/contacts", tags=["Contacts"])


def _to_response(record: Record) -> ContactResponse:
    return ContactResponse.model_validate(record.to_dict())


@router.get("", response_model=list[ContactResponse])
async def list_contacts(
    q: str | None = Query(None, description="Case-insensitive search term"),
    store: RecordStore = Depends(get_contact_store),
) -> list[ContactResponse]:
    """List contacts in storage order, optionally filtered by a search term."""
    with store_errors():
        records = await store.search(q)
    return [_to_response(r) for r in records]


@router.post("", response_model=ContactResponse, status_code=status.HTTP_201_CREATED)
async def create_contact(
    data: ContactCreate,
    store: RecordStore = Depends(get_contact_store),
) -> ContactResponse:
    """Create a new contact."""
    with store_errors():
        record = await store.create(data.model_dump(exclude_none=True))
    return _to_response(record)


@router.delete("", response_model=ClearResponse)
async def clear_contacts(
    store: RecordStore = Depends(get_contact_store),
) -> ClearResponse:
    """Delete every contact."""
    with store_errors():
        removed = await store.clear()
    return ClearResponse(removed=removed)


# ── Import / Export / Storage ────────────────────────────────────────


@router.get("/export", response_model=ExportDocumentResponse)
async def export_contacts(
    store: RecordStore = Depends(get_contact_store),
) -> ExportDocumentResponse:
    """Export every contact in the shared import/export document format."""
    with store_errors():
        document = await store.export_all()
    return ExportDocumentResponse(
        version=document.version,
        database_name=document.database_name,
        exported_at=document.exported_at,
        count=document.count,
        records=document.records,
    )


@router.post("/import", response_model=ImportResultResponse)
async def import_contacts(
    document: dict[str, Any] = Body(...),
    store: RecordStore = Depends(get_contact_store),
) -> ImportResultResponse:
    """Import contacts from an export document; duplicates and invalid entries are skipped."""
    with store_errors():
        result = await store.import_document(document)
    return ImportResultResponse(
        imported_count=result.imported_count,
        skipped_count=result.skipped_count,
    )


@router.get("/storage", response_model=StorageUsageResponse)
async def contacts_storage(
    store: RecordStore = Depends(get_contact_store),
) -> StorageUsageResponse:
    """Report storage usage against the configured quota."""
    usage = await store.storage_usage()
    return StorageUsageResponse(
        available=usage.available,
        usage_bytes=usage.usage_bytes,
        quota_bytes=usage.quota_bytes,
        percentage=usage.percentage,
        level=usage.level,
    )


# ── Single contact ───────────────────────────────────────────────────


@router.get("/{record_id}", response_model=ContactResponse)
async def get_contact(
    record_id: int,
    store: RecordStore = Depends(get_contact_store),
) -> ContactResponse:
    """Retrieve a single contact by ID."""
    with store_errors():
        record = await store.get(record_id)
    return _to_response(record)


@router.put("/{record_id}", response_model=ContactResponse)
async def update_contact(
    record_id: int,
    data: ContactUpdate,
    store: RecordStore = Depends(get_contact_store),
) -> ContactResponse:
    """Update an existing contact; fields left out of the body are kept."""
    with store_errors():
        record = await store.update(record_id, data.model_dump(exclude_unset=True))
    return _to_response(record)


@router.delete("/{record_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_contact(
    record_id: int,
    store: RecordStore = Depends(get_contact_store),
) -> None:
    """Delete a contact by ID."""
    with store_errors():
        await store.delete(record_id)
