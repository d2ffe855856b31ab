"""User management endpoints. Users are created through /auth/register only."""

from fastapi import APIRouter, Depends, Query, status

from app.application.schemas import (
    ClearResponse,
    ExportDocumentResponse,
    StorageUsageResponse,
    UserResponse,
)
from app.application.services import RecordStore
from app.infrastructure.dependencies import get_user_store
from app.presentation.api.v1.endpoints.errors import store_errors

router = APIRouter(prefix="/users", tags=["Users"])


@router.get("", response_model=list[UserResponse])
async def list_users(
    q: str | None = Query(None, description="Case-insensitive search term"),
    store: RecordStore = Depends(get_user_store),
) -> list[UserResponse]:
    with store_errors():
        records = await store.search(q)
    return [UserResponse.model_validate(r.to_dict()) for r in records]


@router.delete("", response_model=ClearResponse)
async def clear_users(
    store: RecordStore = Depends(get_user_store),
) -> ClearResponse:
    with store_errors():
        removed = await store.clear()
    return ClearResponse(removed=removed)


@router.get("/export", response_model=ExportDocumentResponse)
async def export_users(
    store: RecordStore = Depends(get_user_store),
) -> ExportDocumentResponse:
    """Export users without their password hashes."""
    with store_errors():
        document = await store.export_all()
    hidden = store.schema.private_fields
    return ExportDocumentResponse(
        version=document.version,
        database_name=document.database_name,
        exported_at=document.exported_at,
        count=document.count,
        records=[{k: v for k, v in r.items() if k not in hidden} for r in document.records],
    )


@router.get("/storage", response_model=StorageUsageResponse)
async def users_storage(
    store: RecordStore = Depends(get_user_store),
) -> StorageUsageResponse:
    usage = await store.storage_usage()
    return StorageUsageResponse(
        available=usage.available,
        usage_bytes=usage.usage_bytes,
        quota_bytes=usage.quota_bytes,
        percentage=usage.percentage,
        level=usage.level,
    )


@router.get("/{record_id}", response_model=UserResponse)
async def get_user(
    record_id: int,
    store: RecordStore = Depends(get_user_store),
) -> UserResponse:
    with store_errors():
        record = await store.get(record_id)
    return UserResponse.model_validate(record.to_dict())


@router.delete("/{record_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    record_id: int,
    store: RecordStore = Depends(get_user_store),
) -> None:
    with store_errors():
        await store.delete(record_id)
