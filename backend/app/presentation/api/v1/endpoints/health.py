"""Health check endpoint. Always answers, even when a record store failed to initialize."""

from fastapi import APIRouter, Request

from app.config import get_settings

router = APIRouter(tags=["Health"])

_STORES = {"contacts": "contact_store", "users": "user_store"}


@router.get("/health")
async def health_check(request: Request) -> dict:
    """Returns application status plus the readiness of each record store."""
    settings = get_settings()
    stores = {}
    for name, attr in _STORES.items():
        store = getattr(request.app.state, attr, None)
        stores[name] = store is not None and store.is_ready
    return {
        "status": "healthy",
        "version": settings.app_version,
        "environment": settings.app_env,
        "stores": stores,
    }
