"""Translation of domain exceptions into HTTP errors for the record endpoints."""

from collections.abc import Iterator
from contextlib import contextmanager

from fastapi import HTTPException, status

from app.domain.exceptions import (
    DuplicateEntityError,
    EntityNotFoundError,
    RecordValidationError,
    StoreNotInitializedError,
)


@contextmanager
def store_errors() -> Iterator[None]:
    """Map store exceptions raised inside the block to HTTPException."""
    try:
        yield
    except EntityNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except DuplicateEntityError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={"message": str(e), "field": e.field},
        )
    except RecordValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"message": str(e), "fields": e.fields},
        )
    except StoreNotInitializedError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))
