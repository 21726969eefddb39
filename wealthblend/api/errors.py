"""Translation of domain exceptions into HTTP responses"""

import logging
from contextlib import contextmanager
from typing import Iterator

from fastapi import HTTPException
from sqlalchemy.orm import Session

from wealthblend.domain.exceptions import NotFoundError, StoreUnavailableError, ValidationError


@contextmanager
def domain_errors(db: Session, request_id: str) -> Iterator[None]:
    """
    Roll back and map failures raised inside a route.

    ValidationError -> 422 with field and constraint
    NotFoundError -> 404
    StoreUnavailableError -> 503
    anything else -> 500
    """
    try:
        yield
    except HTTPException:
        db.rollback()
        raise
    except ValidationError as e:
        db.rollback()
        logging.warning(f"Validation failed: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail={"field": e.field, "constraint": e.constraint})
    except NotFoundError as e:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(e))
    except StoreUnavailableError as e:
        db.rollback()
        logging.error(f"Store unavailable: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=503, detail="Record store unavailable")
    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")
