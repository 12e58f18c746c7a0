"""
Shared router dependencies
"""

from typing import Optional

from fastapi import Depends, Header, HTTPException
from sqlalchemy.orm import Session

from app.database import get_db
from app.services.errors import AvailabilityServiceError


def get_caller_id(x_user_id: Optional[str] = Header(None)) -> str:
    """Caller identity forwarded by the platform gateway as X-User-Id."""
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(status_code=401, detail="Authentication required")
    return x_user_id.strip()


def require_db(db: Optional[Session] = Depends(get_db)) -> Session:
    if db is None:
        raise HTTPException(status_code=503, detail="Database not configured")
    return db


def to_http_error(error: AvailabilityServiceError) -> HTTPException:
    return HTTPException(status_code=error.status_code, detail=str(error))
