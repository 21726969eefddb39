"""Dependency injection for FastAPI endpoints"""

from datetime import datetime
from typing import Callable, Optional

from fastapi import Header, HTTPException, Request

from wealthblend.utils.date_utils import utcnow

Clock = Callable[[], datetime]


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_current_user_id(x_user_id: Optional[str] = Header(None, alias="X-User-ID")) -> str:
    """Caller identity, established upstream by the auth layer"""
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(status_code=401, detail="Missing caller identity")
    return x_user_id.strip()


def get_clock() -> Clock:
    """Source of "now" for derivations; overridden in tests"""
    return utcnow
