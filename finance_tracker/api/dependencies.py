"""Dependency injection for FastAPI endpoints"""

import uuid
from datetime import date
from fastapi import HTTPException, Request


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_today() -> date:
    """Current calendar date; overridden in tests to pin the clock"""
    return date.today()


def parse_uuid(value: str, entity: str) -> uuid.UUID:
    """Parse a path identifier, rejecting malformed IDs with 400"""
    try:
        return uuid.UUID(value)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid {entity} ID format")
