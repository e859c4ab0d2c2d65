"""Dependency injection for FastAPI endpoints"""

from datetime import date

from fastapi import Request

from makkaan_portal.config import settings
from makkaan_portal.utils.date_utils import reference_today


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_reference_today() -> date:
    """Today's date in the ledger's reference timezone"""
    return reference_today(settings.reference_utc_offset_hours)
