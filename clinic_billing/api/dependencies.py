"""Dependency injection for FastAPI endpoints"""

from datetime import date
from fastapi import Header, Request
from clinic_billing.config import settings
from clinic_billing.utils.date_utils import today_in


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_user_id(x_user_id: str = Header(..., min_length=1, description="Authenticated user identifier")) -> str:
    """Caller identity, set by the authenticating proxy in front of the service"""
    return x_user_id


def get_today() -> date:
    """Current calendar date in the clinic's time zone"""
    return today_in(settings.clinic_timezone)
