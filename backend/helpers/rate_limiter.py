"""Rate limiter configuration module.

This module is separate from main.py to avoid circular imports when routers
need to access the limiter. Limits are keyed on the client address and read
from settings so deployments can tune them without code changes.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

from models.config import settings

# Create rate limiter - imported by routers and main.py
limiter = Limiter(key_func=get_remote_address)


def write_limit() -> str:
    """Limit for entry, comment and like creation."""
    return settings.RATE_LIMIT_WRITE


def report_limit() -> str:
    """Limit for content report submission."""
    return settings.RATE_LIMIT_REPORTS
