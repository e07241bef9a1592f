"""
HireBoard - Centralized rate limiting configuration.

All rate limit decorators should import `limiter` from this module.
The limiter keys on the client IP address.
"""
from slowapi import Limiter
from slowapi.util import get_remote_address

from .config import settings

limiter = Limiter(key_func=get_remote_address, enabled=settings.store.rate_limit_enabled)

# --- Rate limit constants ---

# Board write operations (stage moves, notes, ratings, bookmarks, rejections): moderate
RATE_LIMIT_GENERAL = "60/minute"

# Bulk stage moves touch many rows per call: stricter
RATE_LIMIT_BULK = "10/minute"

# Read-heavy endpoints (list, detail, jobs): generous, every board action triggers a reload
RATE_LIMIT_READ = "120/minute"
