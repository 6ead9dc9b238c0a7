"""
Shared slowapi rate limiter.

Requests are keyed by their Authorization header by default; routes that
run before authentication (login) key by client address instead.
"""
from slowapi import Limiter
from slowapi.util import get_remote_address

from app.core import config
from app.features.permissions.dependencies import get_authorization_header


limiter = Limiter(key_func=get_authorization_header, enabled=config.RATE_LIMIT_ENABLED)

__all__ = ["limiter", "get_remote_address"]
