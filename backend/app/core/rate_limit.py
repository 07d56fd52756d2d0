"""
Rate limiting for expensive endpoints (spreadsheet imports) using SlowAPI.

Limits are kept in process memory; a multi-worker deployment needs a
shared storage_uri (e.g. Redis) passed to the Limiter.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address
from fastapi import Request


def get_user_id_or_ip(request: Request) -> str:
    """
    Rate limit key: the authenticated user (set on request.state by
    get_current_user) or the client address for anonymous requests.
    """
    user = getattr(request.state, "user", None)
    if user is not None:
        return f"user:{user.id}"
    return f"ip:{get_remote_address(request)}"


limiter = Limiter(key_func=get_user_id_or_ip)
