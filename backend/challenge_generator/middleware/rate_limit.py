from slowapi import Limiter
from starlette.requests import Request


def get_client_key(request: Request) -> str:
    """Rate-limit key for a caller.

    Generation ties up the local model for a long time, so limits are per
    client. Behind a reverse proxy the original client is the first entry of
    X-Forwarded-For; direct connections use the socket peer.
    """
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


limiter = Limiter(key_func=get_client_key)
