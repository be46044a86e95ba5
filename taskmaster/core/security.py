import logging
import secrets
from typing import Optional

from fastapi import Header, HTTPException, Request, status

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "


def extract_api_key(x_api_key: Optional[str], authorization: Optional[str]) -> Optional[str]:
    """Pick the presented key: ``x-api-key`` first, then a bearer token."""
    if x_api_key:
        return x_api_key
    if authorization:
        key = authorization[len(BEARER_PREFIX):] if authorization.startswith(BEARER_PREFIX) else authorization
        return key or None
    return None


def is_key_allowed(presented: Optional[str], secret: Optional[str]) -> bool:
    # No header at all means a browser call from the bundled UI
    if presented is None:
        return True
    if not secret:
        return False
    return secrets.compare_digest(presented.encode("utf-8"), secret.encode("utf-8"))


async def require_api_key(
    request: Request,
    x_api_key: Optional[str] = Header(None),
    authorization: Optional[str] = Header(None),
):
    presented = extract_api_key(x_api_key, authorization)
    if not is_key_allowed(presented, request.app.state.settings.AI_API_KEY):
        logger.warning("Rejected API key on %s %s", request.method, request.url.path)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized: Invalid API Key",
        )
