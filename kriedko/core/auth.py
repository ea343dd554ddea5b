"""
Admin authentication for the feedback dashboard.

Two credentials are accepted:

* a signed, expiring session token (HS256 JWT carrying ``sub`` and
  ``exp``) stored in an HttpOnly cookie after ``POST /api/login``;
* a static shared-secret ``X-Admin-Token`` header for scripted access.
"""

import secrets
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from fastapi import Depends, Request
from jose import JWTError, jwt

from .config import Settings, get_settings
from .exceptions import AuthorizationError

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"
ADMIN_HEADER = "X-Admin-Token"


def create_session_token(
    subject: str,
    secret_key: str,
    expires_delta: timedelta,
) -> str:
    """Create a signed session token for the admin cookie."""
    expire = datetime.now(timezone.utc) + expires_delta
    to_encode = {"sub": subject, "exp": expire}
    return jwt.encode(to_encode, secret_key, algorithm=ALGORITHM)


def verify_session_token(token: str, secret_key: str) -> Optional[Dict[str, Any]]:
    """
    Verify and decode a session token.

    Returns:
        The token payload if the signature is valid and the token has not
        expired, None otherwise.
    """
    try:
        payload = jwt.decode(
            token,
            secret_key,
            algorithms=[ALGORITHM],
            options={"require_exp": True, "require_sub": True},
        )
    except jwt.ExpiredSignatureError:
        logger.warning("Session token has expired")
        return None
    except JWTError as e:
        logger.warning(f"Session token verification failed: {e}")
        return None

    if not payload.get("sub"):
        return None
    return payload


def authenticate_admin(username: str, password: str, settings: Settings) -> bool:
    """Check dashboard credentials against the configured admin account."""
    user_ok = secrets.compare_digest(
        username.encode("utf-8"), settings.admin_user.encode("utf-8")
    )
    pass_ok = secrets.compare_digest(
        password.encode("utf-8"), settings.admin_pass.encode("utf-8")
    )
    return user_ok and pass_ok


def is_admin_request(request: Request, settings: Settings) -> bool:
    """Capability check: admin header credential or a valid session cookie."""
    header_token = request.headers.get(ADMIN_HEADER)
    if header_token and secrets.compare_digest(
        header_token.encode("utf-8"), settings.admin_token.encode("utf-8")
    ):
        return True

    cookie_token = request.cookies.get(settings.session_cookie_name)
    if not cookie_token:
        return False

    return verify_session_token(cookie_token, settings.session_secret) is not None


async def require_admin(
    request: Request, settings: Settings = Depends(get_settings)
) -> None:
    """FastAPI dependency gating every admin operation."""
    if not is_admin_request(request, settings):
        logger.warning(f"Rejected unauthorized admin request to {request.url.path}")
        raise AuthorizationError()
