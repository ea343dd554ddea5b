"""
Admin session routes.

Login exchanges the dashboard credentials for a signed, expiring session
cookie; logout clears it.
"""

import logging
from datetime import timedelta

from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError as PydanticValidationError

from kriedko.core.auth import authenticate_admin, create_session_token
from kriedko.core.config import Settings, get_settings
from kriedko.core.exceptions import ValidationError
from kriedko.modules.feedback.schemas.feedback_schemas import LoginRequest
from kriedko.modules.feedback.services.feedback_service import parse_payload

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Authentication"])


@router.post("/login")
async def login(request: Request, settings: Settings = Depends(get_settings)):
    """Set the admin session cookie for valid dashboard credentials"""

    body = parse_payload(await request.body())
    try:
        credentials = LoginRequest.model_validate(body)
    except PydanticValidationError as e:
        raise ValidationError("Bad request") from e

    if not authenticate_admin(
        credentials.username.strip(), credentials.password.strip(), settings
    ):
        logger.warning("Failed admin login attempt")
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content={"error": "Invalid credentials"},
        )

    ttl = timedelta(hours=settings.session_ttl_hours)
    token = create_session_token(credentials.username.strip(), settings.session_secret, ttl)

    response = JSONResponse(content={"ok": True})
    response.set_cookie(
        key=settings.session_cookie_name,
        value=token,
        max_age=int(ttl.total_seconds()),
        path="/",
        httponly=True,
        samesite="lax",
        secure=settings.is_production,
    )
    logger.info("Admin session started")
    return response


@router.api_route("/logout", methods=["GET", "POST"])
async def logout(response: Response, settings: Settings = Depends(get_settings)):
    """Clear the admin session cookie"""

    response.delete_cookie(
        key=settings.session_cookie_name,
        path="/",
        httponly=True,
        samesite="lax",
    )
    return {"ok": True}
