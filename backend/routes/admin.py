import logging

from fastapi import APIRouter, HTTPException, Request, Response

from core.config import get_settings
from core.rate_limit import limiter
from schemas.admin import AdminLoginRequest, AdminLoginResponse, AdminLogoutResponse, AdminSessionResponse
from utils.security import (
    ADMIN_SESSION_COOKIE_NAME,
    CSRF_COOKIE_NAME,
    admin_session_token,
    ensure_csrf,
    generate_random_token,
    make_signed_value,
    verify_admin_credentials,
    verify_signed_value,
)

router = APIRouter(prefix="/api", tags=["admin"])
settings = get_settings()
logger = logging.getLogger(__name__)


@router.get("/csrf-token")
def issue_csrf_token(response: Response) -> dict:
    token = generate_random_token(16)
    response.set_cookie(
        key=CSRF_COOKIE_NAME,
        value=token,
        httponly=False,
        secure=settings.environment == "production",
        samesite="lax",
        max_age=60 * 60,
        path="/",
    )
    return {"csrf_token": token}


@router.post("/admin/login", response_model=AdminLoginResponse)
@limiter.limit(settings.rate_limit_admin_login)
def admin_login(request: Request, response: Response, payload: AdminLoginRequest) -> AdminLoginResponse:
    ensure_csrf(request)
    if not verify_admin_credentials(payload.username, payload.password):
        logger.warning("Rejected admin login", extra={"path": request.url.path})
        raise HTTPException(status_code=401, detail="Invalid username or password")

    ttl = settings.admin_session_ttl_seconds
    session_token = make_signed_value(payload.username, ttl_seconds=ttl)
    response.set_cookie(
        key=ADMIN_SESSION_COOKIE_NAME,
        value=session_token,
        httponly=True,
        secure=settings.environment == "production",
        samesite="strict",
        max_age=ttl,
        path="/",
    )
    return AdminLoginResponse(message="Login successful", session_token=session_token)


@router.post("/admin/logout", response_model=AdminLogoutResponse)
def admin_logout(request: Request, response: Response) -> AdminLogoutResponse:
    ensure_csrf(request)
    response.delete_cookie(key=ADMIN_SESSION_COOKIE_NAME, path="/")
    return AdminLogoutResponse(message="Logout successful")


@router.get("/admin/session", response_model=AdminSessionResponse)
def admin_session(request: Request) -> AdminSessionResponse:
    token = admin_session_token(request)
    username = verify_signed_value(token) if token else None
    return AdminSessionResponse(authenticated=username is not None, username=username)
