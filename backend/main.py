from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded

from core.config import get_settings
from core.errors import AdmissionError, RateLimited
from core.observability import setup_logging
from core.rate_limit import limiter
from db.session import init_db
from routes import admin_router, health_router, waitlist_router
from routes.waitlist import charge_unparsed_signup

settings = get_settings()
setup_logging(settings.log_level, settings.log_format)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.auto_create_tables:
        init_db()
    yield


app = FastAPI(title=settings.app_name, lifespan=lifespan)
app.state.limiter = limiter

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def security_headers(request: Request, call_next):
    response = await call_next(request)
    response.headers["X-Frame-Options"] = "DENY"
    response.headers["X-Content-Type-Options"] = "nosniff"
    response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
    return response


@app.exception_handler(AdmissionError)
async def admission_error_handler(request: Request, exc: AdmissionError) -> JSONResponse:
    logger.info("Signup rejected: %s", exc.kind, extra={"error_code": exc.kind, "path": request.url.path})
    return JSONResponse(status_code=exc.http_status, content=exc.to_response())


@app.exception_handler(RateLimitExceeded)
async def login_rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    return JSONResponse(
        status_code=429,
        content={"success": False, "message": "Too many attempts. Please try again later.", "error": RateLimited.kind},
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    if not charge_unparsed_signup(request):
        rejected = RateLimited()
        logger.info("Signup rejected: %s", rejected.kind, extra={"error_code": rejected.kind, "path": request.url.path})
        return JSONResponse(status_code=rejected.http_status, content=rejected.to_response())
    logger.warning("Invalid request body", extra={"path": request.url.path})
    return JSONResponse(
        status_code=400,
        content={
            "success": False,
            "message": "Invalid request data",
            "error": "ValidationError",
            "details": [
                {"field": ".".join(str(part) for part in error["loc"]), "message": error["msg"]}
                for error in exc.errors()
            ],
        },
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unhandled exception", exc_info=exc, extra={"path": request.url.path})
    return JSONResponse(status_code=500, content={"success": False, "message": "Server error, please try again"})


app.include_router(health_router)
app.include_router(waitlist_router)
app.include_router(admin_router)


@app.get("/")
def root() -> dict:
    return {"service": "waitlist-backend", "status": "ok"}
