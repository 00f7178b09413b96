"""FastAPI application entry point."""

import json
import logging
import sys
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from sqlalchemy import text
from starlette.middleware.base import BaseHTTPMiddleware

from folklore_admin import models  # noqa: F401
from folklore_admin.api.routes import api_router
from folklore_admin.core.config import settings
from folklore_admin.core.email import configure_email_from_settings
from folklore_admin.core.rate_limit import limiter
from folklore_admin.core.security import decode_access_token
from folklore_admin.db.base import Base
from folklore_admin.db.session import SessionLocal, engine
from folklore_admin.services.pricing_service import PricingService
from folklore_admin.services.staff_service import ensure_default_formulas

VERSION = "1.0.0"

# Paths under the API prefix reachable without a token
PUBLIC_API_PATHS = [
    "/auth/login",
    "/auth/register",
    "/auth/forgot-password",
    "/auth/reset-password",
]

PUBLIC_EXACT_PATHS = [
    "/",
    "/health",
    "/health/ready",
]

# Configure logging - use JSON format in production, human-readable in dev
root_logger = logging.getLogger()
root_logger.setLevel(getattr(logging, settings.log_level))
root_logger.handlers.clear()


class JSONFormatter(logging.Formatter):
    def format(self, record):
        return json.dumps({
            "ts": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
            "module": record.module,
            "line": record.lineno,
        })


if settings.debug:
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"))
else:
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter())

root_logger.addHandler(handler)
logger = logging.getLogger(__name__)
request_logger = logging.getLogger("requests")


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Add security headers to all responses."""

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        csp_origins = " ".join(settings.cors_origins_list)
        response.headers["Content-Security-Policy"] = (
            "default-src 'self'; "
            "style-src 'self' 'unsafe-inline'; "
            "img-src 'self' data: blob:; "
            f"connect-src 'self' {csp_origins}; "
            "font-src 'self' data:;"
        )
        return response


class AuthEnforcementMiddleware(BaseHTTPMiddleware):
    """Global authentication enforcement middleware.

    Every ``{api_prefix}/*`` request needs a valid Bearer token unless the path
    is one of ``PUBLIC_API_PATHS``. Role checks stay in the route dependencies.
    """

    async def dispatch(self, request: Request, call_next):
        path = request.url.path

        # Always allow OPTIONS (CORS preflight)
        if request.method == "OPTIONS" or path in PUBLIC_EXACT_PATHS:
            return await call_next(request)

        prefix = settings.api_prefix.rstrip("/")
        if not path.startswith(prefix + "/"):
            return await call_next(request)

        api_path = path[len(prefix):]
        if any(api_path.startswith(public) for public in PUBLIC_API_PATHS):
            return await call_next(request)

        payload = None
        auth_header = request.headers.get("Authorization", "")
        if auth_header.startswith("Bearer "):
            token = auth_header.split(" ", 1)[1]
            if token:
                payload = decode_access_token(token)

        if payload is None or not all(payload.get(k) for k in ("sub", "email", "role")):
            return JSONResponse(
                status_code=401,
                content={"detail": "Authentication required"},
                headers={"WWW-Authenticate": "Bearer"},
            )
        return await call_next(request)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for logging all HTTP requests and responses."""

    async def dispatch(self, request: Request, call_next):
        # Skip logging for health checks and docs
        if request.url.path in ["/health", "/", "/docs", "/openapi.json"]:
            return await call_next(request)

        start_time = time.time()
        client_ip = request.client.host if request.client else "unknown"

        try:
            response = await call_next(request)
        except Exception as e:
            process_time = time.time() - start_time
            request_logger.error(
                f"Error: {request.method} {request.url.path} - "
                f"Exception: {str(e)} - Time: {process_time:.3f}s - Client: {client_ip}"
            )
            raise

        process_time = time.time() - start_time
        log_level = logging.WARNING if response.status_code >= 400 else logging.INFO
        request_logger.log(
            log_level,
            f"Response: {request.method} {request.url.path} - "
            f"Status: {response.status_code} - Time: {process_time:.3f}s - Client: {client_ip}"
        )
        return response


def ensure_reference_data() -> None:
    """Create the pricing default row and the default staffing formulas."""
    db = SessionLocal()
    try:
        PricingService(db).get_defaults()
        ensure_default_formulas(db)
        db.commit()
    finally:
        db.close()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    logger.info("Starting Folklore Garden admin API")

    if settings.database_url.startswith("sqlite"):
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables created (SQLite mode)")

    try:
        ensure_reference_data()
    except Exception as e:
        logger.warning(f"Reference data not ensured (run migrations first?): {e}")

    configure_email_from_settings()

    yield

    logger.info("Shutting down Folklore Garden admin API")


app = FastAPI(
    title="Folklore Garden Admin API",
    description="Back office for reservations, stock, partners, staff, cashbox and events",
    version=VERSION,
    lifespan=lifespan,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(AuthEnforcementMiddleware)
app.add_middleware(RequestLoggingMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "Accept", "Origin", "X-Requested-With"],
    max_age=600,
)

app.include_router(api_router, prefix=settings.api_prefix)


@app.get("/health")
def health_check():
    """Basic liveness check endpoint."""
    return {"status": "healthy", "version": VERSION}


@app.get("/health/ready")
def readiness_check():
    """Readiness probe with a database round trip."""
    checks = {"database": "unknown"}

    db = None
    try:
        db = SessionLocal()
        db.execute(text("SELECT 1"))
        checks["database"] = "healthy"
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        checks["database"] = "unhealthy"
    finally:
        if db:
            db.close()

    return {
        "status": "ready" if checks["database"] == "healthy" else "degraded",
        "version": VERSION,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "checks": checks,
    }


@app.get("/")
def root():
    """Root endpoint."""
    return {
        "message": "Folklore Garden Admin API",
        "docs": "/docs",
        "health": "/health",
    }
