import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.controllers import (
    admin_controller,
    auth_controller,
    health_controller,
    message_controller,
    notification_controller,
    property_controller,
    property_request_controller,
    user_controller,
)
from app.core.config import settings
from app.core.database import Base, engine
from app.core.dependencies import lifespan
from app.core.logging_config import setup_logging
from app.core.rate_limit import limiter
from app.services.media_service import UPLOADS_DIR, UPLOADS_URL_PREFIX

setup_logging()
logger = logging.getLogger(__name__)

# Create database tables
Base.metadata.create_all(bind=engine)

app = FastAPI(
    title="Diyari Real Estate API",
    version="1.0.0",
    description="Real estate listings, property requests with matching, messaging and notifications",
    lifespan=lifespan,
)
app.state.limiter = limiter

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# --- Error envelope ---

@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


def _describe_validation_error(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "Invalid value")
    return f"{location}: {message}" if location else message


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=400, content={"error": _describe_validation_error(exc)})


@app.exception_handler(RateLimitExceeded)
async def rate_limit_exception_handler(request: Request, exc: RateLimitExceeded):
    logger.warning(f"Rate limit exceeded for {request.client.host if request.client else 'unknown'}")
    return JSONResponse(
        status_code=429,
        content={"error": f"Rate limit exceeded: {exc.detail}"},
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=exc)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


# --- Static media ---
app.mount(UPLOADS_URL_PREFIX, StaticFiles(directory=UPLOADS_DIR), name="uploads")

# --- Endpoints ---
app.include_router(auth_controller.router)
app.include_router(property_controller.router)
app.include_router(property_request_controller.router)
app.include_router(message_controller.router)
app.include_router(notification_controller.router)
app.include_router(user_controller.router)
app.include_router(admin_controller.router)
app.include_router(health_controller.router)


@app.get("/", tags=["Root"])
def root():
    return {
        "name": "Diyari Real Estate API",
        "version": "1.0.0",
        "endpoints": {
            "auth": "/api/auth",
            "properties": "/api/properties",
            "property_requests": "/api/property-requests",
            "messages": "/api/messages",
            "notifications": "/api/notifications",
            "users": "/api/users",
            "admin": "/api/admin",
            "health": "/api/health",
            "docs": "/docs",
        },
    }
