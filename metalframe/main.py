"""
MetalFrame Studio API - FastAPI application entry point.
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import get_settings
from .database import engine, Base
from .limiter import limiter
from .logging_config import api_logger
from .middleware import SecurityHeadersMiddleware, RequestLoggingMiddleware
from .responses import api_exception_handler, validation_exception_handler
from .routes import posts_router, imports_router

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifecycle - startup and shutdown"""
    if settings.posts_backend == "database":
        # Create tables (the posts table is the only schema object)
        Base.metadata.create_all(bind=engine)
        api_logger.info("Database initialized", url=engine.url.render_as_string(hide_password=True))
    api_logger.info(
        "Server starting",
        posts_backend=settings.posts_backend,
        media_backend=settings.media_backend,
    )

    yield  # App is running

    engine.dispose()


app = FastAPI(
    title="MetalFrame Studio API",
    description="Posts API for the MetalFrame Studio gallery and admin panel",
    version="1.0.0",
    docs_url="/api/docs" if settings.debug else None,
    redoc_url="/api/redoc" if settings.debug else None,
    lifespan=lifespan,
)

# Add rate limiter to app state
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# Every error leaves the API as {"error": ...}
app.add_exception_handler(StarletteHTTPException, api_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)

# Security headers middleware
app.add_middleware(SecurityHeadersMiddleware)

# Request logging middleware (only in debug mode)
if settings.debug:
    app.add_middleware(RequestLoggingMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=[
        "Content-Type",
        "Accept",
        "Origin",
        "X-Requested-With",
    ],
    max_age=3600,  # Cache preflight requests for 1 hour
)

# Routes
app.include_router(posts_router)
app.include_router(imports_router)

# Uploaded images are served by the app itself when stored on local disk
if settings.media_backend == "local":
    app.mount(
        settings.media_url_prefix,
        StaticFiles(directory=settings.media_root, check_dir=False),
        name="uploads",
    )


@app.get("/api/health")
def health_check():
    """Health check endpoint for load balancers and monitoring."""
    return {
        "status": "healthy",
        "environment": settings.environment,
        "posts_backend": settings.posts_backend,
        "media_backend": settings.media_backend,
        "version": "1.0.0",
    }


@app.get("/")
def root():
    """Root endpoint describes the API."""
    return {
        "message": "MetalFrame Studio API",
        "docs": "/api/docs" if settings.debug else "Disabled in production",
    }
