"""
Clamia - Main FastAPI Application
"""

import logging
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from contextlib import asynccontextmanager

from .config import settings
from .api import chat_router
from .api.chat import init_knowledge_retriever
from .core.errors import ClamiaError
from .core.logging_config import setup_logging
from .middleware import EmptyPreflightCORSMiddleware, RequestLoggingMiddleware

# Logger will be initialized after setup_logging() is called
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown events."""
    # Startup
    setup_logging(settings)

    if not settings.openai_api_key:
        logger.error("OPENAI_API_KEY is not set; every chat turn will fail with a configuration error")

    await init_knowledge_retriever()

    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Model: {settings.llm_model} (timeout {settings.llm_timeout_seconds}s)")
    logger.info(
        f"Rate limit: {settings.rate_limit_max_requests} requests / "
        f"{settings.rate_limit_window_seconds}s"
    )
    logger.info(f"Knowledge backend: {settings.knowledge_backend}")
    yield
    # Shutdown
    logger.info(f"Shutting down {settings.app_name}")


# Create FastAPI application
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Conversation orchestration and retrieval-augmented prompting for an AI therapist",
    lifespan=lifespan
)


@app.exception_handler(ClamiaError)
async def clamia_error_handler(request: Request, exc: ClamiaError):
    """Domain errors become {error: message} with the mapped status."""
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.url.path}: {str(exc)}", exc_info=exc)
    return JSONResponse(
        status_code=500,
        content={"error": "An error occurred while processing your request"},
    )


# Configure CORS
app.add_middleware(
    EmptyPreflightCORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=False,
    allow_methods=["POST", "OPTIONS"],
    allow_headers=["Content-Type"],
)

# Add request logging middleware (after CORS)
if settings.log_api_requests:
    app.add_middleware(RequestLoggingMiddleware)

# Include routers
app.include_router(chat_router)


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "app": settings.app_name,
        "version": settings.app_version,
        "status": "running",
        "message": "Welcome to Clamia - a safe space to talk"
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "version": settings.app_version,
        "knowledge_backend": settings.knowledge_backend,
        "llm_configured": bool(settings.openai_api_key),
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "clamia.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug
    )
