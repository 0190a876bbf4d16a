# snapshare/main.py
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.routing import APIRoute
from typing import Set, List
import logging

from snapshare.core.config import settings
from snapshare.core.exceptions import (
    APIError,
    api_error_handler,
    internal_error_handler,
    validation_error_handler,
)
from snapshare.db.mongodb import close_mongodb, create_mongodb_indexes
from snapshare.router import api_router

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else settings.LOG_LEVEL,
    format=settings.LOG_FORMAT
)
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown events"""
    logger.info("Starting up application services...")
    await create_mongodb_indexes()
    logger.info("All services started successfully")
    try:
        yield
    finally:
        logger.info("Shutting down application...")
        close_mongodb()
        logger.info("Application shutdown completed")

app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Photo sharing API: accounts, follows, image uploads and likes",
    version="1.0.0",
    lifespan=lifespan,
    debug=settings.DEBUG
)

# Add error handlers
app.add_exception_handler(APIError, api_error_handler)
app.add_exception_handler(RequestValidationError, validation_error_handler)
app.add_exception_handler(Exception, internal_error_handler)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    max_age=3600,  # Cache preflight requests for 1 hour
)

# Mount all routes under /api
app.include_router(api_router, prefix=settings.API_PREFIX)

@app.get("/health")
async def health_check():
    return {"status": "healthy"}

# Log all registered routes during startup
def log_routes():
    """Log all registered routes"""
    logger.debug("Registered routes:")
    for route in app.routes:
        if isinstance(route, APIRoute):
            path: str = route.path
            methods: Set[str] = route.methods
            tags: List[str] = list(getattr(route, "tags", []))
            logger.debug(f"{sorted(methods)} {path} {tags}")

log_routes()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "snapshare.main:app",
        host="0.0.0.0",
        port=5000,
        reload=settings.DEBUG,  # Enable auto-reload in debug mode
        log_level="debug" if settings.DEBUG else "info"
    )
