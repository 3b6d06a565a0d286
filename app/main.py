"""
Main FastAPI application
Chapter service: CRUD over chapter documents, tag listing and image uploads
"""
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException
import logging
import time

from app.config import Settings, settings as default_settings
from app.database import init_db
from app.api import chapters, uploads
from app.services.chapter_store import ChapterStore
from app.services.image_storage import ImageStorage

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[ChapterStore] = None
) -> FastAPI:
    """
    Build the application
    
    Args:
        settings: Configuration, defaults to the environment settings
        store: Pre-built chapter store; when omitted one is created at
            startup and closed at shutdown
    """
    settings = settings or default_settings
    
    # Configure logging
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Own the backend handle for the lifetime of the process"""
        logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")
        app.state.image_storage.ensure_directory()
        
        owned_store = None
        if store is None:
            owned_store = init_db(settings)
            if not owned_store.ping():
                owned_store.close()
                raise RuntimeError(f"MongoDB unreachable at {settings.MONGO_URL}")
            app.state.chapter_store = owned_store
            logger.info("Database initialized successfully")
        
        logger.info("Application startup complete")
        try:
            yield
        finally:
            logger.info("Shutting down application")
            if owned_store is not None:
                owned_store.close()
    
    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="Backend for chapter summaries with subsections, findings and tags",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan
    )
    
    app.state.settings = settings
    app.state.chapter_store = store
    app.state.image_storage = ImageStorage(settings.UPLOAD_DIR)
    # StaticFiles refuses to serve from a directory that is missing
    app.state.image_storage.ensure_directory()
    
    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )
    
    # Request logging middleware
    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """Log all requests with timing"""
        
        start_time = time.time()
        
        response = await call_next(request)
        
        duration = time.time() - start_time
        
        logger.info(
            f"{request.method} {request.url.path} - "
            f"Status: {response.status_code} - "
            f"Duration: {duration:.3f}s"
        )
        
        return response
    
    # Errors are returned as the raw message, no error schema
    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        """Render HTTP exceptions as plain text"""
        
        return PlainTextResponse(str(exc.detail), status_code=exc.status_code)
    
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Handle unexpected errors"""
        
        logger.error(f"Unhandled exception: {str(exc)}", exc_info=True)
        
        return PlainTextResponse(str(exc), status_code=500)
    
    @app.get("/health")
    def health_check(request: Request):
        """
        Health check endpoint for monitoring
        
        Returns service status and backend reachability
        """
        chapter_store = request.app.state.chapter_store
        database_ok = chapter_store is not None and chapter_store.ping()
        return {
            "status": "healthy" if database_ok else "degraded",
            "service": settings.APP_NAME,
            "version": settings.APP_VERSION,
            "database": "ok" if database_ok else "unreachable",
            "timestamp": time.time()
        }
    
    @app.get("/")
    async def root():
        """Root endpoint with API information"""
        return {
            "message": "Chapter Service API",
            "version": settings.APP_VERSION,
            "docs": "/docs",
            "health": "/health"
        }
    
    # Include routers
    app.include_router(chapters.router)
    app.include_router(uploads.router)
    
    # Uploaded images, served as-is
    app.mount(
        ImageStorage.URL_PREFIX,
        StaticFiles(directory=settings.UPLOAD_DIR, check_dir=False),
        name="images"
    )
    
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app.main:app",
        host=default_settings.HOST,
        port=default_settings.PORT,
        reload=default_settings.DEBUG
    )
