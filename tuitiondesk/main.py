# tuitiondesk/main.py - FastAPI application, CORS and error handling
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
import logging
import time

from tuitiondesk.core.config import settings
from tuitiondesk.core.db import get_engine, health_check as db_health_check
from tuitiondesk.models import Base
from tuitiondesk.api.routers import centers, students, fees, invoices, payments, expenses


# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL),
    format=settings.log_format_string,
    filename=settings.LOG_FILE_PATH,
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    logger.info("Starting Tuition Center Finance API...")
    logger.info(f"Environment: {settings.ENV}")
    logger.info(f"Database URL: {settings.DATABASE_URL.split('@')[1] if '@' in settings.DATABASE_URL else 'local'}")

    engine = get_engine()

    # Create tables if they don't exist (for development); migrations handle the rest
    if settings.is_development:
        logger.info("Creating database tables...")
        try:
            Base.metadata.create_all(bind=engine)
            logger.info("Database tables created successfully")
        except Exception as e:
            logger.error(f"Error creating tables: {e}")

    yield

    logger.info("Shutting down Tuition Center Finance API...")


app = FastAPI(
    title=settings.API_TITLE,
    description="Fee catalog, monthly invoice generation and payments for tuition centers",
    version=settings.API_VERSION,
    docs_url="/docs" if settings.is_development and settings.DEV_SHOW_DOCS else None,
    redoc_url="/redoc" if settings.is_development and settings.DEV_SHOW_DOCS else None,
    lifespan=lifespan
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log every request with its status and duration"""
    start_time = time.time()
    response = await call_next(request)
    process_time = time.time() - start_time
    logger.info(f"{request.method} {request.url.path} -> {response.status_code} ({process_time:.3f}s)")
    return response


# CORS middleware - added after the logging middleware so it wraps it
app.add_middleware(
    CORSMiddleware,
    **settings.get_cors_config(),
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed request bodies are reported as 400 in the API's error envelope"""
    logger.warning(f"Invalid request on {request.method} {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=400,
        content={
            "success": False,
            "error": "Invalid request.",
            "details": jsonable_encoder(exc.errors()),
        }
    )


def cors_error_headers(request: Request) -> dict:
    """CORS headers for responses built outside CORSMiddleware (uncaught errors)"""
    origin = request.headers.get("origin")
    if "*" in settings.CORS_ORIGINS:
        allowed = "*"
    elif origin in settings.CORS_ORIGINS:
        allowed = origin
    else:
        return {}
    return {
        "Access-Control-Allow-Origin": allowed,
        "Access-Control-Allow-Headers": ", ".join(settings.CORS_ALLOW_HEADERS),
        "Access-Control-Allow-Methods": ", ".join(settings.CORS_ALLOW_METHODS),
    }


# Runs in ServerErrorMiddleware, outside CORSMiddleware
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Handle uncaught exceptions"""
    logger.exception(f"Unhandled exception on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": "Internal server error" if settings.is_production else str(exc),
        },
        headers=cors_error_headers(request),
    )


@app.get("/health")
async def health_check():
    return {
        "status": "healthy",
        "environment": settings.ENV,
        "version": settings.API_VERSION,
        "database": db_health_check(),
    }


# Include routers
app.include_router(centers.router, prefix="/api/centers", tags=["Centers"])
app.include_router(students.router, prefix="/api/students", tags=["Students"])
app.include_router(fees.router, prefix="/api/fees", tags=["Fees"])
app.include_router(invoices.router, prefix="/api/invoices", tags=["Invoices"])
app.include_router(payments.router, prefix="/api/payments", tags=["Payments"])
app.include_router(expenses.router, prefix="/api/expenses", tags=["Expenses"])
logger.info("All routers registered successfully")


# Root endpoint
@app.get("/")
async def root():
    return {
        "message": settings.API_TITLE,
        "version": settings.API_VERSION,
        "docs_url": "/docs" if settings.is_development and settings.DEV_SHOW_DOCS else "Documentation disabled in production",
        "cors_origins": settings.CORS_ORIGINS
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "tuitiondesk.main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower(),
    )
