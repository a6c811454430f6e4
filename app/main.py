from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from app.routers import timesheet_router
from app.database import init_db
from app.errors import ValidationError, NotFoundError, StorageError
from app.utils.logging_config import setup_logging, get_log_files_info
from app.config import get_settings
import logging

settings = get_settings()

# Setup comprehensive logging
logs_dir = setup_logging(settings.log_dir, settings.log_level)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info("Starting Weekly Timesheet Service...")
    init_db()
    logger.info("Application started successfully")

    yield

    # Shutdown
    logger.info("Application stopped")


app = FastAPI(
    title="Weekly Timesheet Service",
    description="Weekly work-hour timesheets with gap-filled week listings",
    version="1.0.0",
    lifespan=lifespan
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(timesheet_router.router)


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    logger.warning(f"Rejected {request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=400, content={"error": "ValidationError", "detail": str(exc)})


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=404, content={"error": "NotFound", "detail": str(exc)})


@app.exception_handler(StorageError)
async def storage_error_handler(request: Request, exc: StorageError):
    logger.error(f"Storage failure on {request.method} {request.url.path} ({exc.operation}): {exc.original_error}")
    return JSONResponse(status_code=500, content={"error": "StorageError", "detail": f"Failed to {exc.operation}"})


@app.get("/")
async def root():
    return {
        "message": "Weekly Timesheet Service API",
        "status": "running",
        "version": "1.0.0"
    }


@app.get("/health")
async def health_check():
    return {
        "status": "healthy",
        "environment": settings.app_env
    }


@app.get("/logs/info")
async def logs_info():
    """Get information about current log files."""
    return {
        "logs_directory": str(logs_dir.absolute()),
        "log_files": get_log_files_info(settings.log_dir)
    }
