"""
Data Explorer API - FastAPI application

Sidebar tree of folders and tables, user-defined columns and JSON row data.
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from config import settings
from database import SessionLocal, init_db
from api import sidebar, system, tables
from middleware.logging_middleware import LoggingMiddleware
from services.errors import DataExplorerError
from services.seed import seed_sample_data
from utils.logger import get_logger, setup_logging

setup_logging(
    log_level=settings.LOG_LEVEL,
    log_format=settings.LOG_FORMAT,
    log_dir=settings.LOG_DIR,
    enable_file_logging=settings.ENABLE_FILE_LOGGING
)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the schema and seed sample data on startup"""
    logger.info("Application startup", version=settings.VERSION)

    init_db()
    if settings.SEED_SAMPLE_DATA:
        db = SessionLocal()
        try:
            if seed_sample_data(db):
                logger.info("Database was empty, sample data created")
        finally:
            db.close()

    yield

    logger.info("Application shutdown")


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.VERSION,
    lifespan=lifespan,
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url="/redoc" if settings.DEBUG else None,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(LoggingMiddleware)


def error_response(status_code: int, error: str, details=None) -> JSONResponse:
    content = {"error": error}
    if details is not None:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content)


@app.exception_handler(DataExplorerError)
async def data_explorer_error_handler(request: Request, exc: DataExplorerError):
    """Render typed domain errors with their status"""
    log = logger.error if exc.status_code >= 500 else logger.info
    log(
        "Request rejected",
        path=request.url.path,
        error_type=type(exc).__name__,
        error=exc.message,
        status_code=exc.status_code,
    )
    return error_response(exc.status_code, exc.message, exc.details)


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    """Malformed request bodies and parameters are a 400"""
    details = [
        {"loc": list(error.get("loc", ())), "msg": error.get("msg")}
        for error in exc.errors()
    ]
    return error_response(status.HTTP_400_BAD_REQUEST, "Invalid request", details)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return error_response(exc.status_code, str(exc.detail))


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError):
    """Store failures outside of a repository commit"""
    logger.error("Database error", path=request.url.path, error=str(exc), exc_info=True)
    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "Database operation failed",
        str(exc) if settings.DEBUG else None
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    """Anything else: log the traceback, never return it"""
    logger.error(
        "Unhandled exception",
        path=request.url.path,
        error=str(exc),
        error_type=type(exc).__name__,
        exc_info=True,
    )
    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "Internal server error",
        str(exc) if settings.DEBUG else None
    )


app.include_router(sidebar.router)
app.include_router(tables.router)
app.include_router(system.router)


@app.get("/", include_in_schema=False)
async def root():
    return {
        "service": settings.APP_NAME,
        "version": settings.VERSION,
        "status": "/system/status",
    }
