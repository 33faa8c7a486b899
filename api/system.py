"""
System status endpoints
"""
import time
from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy import text

from database import get_db
from config import settings
from schemas.system import SystemStatusResponse, BackendStatus, DatabaseStatus
from services.sidebar_repository import SidebarRepository
from utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["system"])


@router.get("/health")
async def health():
    """Liveness probe"""
    return {"status": "ok", "version": settings.VERSION}


@router.get("/system/status", response_model=SystemStatusResponse)
async def get_system_status(db: Session = Depends(get_db)):
    """
    Check the database connection and report the sidebar size
    """
    start_time = time.time()
    dialect = db.get_bind().dialect.name

    try:
        db.execute(text("SELECT 1"))
        item_count = SidebarRepository(db).count()
        database_status = DatabaseStatus(
            status="connected",
            connected=True,
            dialect=dialect,
            sidebar_items=item_count
        )
    except SQLAlchemyError as e:
        logger.error("Database status check failed", error=str(e))
        database_status = DatabaseStatus(
            status="error",
            connected=False,
            dialect=dialect
        )

    backend_status = BackendStatus(
        status="connected",
        latency=int((time.time() - start_time) * 1000),
        version=settings.VERSION
    )

    return SystemStatusResponse(backend=backend_status, database=database_status)
