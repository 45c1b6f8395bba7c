"""
Health check endpoint.

Used by load balancers and monitoring to check the service is up
and can reach its database.
"""

import structlog
from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from smb_ledger.config import get_settings
from smb_ledger.models.base import get_db

logger = structlog.get_logger(__name__)

router = APIRouter(tags=["Health"])


@router.get("/health")
def health_check(db: Session = Depends(get_db)):
    """Report service status and database connectivity."""
    try:
        db.execute(text("SELECT 1"))
        db_status = "healthy"
    except SQLAlchemyError as e:
        logger.warning("health_database_unreachable", error=str(e))
        db_status = "unhealthy"

    return {
        "status": "healthy" if db_status == "healthy" else "degraded",
        "service": "smb-ledger",
        "version": get_settings().APP_VERSION,
        "database": db_status,
    }
