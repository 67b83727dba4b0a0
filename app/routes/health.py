# app/routes/health.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from sqlalchemy import text
import psutil
import sys
import logging

from app.database import get_db
from app.utils.timeutils import utcnow

logger = logging.getLogger(__name__)
router = APIRouter(tags=["Health Check"])


@router.get("/health")
def health_check(db: Session = Depends(get_db)):
    """
    Liveness plus database connectivity and basic system resources
    """
    health_status = {
        "status": "healthy",
        "timestamp": utcnow().isoformat(),
        "service": "Challenge Application Portal API",
        "version": "1.0.0",
    }

    try:
        db.execute(text("SELECT 1"))
        health_status["database"] = {"status": "connected", "dialect": db.get_bind().dialect.name}
    except Exception as e:
        logger.error(f"Health check database error: {str(e)}")
        health_status["database"] = {"status": "disconnected", "error": str(e)}
        health_status["status"] = "degraded"

    memory = psutil.virtual_memory()
    health_status["system"] = {
        "python_version": sys.version,
        "platform": sys.platform,
        "memory_percent": memory.percent,
        "memory_available": f"{memory.available / (1024**3):.2f} GB",
        "boot_time": psutil.boot_time(),
    }
    return health_status
