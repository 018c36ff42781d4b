# parking_engine/routers/health.py
"""
System health check endpoint.
Returns status of backend + DB + inventory summary.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from parking_engine.database import get_db
from parking_engine.dependencies import get_engine
from parking_engine.services.allocation_engine import AllocationEngine
from datetime import datetime

router = APIRouter()


@router.get("/health", summary="System health check")
def health_check(db: Session = Depends(get_db), engine: AllocationEngine = Depends(get_engine)):
    result = {
        "status": "ok",
        "timestamp": datetime.utcnow().isoformat(),
        "backend": "ok",
        "database": "unknown",
        "rate_per_hour": str(engine.rate_per_hour),
        "inventory": engine.availability(),
    }

    # The audit log is optional for gate operations, so a DB outage only degrades
    try:
        db.execute(text("SELECT 1"))
        result["database"] = "ok"
    except SQLAlchemyError as e:
        result["database"] = f"error: {str(e)}"
        result["status"] = "degraded"

    return result
