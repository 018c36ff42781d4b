# parking_engine/routers/alerts.py
"""Capacity alerts — list + resolve endpoints."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from datetime import datetime
from typing import Optional
from parking_engine.database import get_db
from parking_engine.models.alert import Alert
from parking_engine.schemas.alert import AlertOut

router = APIRouter()


@router.get("/alerts", response_model=list[AlertOut], summary="All alerts — filterable by type")
def get_all_alerts(
    alert_type: Optional[str] = None,
    is_resolved: Optional[int] = None,
    limit: int = 50,
    db: Session = Depends(get_db)
):
    q = db.query(Alert)
    if alert_type:
        q = q.filter(Alert.alert_type == alert_type)
    if is_resolved is not None:
        q = q.filter(Alert.is_resolved == is_resolved)
    return q.order_by(Alert.triggered_at.desc()).limit(limit).all()


@router.put("/alerts/{alert_id}/resolve", summary="Resolve an alert")
def resolve_alert(alert_id: int, db: Session = Depends(get_db)):
    """Mark an alert as resolved so the next threshold crossing can raise a new one."""
    alert = db.query(Alert).filter(Alert.id == alert_id).first()
    if not alert:
        raise HTTPException(status_code=404, detail="Alert not found")
    alert.is_resolved = 1
    alert.resolved_at = datetime.utcnow()
    db.commit()
    return {"id": alert_id, "status": "resolved"}
