# parking_engine/routers/stats.py
"""Gate audit log + daily stats (entries, exits, revenue, average stay)."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from sqlalchemy import func
from decimal import Decimal
from datetime import datetime
from parking_engine.database import get_db
from parking_engine.models.gate_event import GateEvent
from parking_engine.schemas.gate_event import GateEventOut, DailyStatsOut

router = APIRouter()


@router.get("/gate-events", response_model=list[GateEventOut], summary="Gate audit log")
def get_gate_events(limit: int = 50, gate: str = None, license_plate: str = None,
                    db: Session = Depends(get_db)):
    """Returns entry/exit events, newest first."""
    q = db.query(GateEvent)
    if gate:
        q = q.filter(GateEvent.gate == gate)
    if license_plate:
        q = q.filter(GateEvent.license_plate == license_plate)
    return q.order_by(GateEvent.event_time.desc(), GateEvent.id.desc()).limit(limit).all()


@router.get("/stats/daily", response_model=DailyStatsOut, summary="Daily entries, exits and revenue")
def get_daily_stats(target_date: str = None, db: Session = Depends(get_db)):
    target = target_date or str(datetime.utcnow().date())   # event times are stored in UTC
    on_day = func.date(GateEvent.event_time) == target

    entries = db.query(func.count(GateEvent.id)).filter(GateEvent.gate == "entry", on_day).scalar()
    exits = db.query(func.count(GateEvent.id)).filter(GateEvent.gate == "exit", on_day).scalar()
    revenue = db.query(func.sum(GateEvent.fee)).filter(GateEvent.gate == "exit", on_day).scalar()
    avg_dur = db.query(func.avg(GateEvent.parking_duration)).filter(
        GateEvent.gate == "exit",
        GateEvent.parking_duration != None,
        on_day,
    ).scalar() or 0
    return {
        "date": target,
        "entries": entries,
        "exits": exits,
        "revenue": Decimal(str(revenue or 0)),
        "avg_parking_minutes": round(float(avg_dur) / 60, 1),
    }


@router.get("/stats/revenue", summary="Revenue per vehicle class")
def get_revenue(target_date: str = None, db: Session = Depends(get_db)):
    """Total fees collected per vehicle class, optionally for one day."""
    q = db.query(GateEvent.vehicle_class, func.sum(GateEvent.fee), func.count(GateEvent.id)).filter(
        GateEvent.gate == "exit",
    )
    if target_date:
        q = q.filter(func.date(GateEvent.event_time) == target_date)
    rows = q.group_by(GateEvent.vehicle_class).all()
    return {
        "date": target_date,
        "by_class": {vc: {"revenue": str(Decimal(str(total or 0))), "exits": n} for vc, total, n in rows},
    }
