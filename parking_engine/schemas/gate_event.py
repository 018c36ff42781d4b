# parking_engine/schemas/gate_event.py
from pydantic import BaseModel
from datetime import datetime
from decimal import Decimal
from typing import Optional


class GateEventOut(BaseModel):
    id: int
    ticket_id: str
    spot_id: str
    license_plate: str
    vehicle_class: str
    gate: str
    event_time: datetime
    fee: Optional[Decimal]
    parking_duration: Optional[int]   # seconds
    created_at: Optional[datetime]

    class Config:
        from_attributes = True


class DailyStatsOut(BaseModel):
    date: str
    entries: int
    exits: int
    revenue: Decimal
    avg_parking_minutes: float
