# parking_engine/schemas/ticket.py
from pydantic import BaseModel
from datetime import datetime
from decimal import Decimal
from typing import Optional


class EntryRequest(BaseModel):
    vehicle_class: str       # TWO_WHEEL | FOUR_WHEEL | OVERSIZE
    license_plate: str


class ExitRequest(BaseModel):
    ticket_id: str


class TicketOut(BaseModel):
    ticket_id: str
    spot_id: str
    license_plate: str
    vehicle_class: str
    entry_time: datetime
    fee: Decimal
    settled: bool
    settled_at: Optional[datetime]

    class Config:
        from_attributes = True


class EntryOut(BaseModel):
    ticket_id: str
    spot_id: str
    license_plate: str
    vehicle_class: str
    entry_time: datetime

    class Config:
        from_attributes = True
