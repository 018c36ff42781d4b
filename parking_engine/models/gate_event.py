# parking_engine/models/gate_event.py
"""
Gate audit log table.
One row per successful entry and one per settled exit, written after the
AllocationEngine call. Used by the stats router (daily counts, revenue,
average stay). Not the source of truth for live spot/ticket state.
"""

from sqlalchemy import Column, Integer, String, DateTime, Numeric
from parking_engine.database import Base


class GateEvent(Base):
    __tablename__ = "gate_events"

    id = Column(Integer, primary_key=True, autoincrement=True)
    ticket_id = Column(String(36), nullable=False, index=True)
    spot_id = Column(String(20), nullable=False)
    license_plate = Column(String(50), nullable=False, index=True)
    vehicle_class = Column(String(20), nullable=False)   # TWO_WHEEL | FOUR_WHEEL | OVERSIZE
    gate = Column(String(10), nullable=False)             # entry | exit
    event_time = Column(DateTime, nullable=False, index=True)
    fee = Column(Numeric(10, 2))                          # set on exit
    parking_duration = Column(Integer)                    # seconds (set on exit)
    created_at = Column(DateTime)

    def __repr__(self):
        return f"<GateEvent {self.id} ticket={self.ticket_id} gate={self.gate}>"
