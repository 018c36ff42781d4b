# parking_engine/services/gate_log_service.py
"""
Gate audit trail + capacity alerts.

Runs after the AllocationEngine has already committed the transition:
  - entry → GateEvent(gate="entry") + capacity check for the spot class
  - exit  → GateEvent(gate="exit") with fee and stay duration, and the
            class capacity alert is resolved once occupancy drops below
            the threshold

A database failure here is logged and rolled back. It never undoes the
engine transition, the in-memory engine is the source of truth.
"""

from datetime import datetime
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from parking_engine.models.gate_event import GateEvent
from parking_engine.services.alert_service import create_alert, find_open_alert
from parking_engine.services.allocation_engine import SPOT_CLASS_FOR_VEHICLE, VehicleClass
from parking_engine.services.ticket_store import ParkingTicket
from parking_engine.config import settings
from parking_engine.utils.logger import get_logger

logger = get_logger(__name__)

CAPACITY_ALERT = "capacity_full"


async def record_entry(ticket: ParkingTicket, availability: dict, db: Session):
    spot_class = SPOT_CLASS_FOR_VEHICLE[VehicleClass(ticket.vehicle_class)].value
    try:
        db.add(GateEvent(
            ticket_id=ticket.ticket_id,
            spot_id=ticket.spot_id,
            license_plate=ticket.license_plate,
            vehicle_class=ticket.vehicle_class,
            gate="entry",
            event_time=ticket.entry_time,
            created_at=datetime.utcnow(),
        ))
        db.commit()
        await check_capacity(db, spot_class, availability.get(spot_class))
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"[GATE] Failed to log entry for ticket {ticket.ticket_id}: {e}", exc_info=True)


async def record_exit(receipt: ParkingTicket, availability: dict, db: Session):
    spot_class = SPOT_CLASS_FOR_VEHICLE[VehicleClass(receipt.vehicle_class)].value
    duration_seconds = max(0, int((receipt.settled_at - receipt.entry_time).total_seconds()))
    try:
        db.add(GateEvent(
            ticket_id=receipt.ticket_id,
            spot_id=receipt.spot_id,
            license_plate=receipt.license_plate,
            vehicle_class=receipt.vehicle_class,
            gate="exit",
            event_time=receipt.settled_at,
            fee=receipt.fee,
            parking_duration=duration_seconds,
            created_at=datetime.utcnow(),
        ))
        db.commit()
        logger.info(f"[GATE] Plate={receipt.license_plate} parked for {duration_seconds // 60} min")
        clear_capacity_alert(db, spot_class, availability.get(spot_class))
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"[GATE] Failed to log exit for ticket {receipt.ticket_id}: {e}", exc_info=True)


async def check_capacity(db: Session, spot_class: str, stats: dict):
    """Raise one capacity alert per class while it stays above the threshold."""
    if not stats or not stats["total"]:
        return
    ratio = stats["occupied"] / stats["total"]
    if ratio < settings.OCCUPANCY_ALERT_THRESHOLD:
        return
    if find_open_alert(db, CAPACITY_ALERT, spot_class):
        return
    await create_alert(db, CAPACITY_ALERT, spot_class,
                       f"{spot_class} at {int(ratio * 100)}% capacity "
                       f"({stats['occupied']}/{stats['total']})")


def clear_capacity_alert(db: Session, spot_class: str, stats: dict):
    """Resolve the open capacity alert for a class once it is back below the threshold."""
    if not stats or not stats["total"]:
        return
    if stats["occupied"] / stats["total"] >= settings.OCCUPANCY_ALERT_THRESHOLD:
        return
    alert = find_open_alert(db, CAPACITY_ALERT, spot_class)
    if not alert:
        return
    alert.is_resolved = 1
    alert.resolved_at = datetime.utcnow()
    db.commit()
    logger.info(f"[ALERT][{CAPACITY_ALERT.upper()}] {spot_class} back to "
                f"{stats['occupied']}/{stats['total']} — resolved")
