# parking_engine/services/allocation_engine.py
"""
Spot allocation and ticketing.

  enter(vehicle_class, plate) → finds a free spot of the matching class,
                                marks it occupied and mints a ticket
  exit(ticket_id)             → bills the stay, frees the spot and
                                settles the ticket

Both run entirely under one lock that guards the SpotPool and TicketStore
together, so no caller ever sees a spot free while an open ticket points at it
(or the reverse). Reads return copies taken under the same lock.
"""

import threading
from datetime import datetime, timedelta
from decimal import Decimal, ROUND_HALF_UP
from enum import Enum
from typing import Callable, Union
from parking_engine.services.exceptions import (
    AlreadySettledError,
    CapacityExceededError,
    InvalidInputError,
    InvalidTicketError,
    NotFoundError,
    ParkingError,
)
from parking_engine.services.spot_pool import ParkingSpot, SpotClass, SpotPool
from parking_engine.services.ticket_store import ParkingTicket, TicketStore
from parking_engine.utils.logger import get_invariant_logger, get_logger

logger = get_logger(__name__)
invariant_logger = get_invariant_logger()

ONE_HOUR = timedelta(hours=1)
CENTS = Decimal("0.01")


class VehicleClass(str, Enum):
    TWO_WHEEL = "TWO_WHEEL"
    FOUR_WHEEL = "FOUR_WHEEL"
    OVERSIZE = "OVERSIZE"


SPOT_CLASS_FOR_VEHICLE = {
    VehicleClass.TWO_WHEEL: SpotClass.BIKE_SPOT,
    VehicleClass.FOUR_WHEEL: SpotClass.CAR_SPOT,
    VehicleClass.OVERSIZE: SpotClass.LARGE_SPOT,
}

# Names older gate clients still send
VEHICLE_ALIASES = {
    "BIKE": VehicleClass.TWO_WHEEL,
    "MOTORCYCLE": VehicleClass.TWO_WHEEL,
    "CAR": VehicleClass.FOUR_WHEEL,
    "TRUCK": VehicleClass.OVERSIZE,
    "BUS": VehicleClass.OVERSIZE,
}


def resolve_vehicle_class(value: Union[VehicleClass, str, None]) -> VehicleClass:
    """Map a class name (or alias) to a VehicleClass. Unknown names are rejected, never defaulted."""
    if isinstance(value, VehicleClass):
        return value
    if not isinstance(value, str):
        raise InvalidInputError(f"Unknown vehicle class: {value!r}")
    name = value.strip().upper()
    if name in VehicleClass.__members__:
        return VehicleClass[name]
    if name in VEHICLE_ALIASES:
        return VEHICLE_ALIASES[name]
    raise InvalidInputError(f"Unknown vehicle class: {value!r}")


def compute_fee(entry_time: datetime, exit_time: datetime, rate_per_hour: Decimal) -> Decimal:
    """
    Flat hourly billing: any started hour counts as a full hour,
    with a minimum of one hour (also for zero or negative elapsed time).
    """
    elapsed = exit_time - entry_time
    hours = max(1, -(-elapsed // ONE_HOUR))
    return (rate_per_hour * hours).quantize(CENTS, rounding=ROUND_HALF_UP)


class AllocationEngine:
    def __init__(self, spot_pool: SpotPool, ticket_store: TicketStore,
                 rate_per_hour: Decimal, clock: Callable[[], datetime] = datetime.utcnow):
        rate = Decimal(str(rate_per_hour))
        if rate <= 0:
            raise ValueError(f"rate_per_hour must be positive, got {rate_per_hour}")
        self._spots = spot_pool
        self._tickets = ticket_store
        self._rate = rate
        self._clock = clock
        self._lock = threading.Lock()

    @property
    def rate_per_hour(self) -> Decimal:
        return self._rate

    # ── Gate operations ──────────────────────────────────────────────────
    def enter(self, vehicle_class, license_plate: str) -> ParkingTicket:
        vclass = resolve_vehicle_class(vehicle_class)
        plate = (license_plate or "").strip()
        if not plate:
            raise InvalidInputError("License plate is required")
        spot_class = SPOT_CLASS_FOR_VEHICLE[vclass]

        with self._lock:
            spot = self._spots.find_free(spot_class)
            if spot is None:
                logger.info(f"[ENTRY] Lot full for {vclass.value} | Plate={plate}")
                raise CapacityExceededError(f"Parking full for type: {vclass.value}")
            try:
                self._spots.occupy(spot.spot_id, plate)
            except ParkingError as e:
                invariant_logger.error(f"[ENTRY] Spot state inconsistent for {spot.spot_id}: {e}")
                raise
            ticket = self._tickets.mint(spot.spot_id, plate, vclass.value, self._clock())
            receipt = ticket.copy()

        logger.info(f"[ENTRY] Ticket={receipt.ticket_id} | Spot={receipt.spot_id} | Plate={plate}")
        return receipt

    def exit(self, ticket_id: str) -> ParkingTicket:
        with self._lock:
            try:
                ticket = self._tickets.get(ticket_id)
            except NotFoundError:
                logger.warning(f"[EXIT] Unknown ticket {ticket_id}")
                raise InvalidTicketError(f"Invalid ticket: {ticket_id}")
            if ticket.settled:
                logger.warning(f"[EXIT] Ticket {ticket_id} already settled")
                raise AlreadySettledError(f"Ticket {ticket_id} already settled")

            now = self._clock()
            fee = compute_fee(ticket.entry_time, now, self._rate)
            try:
                self._spots.release(ticket.spot_id)
                self._tickets.settle(ticket_id, fee, now)
            except ParkingError as e:
                invariant_logger.error(f"[EXIT] Ticket/spot state inconsistent for {ticket_id}: {e}")
                raise
            receipt = ticket.copy()

        logger.info(f"[EXIT] Ticket={ticket_id} | Spot={receipt.spot_id} | Fee={receipt.fee}")
        return receipt

    # ── Read side ────────────────────────────────────────────────────────
    def get_ticket(self, ticket_id: str) -> ParkingTicket:
        with self._lock:
            try:
                return self._tickets.get(ticket_id).copy()
            except NotFoundError:
                raise InvalidTicketError(f"Invalid ticket: {ticket_id}")

    def list_spots(self) -> list[ParkingSpot]:
        with self._lock:
            return self._spots.snapshot()

    def open_tickets(self) -> list[ParkingTicket]:
        with self._lock:
            return self._tickets.open_tickets()

    def availability(self) -> dict:
        """{spot_class: {"total", "free", "occupied"}} as one consistent snapshot."""
        with self._lock:
            counts = self._spots.counts()
        return {
            spot_class.value: {"total": total, "free": free, "occupied": total - free}
            for spot_class, (total, free) in counts.items()
        }


def build_engine(settings) -> AllocationEngine:
    """Create the process engine from startup configuration."""
    counts = {SpotClass[name]: count for name, count in settings.INVENTORY.items()}
    engine = AllocationEngine(SpotPool.from_counts(counts), TicketStore(), settings.RATE_PER_HOUR)
    logger.info(f"Inventory loaded: {settings.INVENTORY} | Rate={engine.rate_per_hour}/h")
    return engine
