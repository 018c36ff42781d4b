# parking_engine/services/ticket_store.py
"""
In-process record of every ticket issued. Tickets are never deleted.
Like SpotPool, this store relies on the AllocationEngine lock.
"""

import uuid
from dataclasses import dataclass, replace
from datetime import datetime
from decimal import Decimal
from typing import Optional
from parking_engine.services.exceptions import AlreadySettledError, NotFoundError


@dataclass
class ParkingTicket:
    ticket_id: str
    spot_id: str
    license_plate: str
    vehicle_class: str
    entry_time: datetime
    fee: Decimal = Decimal("0")
    settled: bool = False                 # false → true only, never reset
    settled_at: Optional[datetime] = None

    def copy(self) -> "ParkingTicket":
        return replace(self)


class TicketStore:
    def __init__(self):
        self._tickets: dict[str, ParkingTicket] = {}

    def __len__(self):
        return len(self._tickets)

    def mint(self, spot_id: str, license_plate: str, vehicle_class: str,
             entry_time: datetime) -> ParkingTicket:
        ticket = ParkingTicket(
            ticket_id=str(uuid.uuid4()),
            spot_id=spot_id,
            license_plate=license_plate,
            vehicle_class=vehicle_class,
            entry_time=entry_time,
        )
        self._tickets[ticket.ticket_id] = ticket
        return ticket

    def get(self, ticket_id: str) -> ParkingTicket:
        ticket = self._tickets.get(ticket_id)
        if ticket is None:
            raise NotFoundError(f"Unknown ticket: {ticket_id}")
        return ticket

    def settle(self, ticket_id: str, fee: Decimal, settled_at: datetime) -> ParkingTicket:
        """Record the fee and close the ticket. A settled ticket is never overwritten."""
        ticket = self.get(ticket_id)
        if ticket.settled:
            raise AlreadySettledError(f"Ticket {ticket_id} already settled")
        ticket.fee = fee
        ticket.settled = True
        ticket.settled_at = settled_at
        return ticket

    def open_tickets(self) -> list[ParkingTicket]:
        return [t.copy() for t in self._tickets.values() if not t.settled]
