# parking_engine/routers/parking.py
"""
Gate endpoints — vehicle entry and exit.
POST /parking/entry — allocate a spot and issue a ticket.
POST /parking/exit  — settle a ticket, free its spot, return the receipt.

Engine calls block on the engine lock, so they run in the threadpool.
Core errors (InvalidInput, CapacityExceeded, InvalidTicket, AlreadySettled)
propagate to the ParkingError handler in main.py.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool
from parking_engine.database import get_db
from parking_engine.dependencies import get_engine
from parking_engine.schemas.ticket import EntryRequest, ExitRequest, EntryOut, TicketOut
from parking_engine.services.allocation_engine import AllocationEngine
from parking_engine.services.gate_log_service import record_entry, record_exit

router = APIRouter()


@router.post("/parking/entry", response_model=EntryOut, summary="Vehicle entry — issue a ticket")
async def enter(body: EntryRequest, engine: AllocationEngine = Depends(get_engine),
                db: Session = Depends(get_db)):
    ticket = await run_in_threadpool(engine.enter, body.vehicle_class, body.license_plate)
    availability = await run_in_threadpool(engine.availability)
    await record_entry(ticket, availability, db)
    return ticket


@router.post("/parking/exit", response_model=TicketOut, summary="Vehicle exit — settle a ticket")
async def exit_lot(body: ExitRequest, engine: AllocationEngine = Depends(get_engine),
                   db: Session = Depends(get_db)):
    """Not idempotent: a second exit on the same ticket is rejected with 409."""
    receipt = await run_in_threadpool(engine.exit, body.ticket_id)
    availability = await run_in_threadpool(engine.availability)
    await record_exit(receipt, availability, db)
    return receipt


@router.get("/parking/tickets", response_model=list[TicketOut], summary="List open tickets")
def list_open_tickets(engine: AllocationEngine = Depends(get_engine)):
    return engine.open_tickets()


@router.get("/parking/tickets/{ticket_id}", response_model=TicketOut, summary="Look up a ticket")
def get_ticket(ticket_id: str, engine: AllocationEngine = Depends(get_engine)):
    return engine.get_ticket(ticket_id)
