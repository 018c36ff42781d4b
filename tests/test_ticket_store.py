"""Unit tests for the ticket store."""

import pytest
from datetime import datetime
from decimal import Decimal
from parking_engine.services.exceptions import AlreadySettledError, NotFoundError
from parking_engine.services.ticket_store import TicketStore

ENTRY = datetime(2026, 2, 20, 9, 0, 0)


class TestTicketStore:
    def test_mint_starts_open_with_zero_fee(self):
        store = TicketStore()
        ticket = store.mint("S-C-1", "ABC-1234", "FOUR_WHEEL", ENTRY)
        assert ticket.fee == Decimal("0")
        assert ticket.settled is False
        assert ticket.settled_at is None
        assert store.get(ticket.ticket_id) is ticket

    def test_ticket_ids_are_unique(self):
        store = TicketStore()
        ids = {store.mint("S-C-1", "P", "FOUR_WHEEL", ENTRY).ticket_id for _ in range(100)}
        assert len(ids) == 100
        assert len(store) == 100

    def test_get_unknown(self):
        with pytest.raises(NotFoundError):
            TicketStore().get("nope")

    def test_settle_sets_fee_once(self):
        store = TicketStore()
        ticket = store.mint("S-C-1", "ABC-1234", "FOUR_WHEEL", ENTRY)
        store.settle(ticket.ticket_id, Decimal("20.00"), ENTRY)
        with pytest.raises(AlreadySettledError):
            store.settle(ticket.ticket_id, Decimal("99.00"), ENTRY)
        assert store.get(ticket.ticket_id).fee == Decimal("20.00")

    def test_settle_unknown(self):
        with pytest.raises(NotFoundError):
            TicketStore().settle("nope", Decimal("10"), ENTRY)

    def test_open_tickets_excludes_settled(self):
        store = TicketStore()
        a = store.mint("S-C-1", "A", "FOUR_WHEEL", ENTRY)
        b = store.mint("S-C-2", "B", "FOUR_WHEEL", ENTRY)
        store.settle(a.ticket_id, Decimal("10"), ENTRY)
        assert [t.ticket_id for t in store.open_tickets()] == [b.ticket_id]
        assert len(store) == 2
