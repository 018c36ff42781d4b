# parking_engine/services/exceptions.py
"""
Error kinds raised by the allocation core.
The HTTP layer maps each kind to a status code in main.py.
"""


class ParkingError(Exception):
    """Base class for every error the parking core raises."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidInputError(ParkingError):
    """Unrecognised vehicle class or missing license plate."""

    status_code = 400


class CapacityExceededError(ParkingError):
    """No free spot of the requested class. Expected outcome, not a fault."""

    status_code = 409


class InvalidTicketError(ParkingError):
    """Unknown ticket id."""

    status_code = 404


class AlreadySettledError(ParkingError):
    """Exit replayed on a ticket that was already settled."""

    status_code = 409


class ConflictError(ParkingError):
    """Spot already occupied. Only reachable through a locking bug."""


class NotFoundError(ParkingError):
    """Unknown spot or ticket id inside the pool/store."""
