# parking_engine/routers/spots.py
"""Spot inventory — snapshot listing + per-class availability."""

from fastapi import APIRouter, Depends, HTTPException
from parking_engine.dependencies import get_engine
from parking_engine.schemas.spot import SpotOut, ClassAvailabilityOut
from parking_engine.services.allocation_engine import AllocationEngine
from parking_engine.services.spot_pool import SpotClass

router = APIRouter()


@router.get("/spots", response_model=list[SpotOut], summary="List all spots")
def list_spots(spot_class: str = None, occupied: bool = None,
               engine: AllocationEngine = Depends(get_engine)):
    """Consistent snapshot of the inventory, optionally filtered by class or occupancy."""
    if spot_class and spot_class not in SpotClass.__members__:
        raise HTTPException(status_code=400, detail=f"Unknown spot class '{spot_class}'")
    spots = engine.list_spots()
    if spot_class:
        spots = [s for s in spots if s.spot_class == SpotClass[spot_class]]
    if occupied is not None:
        spots = [s for s in spots if s.occupied == occupied]
    return spots


@router.get("/spots/availability", response_model=dict[str, ClassAvailabilityOut],
            summary="Free/occupied counts per spot class")
def get_availability(engine: AllocationEngine = Depends(get_engine)):
    return {
        spot_class: {**counts, "is_full": counts["free"] == 0}
        for spot_class, counts in engine.availability().items()
    }
