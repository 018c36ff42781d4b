# parking_engine/services/spot_pool.py
"""
Fixed inventory of typed parking spots and their occupancy.

The pool itself is not thread-safe: the AllocationEngine owns it and only
touches it while holding its lock.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional
from parking_engine.services.exceptions import ConflictError, NotFoundError


class SpotClass(str, Enum):
    BIKE_SPOT = "BIKE_SPOT"      # two-wheel
    CAR_SPOT = "CAR_SPOT"        # four-wheel
    LARGE_SPOT = "LARGE_SPOT"    # oversize


# id prefix per class: S-B-1, S-C-1, S-L-1 ...
SPOT_ID_PREFIX = {
    SpotClass.BIKE_SPOT: "S-B",
    SpotClass.CAR_SPOT: "S-C",
    SpotClass.LARGE_SPOT: "S-L",
}


@dataclass
class ParkingSpot:
    spot_id: str
    spot_class: SpotClass
    occupied: bool = False
    license_plate: Optional[str] = None   # holder; None while free

    def copy(self) -> "ParkingSpot":
        return replace(self)


class SpotPool:
    def __init__(self, spots: list[ParkingSpot]):
        self._spots: dict[str, ParkingSpot] = {}
        for spot in spots:
            if spot.spot_id in self._spots:
                raise ValueError(f"Duplicate spot id: {spot.spot_id}")
            self._spots[spot.spot_id] = spot

    @classmethod
    def from_counts(cls, counts: dict) -> "SpotPool":
        """Build an inventory from {SpotClass: count}, numbering each class from 1."""
        spots = []
        for spot_class in SpotClass:
            count = counts.get(spot_class, 0)
            if count < 0:
                raise ValueError(f"Negative spot count for {spot_class.value}: {count}")
            prefix = SPOT_ID_PREFIX[spot_class]
            spots.extend(ParkingSpot(f"{prefix}-{i}", spot_class) for i in range(1, count + 1))
        return cls(spots)

    def __len__(self):
        return len(self._spots)

    def get(self, spot_id: str) -> ParkingSpot:
        spot = self._spots.get(spot_id)
        if spot is None:
            raise NotFoundError(f"Unknown spot: {spot_id}")
        return spot

    def find_free(self, spot_class: SpotClass) -> Optional[ParkingSpot]:
        """First free spot of the class in insertion order, or None when the class is full."""
        for spot in self._spots.values():
            if spot.spot_class == spot_class and not spot.occupied:
                return spot
        return None

    def occupy(self, spot_id: str, license_plate: str):
        spot = self.get(spot_id)
        if spot.occupied:
            raise ConflictError(f"Spot {spot_id} already held by {spot.license_plate}")
        spot.occupied = True
        spot.license_plate = license_plate

    def release(self, spot_id: str):
        """Free a spot. Releasing a spot that is already free is a no-op."""
        spot = self.get(spot_id)
        spot.occupied = False
        spot.license_plate = None

    def snapshot(self) -> list[ParkingSpot]:
        return [spot.copy() for spot in self._spots.values()]

    def counts(self) -> dict:
        """{SpotClass: (total, free)} for every class, including empty ones."""
        totals = {spot_class: [0, 0] for spot_class in SpotClass}
        for spot in self._spots.values():
            totals[spot.spot_class][0] += 1
            if not spot.occupied:
                totals[spot.spot_class][1] += 1
        return {spot_class: tuple(pair) for spot_class, pair in totals.items()}
