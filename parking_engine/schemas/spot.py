# parking_engine/schemas/spot.py
from pydantic import BaseModel
from typing import Optional
from parking_engine.services.spot_pool import SpotClass


class SpotOut(BaseModel):
    spot_id: str
    spot_class: SpotClass
    occupied: bool
    license_plate: Optional[str]

    class Config:
        from_attributes = True


class ClassAvailabilityOut(BaseModel):
    total: int
    free: int
    occupied: int
    is_full: bool
