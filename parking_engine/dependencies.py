# parking_engine/dependencies.py
"""FastAPI dependency for the process-wide AllocationEngine (built on startup in main.py)."""

from fastapi import Request
from parking_engine.services.allocation_engine import AllocationEngine


def get_engine(request: Request) -> AllocationEngine:
    return request.app.state.engine
