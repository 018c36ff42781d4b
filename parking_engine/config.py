# parking_engine/config.py
"""
Application configuration using Pydantic-Settings.
All settings can be overridden via environment variables or .env file.
Read once at startup — inventory and rate are never reloaded at runtime.
"""

from decimal import Decimal
from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    # ── Database (gate audit log + alerts) ────────────────────────────────
    DATABASE_URL: str = "sqlite:///./parking.db"

    # ── Network ───────────────────────────────────────────────────────────
    BACKEND_IP: str = "127.0.0.1"
    BACKEND_PORT: int = 8080

    # ── Security ──────────────────────────────────────────────────────────
    API_KEY: Optional[str] = None   # Set in .env to enable auth on API endpoints

    # ── Inventory ─────────────────────────────────────────────────────────
    TWO_WHEEL_SPOTS: int = 5
    FOUR_WHEEL_SPOTS: int = 5
    OVERSIZE_SPOTS: int = 2

    # ── Pricing ───────────────────────────────────────────────────────────
    RATE_PER_HOUR: Decimal = Decimal("10.00")   # flat rate, minimum one billable hour

    # ── Thresholds ────────────────────────────────────────────────────────
    OCCUPANCY_ALERT_THRESHOLD: float = 0.90     # Alert when a spot class is 90% full

    # ── Logging ───────────────────────────────────────────────────────────
    LOG_LEVEL: str = "INFO"

    @property
    def INVENTORY(self) -> dict:
        return {
            "BIKE_SPOT": self.TWO_WHEEL_SPOTS,
            "CAR_SPOT": self.FOUR_WHEEL_SPOTS,
            "LARGE_SPOT": self.OVERSIZE_SPOTS,
        }

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()
