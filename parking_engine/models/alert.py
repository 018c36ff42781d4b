# parking_engine/models/alert.py
"""
Alerts table — capacity alerts raised when a spot class fills up.
Written by alert_service, listed and resolved through the alerts router.
"""

from sqlalchemy import Column, Integer, String, DateTime, Text
from parking_engine.database import Base


class Alert(Base):
    __tablename__ = "alerts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    alert_type = Column(String(50), nullable=False, index=True)
    spot_class = Column(String(20), nullable=False)
    description = Column(Text)
    is_resolved = Column(Integer, default=0, nullable=False)
    triggered_at = Column(DateTime, nullable=False, index=True)
    resolved_at = Column(DateTime)

    def __repr__(self):
        return f"<Alert {self.id} type={self.alert_type} resolved={self.is_resolved}>"
