# parking_engine/services/alert_service.py
"""
Shared alert creation service.
Used by gate_log_service when a spot class crosses the occupancy threshold.
Extend here to add push notifications, SMS, email, etc.
"""

from datetime import datetime
from sqlalchemy.orm import Session
from parking_engine.models.alert import Alert
from parking_engine.utils.logger import get_logger

logger = get_logger(__name__)


async def create_alert(db: Session, alert_type, spot_class, description):
    """Create and persist an alert record. Always commits immediately."""
    db.add(Alert(alert_type=alert_type, spot_class=spot_class, description=description,
                 is_resolved=0, triggered_at=datetime.utcnow()))
    db.commit()
    logger.warning(f"[ALERT][{alert_type.upper()}] {description}")


def find_open_alert(db: Session, alert_type, spot_class):
    """Unresolved alert of this type for the class, or None."""
    return db.query(Alert).filter(
        Alert.alert_type == alert_type,
        Alert.spot_class == spot_class,
        Alert.is_resolved == 0,
    ).first()
