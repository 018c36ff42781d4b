# Parking Engine — Database Models
# Import all models here for SQLAlchemy discovery

from parking_engine.models.gate_event import GateEvent   # noqa
from parking_engine.models.alert import Alert             # noqa
