"""GPS presence records."""
import enum

from siwesecure import db
from siwesecure.models.base import BaseModel
from siwesecure.services.clock import utcnow


class PresenceStatus(enum.Enum):
    VALID = 'VALID'
    INVALID = 'INVALID'


class PresenceLog(BaseModel):
    """One presence submission. Append-only."""

    __tablename__ = 'presence_logs'

    student_id = db.Column(db.Integer, db.ForeignKey('students.id'), nullable=False, index=True)
    latitude = db.Column(db.Float, nullable=False)
    longitude = db.Column(db.Float, nullable=False)
    distance_m = db.Column(db.Integer, nullable=False)
    status = db.Column(db.Enum(PresenceStatus), nullable=False)
    timestamp = db.Column(db.DateTime, default=utcnow, nullable=False, index=True)

    @property
    def is_valid(self) -> bool:
        return self.status == PresenceStatus.VALID
