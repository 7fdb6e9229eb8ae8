"""Daily logbook entries."""
import enum

from siwesecure import db
from siwesecure.models.base import BaseModel
from siwesecure.services.clock import utcnow


class EntryStatus(enum.Enum):
    OPEN = 'OPEN'
    LOCKED = 'LOCKED'


class LogEntry(BaseModel):
    """A student's activity for one calendar day."""

    __tablename__ = 'log_entries'
    __table_args__ = (
        db.UniqueConstraint('student_id', 'entry_date', name='uq_log_entry_student_date'),
        db.Index('idx_log_entry_student_week', 'student_id', 'week_number'),
    )

    student_id = db.Column(db.Integer, db.ForeignKey('students.id'), nullable=False)
    entry_date = db.Column(db.Date, nullable=False)
    week_number = db.Column(db.Integer, nullable=False)
    activity_description = db.Column(db.Text, nullable=False)
    presence_log_id = db.Column(db.Integer, db.ForeignKey('presence_logs.id'), nullable=True)
    content_hash = db.Column(db.String(64), nullable=False)
    status = db.Column(db.Enum(EntryStatus), nullable=False, default=EntryStatus.OPEN)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    presence_log = db.relationship('PresenceLog')

    @property
    def is_locked(self) -> bool:
        return self.status == EntryStatus.LOCKED
