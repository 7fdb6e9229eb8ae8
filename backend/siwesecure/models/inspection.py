"""Final institution inspection."""
from siwesecure import db
from siwesecure.models.base import BaseModel
from siwesecure.services.clock import utcnow


class FinalInspection(BaseModel):
    """Terminal inspection record, at most one per student."""

    __tablename__ = 'final_inspections'

    student_id = db.Column(db.Integer, db.ForeignKey('students.id'), nullable=False, unique=True)
    institution_supervisor_id = db.Column(
        db.Integer, db.ForeignKey('institution_supervisors.id'), nullable=False
    )
    inspection_notes = db.Column(db.Text, nullable=True)
    compliance_status = db.Column(db.String(50), nullable=False)
    inspection_hash = db.Column(db.String(64), nullable=False)
    inspected_at = db.Column(db.DateTime, default=utcnow, nullable=False)
