"""Weekly supervisor reviews."""
from siwesecure import db
from siwesecure.models.base import BaseModel
from siwesecure.services.clock import utcnow


class WeeklyReview(BaseModel):
    """Industry supervisor sign-off for one SIWES week. Write-once."""

    __tablename__ = 'weekly_reviews'
    __table_args__ = (
        db.UniqueConstraint('student_id', 'week_number', name='uq_weekly_review_student_week'),
    )

    student_id = db.Column(db.Integer, db.ForeignKey('students.id'), nullable=False)
    week_number = db.Column(db.Integer, nullable=False)
    industry_supervisor_id = db.Column(db.Integer, db.ForeignKey('industry_supervisors.id'), nullable=False)
    comment = db.Column(db.Text, nullable=True)
    review_hash = db.Column(db.String(64), nullable=False)
    reviewed_at = db.Column(db.DateTime, default=utcnow, nullable=False)
