"""Student to industry supervisor assignment."""
from siwesecure import db
from siwesecure.models.base import BaseModel


class StudentSupervisorAssignment(BaseModel):
    """Links a student to the industry supervisor who reviews their logbook."""

    __tablename__ = 'student_supervisor_assignments'
    __table_args__ = (
        db.UniqueConstraint('student_id', 'industry_supervisor_id', name='uq_student_supervisor'),
    )

    student_id = db.Column(db.Integer, db.ForeignKey('students.id'), nullable=False, index=True)
    industry_supervisor_id = db.Column(
        db.Integer, db.ForeignKey('industry_supervisors.id'), nullable=False, index=True
    )
    is_active = db.Column(db.Boolean, default=True, nullable=False)

    student = db.relationship('Student', backref='supervisor_assignments')
    industry_supervisor = db.relationship('IndustrySupervisor', backref='assignments')
