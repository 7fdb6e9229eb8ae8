"""Identity models for the four SIWES roles."""
from enum import Enum

from siwesecure import db
from siwesecure.models.base import BaseModel


class UserRole(Enum):
    """User roles enumeration."""
    STUDENT = 'STUDENT'
    INDUSTRY_SUPERVISOR = 'INDUSTRY_SUPERVISOR'
    INSTITUTION_SUPERVISOR = 'INSTITUTION_SUPERVISOR'
    ADMIN = 'ADMIN'

    @property
    def is_supervisor(self) -> bool:
        return self in (UserRole.INDUSTRY_SUPERVISOR, UserRole.INSTITUTION_SUPERVISOR)


class Student(BaseModel):
    """Student on industrial attachment."""

    __tablename__ = 'students'

    matric_number = db.Column(db.String(50), unique=True, nullable=False, index=True)
    full_name = db.Column(db.String(255), nullable=False)
    email = db.Column(db.String(255), unique=True, nullable=False)
    institution = db.Column(db.String(255), nullable=True)
    department = db.Column(db.String(255), nullable=True)

    # Programme window
    siwes_start_date = db.Column(db.Date, nullable=True)
    siwes_end_date = db.Column(db.Date, nullable=True)

    # Assigned work site
    company_location_id = db.Column(db.Integer, db.ForeignKey('company_locations.id'), nullable=True)

    company_location = db.relationship('CompanyLocation', backref='students')

    def __repr__(self):
        return f'<Student {self.matric_number}>'


class IndustrySupervisor(BaseModel):
    """Workplace supervisor who reviews weekly logs."""

    __tablename__ = 'industry_supervisors'

    full_name = db.Column(db.String(255), nullable=False)
    email = db.Column(db.String(255), unique=True, nullable=False)
    company_name = db.Column(db.String(255), nullable=True)
    verified = db.Column(db.Boolean, default=False, nullable=False)


class InstitutionSupervisor(BaseModel):
    """Institution supervisor who performs the final inspection."""

    __tablename__ = 'institution_supervisors'

    full_name = db.Column(db.String(255), nullable=False)
    email = db.Column(db.String(255), unique=True, nullable=False)
    institution = db.Column(db.String(255), nullable=True)
    verified = db.Column(db.Boolean, default=False, nullable=False)


class Admin(BaseModel):
    """Programme administrator."""

    __tablename__ = 'admins'

    full_name = db.Column(db.String(255), nullable=False)
    email = db.Column(db.String(255), unique=True, nullable=False)
