"""Company location (geofence reference point)."""
from siwesecure import db
from siwesecure.models.base import BaseModel


class CompanyLocation(BaseModel):
    """Work site a student must be physically present at."""

    __tablename__ = 'company_locations'

    company_name = db.Column(db.String(255), nullable=False)
    latitude = db.Column(db.Float, nullable=False)
    longitude = db.Column(db.Float, nullable=False)
    allowed_radius_meters = db.Column(db.Integer, nullable=False, default=100)

    def __repr__(self):
        return f'<CompanyLocation {self.company_name}>'
