"""GPS presence validation service."""
import math
from typing import List

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from siwesecure import db
from siwesecure.models.location import CompanyLocation
from siwesecure.models.presence import PresenceLog, PresenceStatus
from siwesecure.models.user import Student
from siwesecure.services.audit_service import AuditService
from siwesecure.services.clock import Clock
from siwesecure.services.geofence_service import GeofenceService
from siwesecure.services.identity_service import Actor
from siwesecure.utils.errors import LocationNotFound, NotAssigned, StorageError


class PresenceService:
    """Validates a student's position against their assigned work site."""

    def __init__(self, audit: AuditService, clock: Clock, history_limit: int = 50):
        self.audit = audit
        self.clock = clock
        self.history_limit = history_limit

    def submit(self, actor: Actor, latitude, longitude) -> PresenceLog:
        """Record one presence submission as VALID or INVALID."""
        student = db.session.get(Student, actor.id)

        if student is None or not student.company_location_id:
            self._audit(actor, 'PRESENCE_ATTEMPT', 'presence_log', False)
            raise NotAssigned("Student not assigned to a location")

        location = db.session.get(CompanyLocation, student.company_location_id)
        if location is None:
            self._audit(actor, 'PRESENCE_ATTEMPT', 'presence_log', False)
            raise LocationNotFound()

        distance, is_valid = GeofenceService.evaluate(
            latitude, longitude,
            location.latitude, location.longitude,
            location.allowed_radius_meters
        )

        presence = PresenceLog(
            student_id=student.id,
            latitude=float(latitude),
            longitude=float(longitude),
            distance_m=math.floor(distance + 0.5),
            status=PresenceStatus.VALID if is_valid else PresenceStatus.INVALID,
            timestamp=self.clock.now()
        )

        try:
            db.session.add(presence)
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            current_app.logger.error(f"Presence submission error: {e}")
            self._audit(actor, 'PRESENCE_SUBMISSION', 'presence_log', False)
            raise StorageError("Failed to submit presence")

        self._audit(actor, 'PRESENCE_SUBMISSION', f'presence_log_{presence.id}', is_valid)
        return presence

    def history(self, student_id: int) -> List[PresenceLog]:
        """Most recent presence records, newest first."""
        return (
            PresenceLog.query
            .filter_by(student_id=student_id)
            .order_by(PresenceLog.timestamp.desc(), PresenceLog.id.desc())
            .limit(self.history_limit)
            .all()
        )

    def _audit(self, actor: Actor, action: str, resource: str, success: bool) -> None:
        self.audit.record(actor.id, actor.role.value, action, resource, success, actor.ip_address)
