"""Final inspection gate."""
from typing import List, Optional

from flask import current_app
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from siwesecure import db
from siwesecure.models.inspection import FinalInspection
from siwesecure.models.user import Student
from siwesecure.services.audit_service import AuditService
from siwesecure.services.clock import Clock
from siwesecure.services.hash_service import HashService
from siwesecure.services.identity_service import Actor
from siwesecure.utils.errors import AlreadyInspected, NotFound, PeriodNotEnded, StorageError


class InspectionService:
    """Institution supervisor operations."""

    def __init__(self, audit: AuditService, clock: Clock):
        self.audit = audit
        self.clock = clock

    def submit_inspection(
        self,
        actor: Actor,
        student_id: int,
        inspection_notes: Optional[str],
        compliance_status: str
    ) -> FinalInspection:
        student = db.session.get(Student, student_id)
        if student is None:
            raise NotFound("Student not found")

        # A missing end date is treated as "not ended", not as a date long past,
        # so a student without one cannot be inspected
        if student.siwes_end_date is None or self.clock.today() < student.siwes_end_date:
            self._audit(actor, 'INSPECTION_ATTEMPT', 'final_inspection', False)
            raise PeriodNotEnded()

        if FinalInspection.query.filter_by(student_id=student_id).first() is not None:
            self._audit(actor, 'INSPECTION_EDIT_ATTEMPT', 'final_inspection', False)
            raise AlreadyInspected()

        inspected_at = self.clock.now()
        inspection = FinalInspection(
            student_id=student_id,
            institution_supervisor_id=actor.id,
            inspection_notes=inspection_notes,
            compliance_status=compliance_status,
            inspected_at=inspected_at,
            inspection_hash=HashService.fingerprint({
                'student_id': student_id,
                'supervisor_id': actor.id,
                'inspection_notes': inspection_notes,
                'compliance_status': compliance_status,
                'timestamp': inspected_at
            })
        )

        try:
            db.session.add(inspection)
            db.session.commit()
        except IntegrityError:
            db.session.rollback()
            self._audit(actor, 'INSPECTION_EDIT_ATTEMPT', 'final_inspection', False)
            raise AlreadyInspected()
        except SQLAlchemyError as e:
            db.session.rollback()
            current_app.logger.error(f"Inspection submission error: {e}")
            self._audit(actor, 'FINAL_INSPECTION', 'final_inspection', False)
            raise StorageError("Failed to submit inspection")

        self._audit(actor, 'FINAL_INSPECTION', f'student_{student_id}', True)
        return inspection

    def all_students(self) -> List[Student]:
        return Student.query.order_by(Student.created_at.desc()).all()

    def _audit(self, actor: Actor, action: str, resource: str, success: bool) -> None:
        self.audit.record(actor.id, actor.role.value, action, resource, success, actor.ip_address)
