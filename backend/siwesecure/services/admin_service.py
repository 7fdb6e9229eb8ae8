"""Administrative operations: sites, supervisor verification and assignments."""
from typing import Dict, List, Optional

from flask import current_app
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from siwesecure import db
from siwesecure.models.assignment import StudentSupervisorAssignment
from siwesecure.models.audit import AuditLog
from siwesecure.models.location import CompanyLocation
from siwesecure.models.user import (
    UserRole, Student, IndustrySupervisor, InstitutionSupervisor
)
from siwesecure.services.audit_service import AuditService
from siwesecure.services.identity_service import Actor, repository_for
from siwesecure.utils.errors import (
    DuplicateAssignment, NotFound, StorageError, SupervisorNotVerified, ValidationError
)


class AdminService:
    """Operations reserved for administrators."""

    def __init__(self, audit: AuditService, default_radius: int = 100):
        self.audit = audit
        self.default_radius = default_radius

    # =================== LOCATIONS ===================

    def create_location(
        self,
        company_name: str,
        latitude: float,
        longitude: float,
        allowed_radius_meters: Optional[int] = None
    ) -> CompanyLocation:
        location = CompanyLocation(
            company_name=company_name,
            latitude=latitude,
            longitude=longitude,
            allowed_radius_meters=allowed_radius_meters or self.default_radius
        )
        try:
            return location.save()
        except SQLAlchemyError as e:
            db.session.rollback()
            current_app.logger.error(f"Location creation error: {e}")
            raise StorageError("Failed to create location")

    @staticmethod
    def list_locations() -> List[CompanyLocation]:
        return CompanyLocation.query.order_by(CompanyLocation.company_name).all()

    # =================== SUPERVISORS ===================

    def verify_supervisor(self, actor: Actor, supervisor_id: int, supervisor_type: str):
        try:
            role = UserRole(supervisor_type)
        except ValueError:
            role = None
        if role is None or not role.is_supervisor:
            raise ValidationError("Invalid supervisor type")

        supervisor = repository_for(role).find_by_id(supervisor_id)
        if supervisor is None:
            raise NotFound("Supervisor not found")

        try:
            supervisor.verified = True
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            current_app.logger.error(f"Supervisor verification error: {e}")
            self._audit(actor, 'VERIFY_SUPERVISOR', 'supervisor', False)
            raise StorageError("Failed to verify supervisor")

        self._audit(actor, 'VERIFY_SUPERVISOR', f'{role.value}_{supervisor_id}', True)
        return supervisor

    def assign_supervisor(self, actor: Actor, student_id: int, industry_supervisor_id: int) -> StudentSupervisorAssignment:
        supervisor = db.session.get(IndustrySupervisor, industry_supervisor_id)
        if supervisor is None:
            raise NotFound("Supervisor not found")
        if not supervisor.verified:
            raise SupervisorNotVerified()

        if db.session.get(Student, student_id) is None:
            raise NotFound("Student not found")

        existing = StudentSupervisorAssignment.query.filter_by(
            student_id=student_id,
            industry_supervisor_id=industry_supervisor_id
        ).first()
        if existing is not None:
            self._audit(actor, 'ASSIGN_SUPERVISOR', f'student_{student_id}', False)
            raise DuplicateAssignment()

        assignment = StudentSupervisorAssignment(
            student_id=student_id,
            industry_supervisor_id=industry_supervisor_id
        )
        try:
            db.session.add(assignment)
            db.session.commit()
        except IntegrityError:
            db.session.rollback()
            self._audit(actor, 'ASSIGN_SUPERVISOR', f'student_{student_id}', False)
            raise DuplicateAssignment()
        except SQLAlchemyError as e:
            db.session.rollback()
            current_app.logger.error(f"Assignment error: {e}")
            self._audit(actor, 'ASSIGN_SUPERVISOR', 'assignment', False)
            raise StorageError("Failed to assign supervisor")

        self._audit(actor, 'ASSIGN_SUPERVISOR', f'student_{student_id}', True)
        return assignment

    def assign_location(self, actor: Actor, student_id: int, company_location_id: int) -> Student:
        student = db.session.get(Student, student_id)
        if student is None:
            raise NotFound("Student not found")
        if db.session.get(CompanyLocation, company_location_id) is None:
            raise NotFound("Location not found")

        try:
            student.company_location_id = company_location_id
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            current_app.logger.error(f"Location assignment error: {e}")
            self._audit(actor, 'ASSIGN_LOCATION', 'assignment', False)
            raise StorageError("Failed to assign location")

        self._audit(actor, 'ASSIGN_LOCATION', f'student_{student_id}', True)
        return student

    # =================== LISTINGS ===================

    @staticmethod
    def audit_logs(limit: int, offset: int) -> Dict:
        query = AuditLog.query.order_by(AuditLog.created_at.desc(), AuditLog.id.desc())
        return {
            'audit_logs': [log.to_dict() for log in query.limit(limit).offset(offset).all()],
            'total': AuditLog.query.count(),
            'limit': limit,
            'offset': offset
        }

    @staticmethod
    def students_with_locations() -> List[Dict]:
        students = []
        for student in Student.query.order_by(Student.created_at.desc()).all():
            data = student.to_dict()
            location = student.company_location
            data['company_name'] = location.company_name if location else None
            data['latitude'] = location.latitude if location else None
            data['longitude'] = location.longitude if location else None
            students.append(data)
        return students

    @staticmethod
    def supervisors() -> Dict:
        return {
            'industry_supervisors': [
                s.to_dict() for s in IndustrySupervisor.query.order_by(IndustrySupervisor.created_at.desc()).all()
            ],
            'institution_supervisors': [
                s.to_dict() for s in InstitutionSupervisor.query.order_by(InstitutionSupervisor.created_at.desc()).all()
            ]
        }

    def _audit(self, actor: Actor, action: str, resource: str, success: bool) -> None:
        self.audit.record(actor.id, actor.role.value, action, resource, success, actor.ip_address)
