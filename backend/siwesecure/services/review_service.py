"""Weekly review gate: one review per student per week, locks that week's entries."""
import calendar
from typing import List, Optional

from flask import current_app
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from siwesecure import db
from siwesecure.models.assignment import StudentSupervisorAssignment
from siwesecure.models.logbook import EntryStatus, LogEntry
from siwesecure.models.review import WeeklyReview
from siwesecure.models.user import Student
from siwesecure.services.audit_service import AuditService
from siwesecure.services.clock import Clock
from siwesecure.services.hash_service import HashService
from siwesecure.services.identity_service import Actor
from siwesecure.utils.errors import AlreadyReviewed, NotAssigned, StorageError, WrongDay


class ReviewService:
    """Industry supervisor operations on assigned students."""

    def __init__(self, audit: AuditService, clock: Clock, review_weekday: int = calendar.FRIDAY):
        self.audit = audit
        self.clock = clock
        self.review_weekday = review_weekday

    def submit_review(
        self,
        actor: Actor,
        student_id: int,
        week_number: int,
        comment: Optional[str] = None
    ) -> WeeklyReview:
        """Close out a week and lock its log entries in the same transaction."""
        if self.clock.weekday() != self.review_weekday:
            self._audit(actor, 'REVIEW_ATTEMPT', 'weekly_review', False)
            raise WrongDay(f"Reviews can only be submitted on {calendar.day_name[self.review_weekday]}s")

        if not self.is_assigned(actor.id, student_id):
            self._audit(actor, 'UNAUTHORIZED_ACCESS', f'student_{student_id}', False)
            raise NotAssigned("Not assigned to this student", status_code=403)

        existing = WeeklyReview.query.filter_by(student_id=student_id, week_number=week_number).first()
        if existing is not None:
            self._audit(actor, 'REVIEW_EDIT_ATTEMPT', 'weekly_review', False)
            raise AlreadyReviewed()

        reviewed_at = self.clock.now()
        review = WeeklyReview(
            student_id=student_id,
            week_number=week_number,
            industry_supervisor_id=actor.id,
            comment=comment,
            reviewed_at=reviewed_at,
            review_hash=HashService.fingerprint({
                'student_id': student_id,
                'week_number': week_number,
                'supervisor_id': actor.id,
                'comment': comment,
                'timestamp': reviewed_at
            })
        )

        try:
            db.session.add(review)
            db.session.flush()

            # Lock all log entries for this week
            LogEntry.query.filter_by(
                student_id=student_id,
                week_number=week_number
            ).update({'status': EntryStatus.LOCKED}, synchronize_session=False)

            db.session.commit()
        except IntegrityError:
            db.session.rollback()
            self._audit(actor, 'REVIEW_EDIT_ATTEMPT', 'weekly_review', False)
            raise AlreadyReviewed()
        except SQLAlchemyError as e:
            db.session.rollback()
            current_app.logger.error(f"Review submission error: {e}")
            self._audit(actor, 'WEEKLY_REVIEW', 'weekly_review', False)
            raise StorageError("Failed to submit review")

        self._audit(actor, 'WEEKLY_REVIEW', f'week_{week_number}', True)
        return review

    def is_assigned(self, supervisor_id: int, student_id: int) -> bool:
        return StudentSupervisorAssignment.query.filter_by(
            student_id=student_id,
            industry_supervisor_id=supervisor_id,
            is_active=True
        ).first() is not None

    def assigned_students(self, supervisor_id: int) -> List[Student]:
        return (
            Student.query
            .join(StudentSupervisorAssignment, StudentSupervisorAssignment.student_id == Student.id)
            .filter(
                StudentSupervisorAssignment.industry_supervisor_id == supervisor_id,
                StudentSupervisorAssignment.is_active.is_(True)
            )
            .order_by(Student.full_name)
            .all()
        )

    def student_logs(self, actor: Actor, student_id: int) -> List[LogEntry]:
        """Log entries of an assigned student, newest first."""
        if not self.is_assigned(actor.id, student_id):
            self._audit(actor, 'UNAUTHORIZED_ACCESS', f'student_{student_id}', False)
            raise NotAssigned("Not assigned to this student", status_code=403)

        return (
            LogEntry.query
            .filter_by(student_id=student_id)
            .order_by(LogEntry.entry_date.desc())
            .all()
        )

    def _audit(self, actor: Actor, action: str, resource: str, success: bool) -> None:
        self.audit.record(actor.id, actor.role.value, action, resource, success, actor.ip_address)
