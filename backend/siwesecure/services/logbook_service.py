"""Logbook entry lifecycle: one entry per student per day, locked on review."""
from datetime import date
from typing import List, Optional, Tuple

from flask import current_app
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from siwesecure import db
from siwesecure.models.logbook import EntryStatus, LogEntry
from siwesecure.models.presence import PresenceLog
from siwesecure.models.user import Student
from siwesecure.services.audit_service import AuditService
from siwesecure.services.clock import Clock
from siwesecure.services.hash_service import HashService
from siwesecure.services.identity_service import Actor
from siwesecure.utils.errors import (
    EntryLocked, InvalidPresence, StartDateMissing, StorageError
)


def calculate_week_number(start_date: date, entry_date: date) -> int:
    """SIWES week of ``entry_date``; week 1 starts on ``start_date``."""
    week_number = (entry_date - start_date).days // 7 + 1
    return max(week_number, 1)


class LogbookService:
    """Creates and updates daily log entries for students."""

    def __init__(self, audit: AuditService, clock: Clock):
        self.audit = audit
        self.clock = clock

    def submit_entry(
        self,
        actor: Actor,
        activity_description: str,
        presence_log_id: Optional[int] = None
    ) -> Tuple[LogEntry, bool]:
        """Create today's entry or update it while still OPEN.

        Returns the entry and whether it was newly created.
        """
        # Server date only, no backdating
        entry_date = self.clock.today()

        student = db.session.get(Student, actor.id)
        if student is None or student.siwes_start_date is None:
            self._audit(actor, 'LOGBOOK_ATTEMPT', 'log_entry', False)
            raise StartDateMissing()

        week_number = calculate_week_number(student.siwes_start_date, entry_date)

        if presence_log_id is not None:
            presence = PresenceLog.query.filter_by(id=presence_log_id, student_id=actor.id).first()
            if presence is None:
                self._audit(actor, 'LOGBOOK_ATTEMPT', 'log_entry', False)
                raise InvalidPresence("Invalid presence log")
            if not presence.is_valid:
                self._audit(actor, 'LOGBOOK_ATTEMPT', 'log_entry', False)
                raise InvalidPresence()

        existing = LogEntry.query.filter_by(student_id=actor.id, entry_date=entry_date).first()
        if existing is not None:
            return self._update(actor, existing, activity_description, presence_log_id), False

        entry = LogEntry(
            student_id=actor.id,
            entry_date=entry_date,
            week_number=week_number,
            activity_description=activity_description,
            presence_log_id=presence_log_id,
            status=EntryStatus.OPEN,
            content_hash=self._content_hash(actor.id, entry_date, week_number, activity_description)
        )

        try:
            db.session.add(entry)
            db.session.commit()
        except IntegrityError:
            # Another request created today's entry first
            db.session.rollback()
            existing = LogEntry.query.filter_by(student_id=actor.id, entry_date=entry_date).first()
            if existing is None:
                self._audit(actor, 'LOGBOOK_CREATE', 'log_entry', False)
                raise StorageError("Failed to create log entry")
            return self._update(actor, existing, activity_description, presence_log_id), False
        except SQLAlchemyError as e:
            db.session.rollback()
            current_app.logger.error(f"Log entry creation error: {e}")
            self._audit(actor, 'LOGBOOK_CREATE', 'log_entry', False)
            raise StorageError("Failed to create log entry")

        self._audit(actor, 'LOGBOOK_CREATE', f'log_entry_{entry.id}', True)
        return entry, True

    def list_entries(self, student_id: int) -> List[LogEntry]:
        return (
            LogEntry.query
            .filter_by(student_id=student_id)
            .order_by(LogEntry.entry_date.desc())
            .all()
        )

    def _update(
        self,
        actor: Actor,
        entry: LogEntry,
        activity_description: str,
        presence_log_id: Optional[int]
    ) -> LogEntry:
        if entry.is_locked:
            self._audit(actor, 'LOGBOOK_EDIT_ATTEMPT', 'log_entry', False)
            raise EntryLocked()

        content_hash = self._content_hash(
            entry.student_id, entry.entry_date, entry.week_number, activity_description
        )

        # Conditional on OPEN so a review committed meanwhile wins
        try:
            updated = (
                LogEntry.query
                .filter_by(id=entry.id, status=EntryStatus.OPEN)
                .update({
                    'activity_description': activity_description,
                    'presence_log_id': presence_log_id,
                    'content_hash': content_hash,
                    'updated_at': self.clock.now()
                }, synchronize_session=False)
            )
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            current_app.logger.error(f"Log entry update error: {e}")
            self._audit(actor, 'LOGBOOK_UPDATE', f'log_entry_{entry.id}', False)
            raise StorageError("Failed to update log entry")

        if not updated:
            self._audit(actor, 'LOGBOOK_EDIT_ATTEMPT', 'log_entry', False)
            raise EntryLocked()

        db.session.refresh(entry)
        self._audit(actor, 'LOGBOOK_UPDATE', f'log_entry_{entry.id}', True)
        return entry

    def _content_hash(self, student_id: int, entry_date: date, week_number: int, activity_description: str) -> str:
        return HashService.fingerprint({
            'student_id': student_id,
            'entry_date': entry_date,
            'week_number': week_number,
            'activity_description': activity_description,
            'timestamp': self.clock.now()
        })

    def _audit(self, actor: Actor, action: str, resource: str, success: bool) -> None:
        self.audit.record(actor.id, actor.role.value, action, resource, success, actor.ip_address)
