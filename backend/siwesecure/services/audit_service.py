"""
Audit trail recorder.

Events are appended best-effort. In async mode writes happen on a small worker
pool inside their own application context (and therefore their own database
session). In sync mode (`AUDIT_ASYNC = False`) they are written on the
caller's session after the primary commit or rollback. Either way a failing
audit insert never fails the request that produced it; failures are reported
to the application log only.
"""
import atexit
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, Optional

from flask import Flask

from siwesecure import db
from siwesecure.services.clock import utcnow


class AuditService:
    """Fire-and-forget writer for ``AuditLog`` rows."""

    def __init__(self, app: Flask = None):
        self.app = None
        self.async_mode = True
        self._executor: Optional[ThreadPoolExecutor] = None
        if app is not None:
            self.init_app(app)

    def init_app(self, app: Flask) -> None:
        self.app = app
        self.async_mode = app.config.get('AUDIT_ASYNC', True)
        if self.async_mode:
            self._executor = ThreadPoolExecutor(
                max_workers=app.config.get('AUDIT_MAX_WORKERS', 2),
                thread_name_prefix='audit'
            )
            atexit.register(self.shutdown)

    def record(
        self,
        actor_id: Optional[int],
        actor_role: Optional[str],
        action: str,
        resource: Optional[str],
        success: bool,
        ip_address: Optional[str] = None
    ) -> None:
        """Append one audit event. Never raises."""
        event = {
            'actor_id': actor_id,
            'actor_role': getattr(actor_role, 'value', actor_role),
            'action': action,
            'resource': resource,
            'success': bool(success),
            'ip_address': ip_address,
            'created_at': utcnow()
        }

        if not self.async_mode or self._executor is None:
            self._write(event)
            return

        try:
            self._executor.submit(self._write_in_context, event)
        except RuntimeError:
            # Executor already shut down (interpreter exit)
            self.app.logger.error("Audit event dropped after shutdown: %s", self._describe(event))

    def _write_in_context(self, event: Dict[str, Any]) -> None:
        try:
            with self.app.app_context():
                self._write(event)
        except Exception:
            self.app.logger.exception("Audit logging error: %s", self._describe(event))

    def _write(self, event: Dict[str, Any]) -> None:
        try:
            from siwesecure.models.audit import AuditLog

            db.session.add(AuditLog(**event))
            db.session.commit()
        except Exception:
            db.session.rollback()
            self.app.logger.exception("Audit logging error: %s", self._describe(event))

    @staticmethod
    def _describe(event: Dict[str, Any]) -> str:
        return (f"{event['action']} by {event['actor_role']}:{event['actor_id']} "
                f"on {event['resource']} success={event['success']}")

    def shutdown(self, wait: bool = True) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=wait)
            self._executor = None
