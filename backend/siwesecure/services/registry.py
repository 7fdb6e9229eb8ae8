"""Explicitly constructed service graph, one per application."""
from flask import Flask, current_app

from siwesecure.services.admin_service import AdminService
from siwesecure.services.audit_service import AuditService
from siwesecure.services.clock import Clock
from siwesecure.services.inspection_service import InspectionService
from siwesecure.services.logbook_service import LogbookService
from siwesecure.services.presence_service import PresenceService
from siwesecure.services.review_service import ReviewService

EXTENSION_KEY = 'siwesecure'


class Services:
    """Wires the clock and audit recorder into every domain service."""

    def __init__(self, app: Flask, clock: Clock = None):
        config = app.config
        self.clock = clock or Clock(config.get('SIWES_TIMEZONE', 'UTC'))
        self.audit = AuditService(app)

        self.presence = PresenceService(
            self.audit, self.clock,
            history_limit=config.get('PRESENCE_HISTORY_LIMIT', 50)
        )
        self.logbook = LogbookService(self.audit, self.clock)
        self.reviews = ReviewService(
            self.audit, self.clock,
            review_weekday=config.get('REVIEW_WEEKDAY', 4)
        )
        self.inspections = InspectionService(self.audit, self.clock)
        self.admin = AdminService(
            self.audit,
            default_radius=config.get('DEFAULT_ALLOWED_RADIUS_METERS', 100)
        )

        app.extensions[EXTENSION_KEY] = self


def get_services() -> Services:
    """Service graph of the current application."""
    return current_app.extensions[EXTENSION_KEY]
