"""Logbook API - one entry per day, editable until the week is reviewed."""
from flask import Blueprint, current_app, request
from flask_jwt_extended import jwt_required

from siwesecure import db, limiter
from siwesecure.models.user import UserRole
from siwesecure.services.registry import get_services
from siwesecure.utils.decorators import current_actor, roles_required
from siwesecure.utils.errors import SiwesError
from siwesecure.utils.helpers import error_response, success_response
from siwesecure.utils.validators import Validator

logbook_bp = Blueprint('logbook', __name__)


@logbook_bp.route('', methods=['POST'])
@jwt_required()
@roles_required(UserRole.STUDENT)
@limiter.limit("20 per minute")
def submit_entry():
    """Student: create or update today's log entry."""
    try:
        data = Validator.require_json(request.get_json(silent=True))
        if not data.get('activity_description'):
            return error_response("Activity description required", 400)

        description = Validator.text(data['activity_description'], 'activity_description')
        presence_log_id = Validator.optional_positive_int(data.get('presence_log_id'), 'presence_log_id')

        entry, created = get_services().logbook.submit_entry(current_actor(), description, presence_log_id)

        return success_response(
            data={'log_entry': entry.to_dict()},
            message='Log entry created' if created else 'Log entry updated',
            status_code=201 if created else 200
        )

    except SiwesError:
        raise
    except Exception:
        db.session.rollback()
        current_app.logger.exception("Log entry creation error")
        return error_response("Failed to create log entry", 500)


@logbook_bp.route('', methods=['GET'])
@jwt_required()
@roles_required(UserRole.STUDENT)
def list_entries():
    """Student: own log entries, newest date first."""
    entries = get_services().logbook.list_entries(current_actor().id)
    return success_response(data={'log_entries': [entry.to_dict() for entry in entries]})
