"""Presence API - GPS check-in at the assigned work site."""
from flask import Blueprint, current_app, request
from flask_jwt_extended import jwt_required

from siwesecure import db, limiter
from siwesecure.models.user import UserRole
from siwesecure.services.registry import get_services
from siwesecure.utils.decorators import current_actor, roles_required
from siwesecure.utils.errors import SiwesError
from siwesecure.utils.helpers import error_response, success_response
from siwesecure.utils.validators import Validator

presence_bp = Blueprint('presence', __name__)


@presence_bp.route('', methods=['POST'])
@jwt_required()
@roles_required(UserRole.STUDENT)
@limiter.limit("30 per minute")
def submit_presence():
    """Student: submit GPS presence."""
    try:
        data = Validator.require_json(request.get_json(silent=True))
        if data.get('latitude') is None or data.get('longitude') is None:
            return error_response("Latitude and longitude required", 400)

        latitude = Validator.latitude(data['latitude'])
        longitude = Validator.longitude(data['longitude'])

        presence = get_services().presence.submit(current_actor(), latitude, longitude)

        return success_response(
            data={'presence': presence.to_dict()},
            message='Presence validated' if presence.is_valid else 'Location outside allowed radius',
            status_code=201
        )

    except SiwesError:
        raise
    except Exception:
        db.session.rollback()
        current_app.logger.exception("Presence submission error")
        return error_response("Failed to submit presence", 500)


@presence_bp.route('/history', methods=['GET'])
@jwt_required()
@roles_required(UserRole.STUDENT)
def presence_history():
    """Student: most recent presence records, newest first."""
    records = get_services().presence.history(current_actor().id)
    return success_response(data={'presence_logs': [record.to_dict() for record in records]})
