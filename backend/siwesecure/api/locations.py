"""Company locations API."""
from flask import Blueprint, current_app, request
from flask_jwt_extended import jwt_required

from siwesecure import db
from siwesecure.models.user import UserRole
from siwesecure.services.registry import get_services
from siwesecure.utils.decorators import roles_required
from siwesecure.utils.errors import SiwesError
from siwesecure.utils.helpers import error_response, success_response
from siwesecure.utils.validators import Validator

locations_bp = Blueprint('locations', __name__)


@locations_bp.route('', methods=['POST'])
@jwt_required()
@roles_required(UserRole.ADMIN)
def create_location():
    """Admin: create company location."""
    try:
        data = Validator.require_json(request.get_json(silent=True))
        if not data.get('company_name') or data.get('latitude') is None or data.get('longitude') is None:
            return error_response("Missing required fields", 400)

        company_name = Validator.text(data['company_name'], 'company_name', max_length=255)
        latitude = Validator.latitude(data['latitude'])
        longitude = Validator.longitude(data['longitude'])
        radius = Validator.optional_positive_int(data.get('allowed_radius_meters'), 'allowed_radius_meters')

        location = get_services().admin.create_location(company_name, latitude, longitude, radius)
        return success_response(data={'location': location.to_dict()}, status_code=201)

    except SiwesError:
        raise
    except Exception:
        db.session.rollback()
        current_app.logger.exception("Location creation error")
        return error_response("Failed to create location", 500)


@locations_bp.route('', methods=['GET'])
@jwt_required()
@roles_required(UserRole.ADMIN, UserRole.INDUSTRY_SUPERVISOR, UserRole.INSTITUTION_SUPERVISOR)
def list_locations():
    """All company locations, by name."""
    locations = get_services().admin.list_locations()
    return success_response(data={'locations': [location.to_dict() for location in locations]})
