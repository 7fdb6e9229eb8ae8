"""Admin API - supervisor verification, assignments and the audit trail."""
from flask import Blueprint, current_app, request
from flask_jwt_extended import jwt_required

from siwesecure import db
from siwesecure.models.user import UserRole
from siwesecure.services.registry import get_services
from siwesecure.utils.decorators import current_actor, roles_required
from siwesecure.utils.errors import SiwesError
from siwesecure.utils.helpers import error_response, success_response
from siwesecure.utils.validators import Validator

admin_bp = Blueprint('admin', __name__)


@admin_bp.route('/verify-supervisor', methods=['POST'])
@jwt_required()
@roles_required(UserRole.ADMIN)
def verify_supervisor():
    """Mark an industry or institution supervisor as verified."""
    try:
        data = Validator.require_json(request.get_json(silent=True))
        if not data.get('supervisor_id') or not data.get('supervisor_type'):
            return error_response("Supervisor ID and type required", 400)

        supervisor_id = Validator.positive_int(data['supervisor_id'], 'supervisor_id')
        supervisor = get_services().admin.verify_supervisor(
            current_actor(), supervisor_id, data['supervisor_type']
        )

        return success_response(data={
            'supervisor': {
                'id': supervisor.id,
                'full_name': supervisor.full_name,
                'verified': supervisor.verified
            }
        })

    except SiwesError:
        raise
    except Exception:
        db.session.rollback()
        current_app.logger.exception("Supervisor verification error")
        return error_response("Failed to verify supervisor", 500)


@admin_bp.route('/assign-supervisor', methods=['POST'])
@jwt_required()
@roles_required(UserRole.ADMIN)
def assign_supervisor():
    """Assign a student to a verified industry supervisor."""
    try:
        data = Validator.require_json(request.get_json(silent=True))
        Validator.validate_required_fields(data, ['student_id', 'industry_supervisor_id'])

        student_id = Validator.positive_int(data['student_id'], 'student_id')
        supervisor_id = Validator.positive_int(data['industry_supervisor_id'], 'industry_supervisor_id')

        assignment = get_services().admin.assign_supervisor(current_actor(), student_id, supervisor_id)
        return success_response(data={'assignment': assignment.to_dict()}, status_code=201)

    except SiwesError:
        raise
    except Exception:
        db.session.rollback()
        current_app.logger.exception("Assignment error")
        return error_response("Failed to assign supervisor", 500)


@admin_bp.route('/assign-location', methods=['POST'])
@jwt_required()
@roles_required(UserRole.ADMIN)
def assign_location():
    """Assign a student to a company location."""
    try:
        data = Validator.require_json(request.get_json(silent=True))
        Validator.validate_required_fields(data, ['student_id', 'company_location_id'])

        student_id = Validator.positive_int(data['student_id'], 'student_id')
        location_id = Validator.positive_int(data['company_location_id'], 'company_location_id')

        student = get_services().admin.assign_location(current_actor(), student_id, location_id)
        return success_response(data={
            'student': {'id': student.id, 'company_location_id': student.company_location_id}
        })

    except SiwesError:
        raise
    except Exception:
        db.session.rollback()
        current_app.logger.exception("Location assignment error")
        return error_response("Failed to assign location", 500)


@admin_bp.route('/audit-logs', methods=['GET'])
@jwt_required()
@roles_required(UserRole.ADMIN)
def audit_logs():
    """Paginated audit trail, newest first."""
    limit = request.args.get('limit', current_app.config['AUDIT_LOG_PAGE_SIZE'], type=int)
    offset = request.args.get('offset', 0, type=int)

    limit = max(1, min(limit, current_app.config['MAX_AUDIT_LOG_PAGE_SIZE']))
    offset = max(0, offset)

    return success_response(data=get_services().admin.audit_logs(limit, offset))


@admin_bp.route('/students', methods=['GET'])
@jwt_required()
@roles_required(UserRole.ADMIN)
def students():
    """All students with their assigned location."""
    return success_response(data={'students': get_services().admin.students_with_locations()})


@admin_bp.route('/supervisors', methods=['GET'])
@jwt_required()
@roles_required(UserRole.ADMIN)
def supervisors():
    """Industry and institution supervisors."""
    return success_response(data=get_services().admin.supervisors())
