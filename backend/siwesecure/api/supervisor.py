"""Supervisor API - weekly reviews (industry) and final inspection (institution)."""
from flask import Blueprint, current_app, request
from flask_jwt_extended import jwt_required

from siwesecure import db
from siwesecure.models.user import UserRole
from siwesecure.services.registry import get_services
from siwesecure.utils.decorators import current_actor, roles_required, verified_supervisor_required
from siwesecure.utils.errors import SiwesError
from siwesecure.utils.helpers import error_response, success_response
from siwesecure.utils.validators import Validator

supervisor_bp = Blueprint('supervisor', __name__)

STUDENT_FIELDS = [
    'id', 'matric_number', 'full_name', 'institution', 'department',
    'siwes_start_date', 'siwes_end_date'
]


def _student_summary(student, extra=()):
    data = student.to_dict()
    return {key: data[key] for key in list(STUDENT_FIELDS) + list(extra)}


# =================== INDUSTRY SUPERVISOR ===================

@supervisor_bp.route('/students', methods=['GET'])
@jwt_required()
@roles_required(UserRole.INDUSTRY_SUPERVISOR)
@verified_supervisor_required
def assigned_students():
    """Students assigned to the current industry supervisor."""
    students = get_services().reviews.assigned_students(current_actor().id)
    return success_response(data={'students': [_student_summary(s) for s in students]})


@supervisor_bp.route('/students/<int:student_id>/logs', methods=['GET'])
@jwt_required()
@roles_required(UserRole.INDUSTRY_SUPERVISOR)
@verified_supervisor_required
def student_logs(student_id):
    """Log entries of an assigned student."""
    entries = get_services().reviews.student_logs(current_actor(), student_id)
    return success_response(data={
        'log_entries': [
            entry.to_dict(exclude=['student_id', 'presence_log_id', 'content_hash', 'updated_at'])
            for entry in entries
        ]
    })


@supervisor_bp.route('/review', methods=['POST'])
@jwt_required()
@roles_required(UserRole.INDUSTRY_SUPERVISOR)
@verified_supervisor_required
def submit_review():
    """Submit weekly review - review day only. Locks the week's entries."""
    try:
        data = Validator.require_json(request.get_json(silent=True))
        if not data.get('student_id') or not data.get('week_number'):
            return error_response("Student ID and week number required", 400)

        student_id = Validator.positive_int(data['student_id'], 'student_id')
        week_number = Validator.positive_int(data['week_number'], 'week_number')
        comment = Validator.text(data.get('comment'), 'comment', required=False)

        review = get_services().reviews.submit_review(current_actor(), student_id, week_number, comment)

        return success_response(
            data={'review': review.to_dict()},
            message='Week reviewed and locked',
            status_code=201
        )

    except SiwesError:
        raise
    except Exception:
        db.session.rollback()
        current_app.logger.exception("Review submission error")
        return error_response("Failed to submit review", 500)


# =================== INSTITUTION SUPERVISOR ===================

@supervisor_bp.route('/all-students', methods=['GET'])
@jwt_required()
@roles_required(UserRole.INSTITUTION_SUPERVISOR)
@verified_supervisor_required
def all_students():
    """Read-only list of every student."""
    students = get_services().inspections.all_students()
    return success_response(data={
        'students': [_student_summary(s, extra=['created_at']) for s in students]
    })


@supervisor_bp.route('/inspection', methods=['POST'])
@jwt_required()
@roles_required(UserRole.INSTITUTION_SUPERVISOR)
@verified_supervisor_required
def submit_inspection():
    """Submit the final inspection once the SIWES period has ended."""
    try:
        data = Validator.require_json(request.get_json(silent=True))
        if not data.get('student_id') or not data.get('compliance_status'):
            return error_response("Student ID and compliance status required", 400)

        student_id = Validator.positive_int(data['student_id'], 'student_id')
        compliance_status = Validator.text(data['compliance_status'], 'compliance_status', max_length=50)
        notes = Validator.text(data.get('inspection_notes'), 'inspection_notes', required=False)

        inspection = get_services().inspections.submit_inspection(
            current_actor(), student_id, notes, compliance_status
        )

        return success_response(
            data={'inspection': inspection.to_dict()},
            message='Final inspection recorded',
            status_code=201
        )

    except SiwesError:
        raise
    except Exception:
        db.session.rollback()
        current_app.logger.exception("Inspection submission error")
        return error_response("Failed to submit inspection", 500)
