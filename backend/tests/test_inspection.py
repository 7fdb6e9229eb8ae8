"""Final inspection gate tests."""
import json
from datetime import date

import pytest

from siwesecure import db
from siwesecure.models import AuditLog, FinalInspection, InstitutionSupervisor, Student, UserRole
from siwesecure.utils.errors import AlreadyInspected, NotFound, PeriodNotEnded

from conftest import auth_headers, miss_first_lookup

AFTER_END = date(2024, 7, 1)


def test_inspection_before_end_date_is_rejected(services, student, inspector_actor):
    with pytest.raises(PeriodNotEnded):
        services.inspections.submit_inspection(inspector_actor, student.id, 'Early', 'COMPLIANT')

    assert FinalInspection.query.count() == 0
    event = AuditLog.query.one()
    assert event.action == 'INSPECTION_ATTEMPT'
    assert event.success is False


def test_inspection_without_end_date_is_rejected(services, clock, student, inspector_actor):
    student.siwes_end_date = None
    db.session.commit()
    clock.current = AFTER_END

    with pytest.raises(PeriodNotEnded):
        services.inspections.submit_inspection(inspector_actor, student.id, None, 'COMPLIANT')


def test_inspection_on_end_date_is_allowed(services, clock, student, inspector_actor):
    clock.current = student.siwes_end_date

    inspection = services.inspections.submit_inspection(inspector_actor, student.id, 'Done', 'COMPLIANT')

    assert inspection.id is not None


def test_inspection_is_recorded_once(services, clock, student, inspector_actor):
    clock.current = AFTER_END

    inspection = services.inspections.submit_inspection(inspector_actor, student.id, 'All good', 'COMPLIANT')

    assert inspection.institution_supervisor_id == inspector_actor.id
    assert len(inspection.inspection_hash) == 64
    event = AuditLog.query.one()
    assert event.action == 'FINAL_INSPECTION'
    assert event.resource == f'student_{student.id}'
    assert event.success is True

    with pytest.raises(AlreadyInspected):
        services.inspections.submit_inspection(inspector_actor, student.id, 'Changed', 'NON_COMPLIANT')

    assert FinalInspection.query.one().compliance_status == 'COMPLIANT'
    assert AuditLog.query.filter_by(action='INSPECTION_EDIT_ATTEMPT', success=False).count() == 1


def test_inspection_of_unknown_student(services, clock, inspector_actor):
    clock.current = AFTER_END

    with pytest.raises(NotFound):
        services.inspections.submit_inspection(inspector_actor, 999, None, 'COMPLIANT')


# =================== API ===================

def test_inspection_endpoint(client, clock, student, inspector_headers):
    clock.current = AFTER_END

    response = client.post('/api/supervisor/inspection', json={
        'student_id': student.id,
        'compliance_status': 'COMPLIANT',
        'inspection_notes': 'Logbook complete'
    }, headers=inspector_headers)

    assert response.status_code == 201
    data = json.loads(response.data)
    assert data['data']['inspection']['compliance_status'] == 'COMPLIANT'


def test_inspection_endpoint_before_end(client, student, inspector_headers):
    response = client.post('/api/supervisor/inspection', json={
        'student_id': student.id,
        'compliance_status': 'COMPLIANT'
    }, headers=inspector_headers)

    assert response.status_code == 403
    assert json.loads(response.data)['code'] == 'PERIOD_NOT_ENDED'


def test_inspection_endpoint_duplicate(client, clock, student, inspector_headers):
    clock.current = AFTER_END
    payload = {'student_id': student.id, 'compliance_status': 'COMPLIANT'}
    client.post('/api/supervisor/inspection', json=payload, headers=inspector_headers)

    response = client.post('/api/supervisor/inspection', json=payload, headers=inspector_headers)

    assert response.status_code == 409
    assert json.loads(response.data)['code'] == 'ALREADY_INSPECTED'


def test_inspection_endpoint_requires_compliance_status(client, student, inspector_headers):
    response = client.post('/api/supervisor/inspection', json={'student_id': student.id},
                           headers=inspector_headers)
    assert response.status_code == 400


def test_industry_supervisor_cannot_inspect(client, clock, student, supervisor_headers):
    clock.current = AFTER_END

    response = client.post('/api/supervisor/inspection', json={
        'student_id': student.id,
        'compliance_status': 'COMPLIANT'
    }, headers=supervisor_headers)

    assert response.status_code == 403


def test_unverified_institution_supervisor_is_rejected(client, clock, student):
    inspector = InstitutionSupervisor(full_name='New', email='new@unilag.example.com', verified=False).save()
    clock.current = AFTER_END

    response = client.post('/api/supervisor/inspection', json={
        'student_id': student.id,
        'compliance_status': 'COMPLIANT'
    }, headers=auth_headers(inspector.id, UserRole.INSTITUTION_SUPERVISOR))

    assert response.status_code == 403
    assert FinalInspection.query.count() == 0


def test_all_students_endpoint(client, student, inspector_headers):
    Student(matric_number='ENG/2020/002', full_name='Second', email='second@example.com').save()

    response = client.get('/api/supervisor/all-students', headers=inspector_headers)

    assert response.status_code == 200
    students = json.loads(response.data)['data']['students']
    assert {s['matric_number'] for s in students} == {'ENG/2020/001', 'ENG/2020/002'}


def test_inspection_committed_concurrently_wins(services, clock, student, inspector_actor, monkeypatch):
    clock.current = AFTER_END
    FinalInspection(
        student_id=student.id,
        institution_supervisor_id=inspector_actor.id,
        compliance_status='COMPLIANT',
        inspection_hash='0' * 64
    ).save()
    miss_first_lookup(monkeypatch, FinalInspection)

    with pytest.raises(AlreadyInspected):
        services.inspections.submit_inspection(inspector_actor, student.id, 'Late', 'NON_COMPLIANT')
    monkeypatch.undo()

    assert FinalInspection.query.one().compliance_status == 'COMPLIANT'
    assert AuditLog.query.filter_by(action='INSPECTION_EDIT_ATTEMPT', success=False).count() == 1
