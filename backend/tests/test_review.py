"""Weekly review and lock gate tests."""
import json

import pytest
from sqlalchemy.exc import SQLAlchemyError

from siwesecure import db
from siwesecure.models import (
    AuditLog, EntryStatus, IndustrySupervisor, LogEntry, StudentSupervisorAssignment,
    UserRole, WeeklyReview
)
from siwesecure.utils.errors import AlreadyReviewed, EntryLocked, NotAssigned, StorageError, WrongDay

from conftest import FRIDAY, auth_headers, make_actor, miss_first_lookup


@pytest.fixture
def week_of_entries(services, clock, student_actor):
    """Entries for week 2 (Jan 8-9) and week 3 (Jan 15-17)."""
    for day in (8, 9, 15, 16, 17):
        clock.current = clock.current.replace(day=day)
        services.logbook.submit_entry(student_actor, f'Work on Jan {day}')
    clock.current = FRIDAY
    AuditLog.query.delete()
    db.session.commit()


def statuses(week_number):
    db.session.expire_all()
    return {e.status for e in LogEntry.query.filter_by(week_number=week_number)}


def test_review_outside_review_day_is_rejected(services, student, supervisor_actor, assignment):
    # Fixture clock starts on a Monday
    with pytest.raises(WrongDay):
        services.reviews.submit_review(supervisor_actor, student.id, 3, 'Good week')

    assert WeeklyReview.query.count() == 0
    events = AuditLog.query.all()
    assert len(events) == 1
    assert events[0].action == 'REVIEW_ATTEMPT'
    assert events[0].success is False


def test_review_requires_assignment(services, clock, student, supervisor_actor):
    clock.current = FRIDAY

    with pytest.raises(NotAssigned):
        services.reviews.submit_review(supervisor_actor, student.id, 3, 'Good week')

    assert WeeklyReview.query.count() == 0
    event = AuditLog.query.one()
    assert event.action == 'UNAUTHORIZED_ACCESS'
    assert event.resource == f'student_{student.id}'


def test_inactive_assignment_does_not_count(services, clock, student, supervisor_actor, assignment):
    assignment.is_active = False
    db.session.commit()
    clock.current = FRIDAY

    with pytest.raises(NotAssigned):
        services.reviews.submit_review(supervisor_actor, student.id, 3, 'Good week')


def test_review_locks_that_weeks_entries(services, student, supervisor_actor, assignment, week_of_entries):
    review = services.reviews.submit_review(supervisor_actor, student.id, 3, 'Good week')

    assert review.id is not None
    assert len(review.review_hash) == 64
    assert review.industry_supervisor_id == supervisor_actor.id
    assert statuses(3) == {EntryStatus.LOCKED}
    assert statuses(2) == {EntryStatus.OPEN}

    event = AuditLog.query.one()
    assert event.action == 'WEEKLY_REVIEW'
    assert event.resource == 'week_3'
    assert event.success is True


def test_second_review_for_same_week_is_rejected(services, student, supervisor_actor, assignment, week_of_entries):
    services.reviews.submit_review(supervisor_actor, student.id, 2, 'First')

    with pytest.raises(AlreadyReviewed):
        services.reviews.submit_review(supervisor_actor, student.id, 2, 'Second')

    assert WeeklyReview.query.count() == 1
    assert WeeklyReview.query.one().comment == 'First'
    assert statuses(3) == {EntryStatus.OPEN}
    assert AuditLog.query.filter_by(action='REVIEW_EDIT_ATTEMPT', success=False).count() == 1


def test_second_supervisor_cannot_review_reviewed_week(services, student, supervisor_actor, assignment, week_of_entries):
    other = IndustrySupervisor(full_name='Second', email='second@acme.example.com', verified=True).save()
    StudentSupervisorAssignment(student_id=student.id, industry_supervisor_id=other.id).save()
    services.reviews.submit_review(supervisor_actor, student.id, 3, 'First')

    with pytest.raises(AlreadyReviewed):
        services.reviews.submit_review(make_actor(other, UserRole.INDUSTRY_SUPERVISOR), student.id, 3, 'Again')


def test_locked_entries_stay_locked_for_the_student(services, clock, student, student_actor,
                                                     supervisor_actor, assignment):
    clock.current = FRIDAY
    services.logbook.submit_entry(student_actor, 'Friday work')
    services.reviews.submit_review(supervisor_actor, student.id, 3, 'Reviewed')

    with pytest.raises(EntryLocked):
        services.logbook.submit_entry(student_actor, 'Edited after review')


def test_review_and_lock_roll_back_together(services, student, supervisor_actor, assignment,
                                            week_of_entries, monkeypatch):
    def failing_commit():
        raise SQLAlchemyError("disk full")

    monkeypatch.setattr(db.session, 'commit', failing_commit)
    with pytest.raises(StorageError):
        services.reviews.submit_review(supervisor_actor, student.id, 3, 'Good week')
    monkeypatch.undo()

    assert WeeklyReview.query.count() == 0
    assert statuses(3) == {EntryStatus.OPEN}


# =================== API ===================

def test_review_endpoint(client, clock, student, supervisor_headers, assignment, week_of_entries):
    response = client.post('/api/supervisor/review', json={
        'student_id': student.id,
        'week_number': 3,
        'comment': 'Solid progress'
    }, headers=supervisor_headers)

    assert response.status_code == 201
    data = json.loads(response.data)
    assert data['message'] == 'Week reviewed and locked'
    assert data['data']['review']['week_number'] == 3
    assert statuses(3) == {EntryStatus.LOCKED}


def test_review_endpoint_wrong_day(client, student, supervisor_headers, assignment):
    response = client.post('/api/supervisor/review', json={
        'student_id': student.id,
        'week_number': 3
    }, headers=supervisor_headers)

    assert response.status_code == 403
    assert json.loads(response.data)['code'] == 'WRONG_DAY'


def test_review_endpoint_duplicate(client, clock, student, supervisor_headers, assignment):
    clock.current = FRIDAY
    payload = {'student_id': student.id, 'week_number': 3}
    client.post('/api/supervisor/review', json=payload, headers=supervisor_headers)

    response = client.post('/api/supervisor/review', json=payload, headers=supervisor_headers)

    assert response.status_code == 409
    assert json.loads(response.data)['code'] == 'ALREADY_REVIEWED'


def test_review_endpoint_requires_fields(client, supervisor_headers):
    response = client.post('/api/supervisor/review', json={'student_id': 1}, headers=supervisor_headers)
    assert response.status_code == 400


def test_unverified_supervisor_is_rejected(client, clock, student):
    supervisor = IndustrySupervisor(full_name='New', email='new@acme.example.com', verified=False).save()
    clock.current = FRIDAY

    response = client.post('/api/supervisor/review', json={
        'student_id': student.id,
        'week_number': 3
    }, headers=auth_headers(supervisor.id, UserRole.INDUSTRY_SUPERVISOR))

    assert response.status_code == 403
    assert WeeklyReview.query.count() == 0


def test_assigned_students_endpoint(client, student, supervisor_headers, assignment):
    response = client.get('/api/supervisor/students', headers=supervisor_headers)

    assert response.status_code == 200
    students = json.loads(response.data)['data']['students']
    assert [s['matric_number'] for s in students] == ['ENG/2020/001']
    assert students[0]['siwes_start_date'] == '2024-01-01'


def test_student_logs_endpoint(client, services, student, student_actor, supervisor_headers, assignment):
    services.logbook.submit_entry(student_actor, 'Monday work')

    response = client.get(f'/api/supervisor/students/{student.id}/logs', headers=supervisor_headers)

    assert response.status_code == 200
    entries = json.loads(response.data)['data']['log_entries']
    assert entries[0]['activity_description'] == 'Monday work'
    assert 'content_hash' not in entries[0]


def test_student_logs_of_unassigned_student_are_forbidden(client, student, supervisor_headers):
    response = client.get(f'/api/supervisor/students/{student.id}/logs', headers=supervisor_headers)

    assert response.status_code == 403
    assert AuditLog.query.filter_by(action='UNAUTHORIZED_ACCESS', success=False).count() == 1


def test_review_committed_concurrently_wins(services, student, supervisor_actor, assignment,
                                            week_of_entries, monkeypatch):
    WeeklyReview(
        student_id=student.id,
        week_number=3,
        industry_supervisor_id=supervisor_actor.id,
        comment='Other request',
        review_hash='0' * 64
    ).save()
    miss_first_lookup(monkeypatch, WeeklyReview)

    with pytest.raises(AlreadyReviewed):
        services.reviews.submit_review(supervisor_actor, student.id, 3, 'Late')
    monkeypatch.undo()

    assert WeeklyReview.query.one().comment == 'Other request'
    # The losing transaction's lock is rolled back with it
    assert statuses(3) == {EntryStatus.OPEN}
    assert AuditLog.query.filter_by(action='REVIEW_EDIT_ATTEMPT', success=False).count() == 1
