"""Shared fixtures: app with in-memory database, fixed clock, seeded identities."""
from datetime import date, datetime, time

import pytest
from flask_jwt_extended import create_access_token

from siwesecure import create_app, db
from siwesecure.models import (
    Admin, CompanyLocation, IndustrySupervisor, InstitutionSupervisor,
    Student, StudentSupervisorAssignment, UserRole
)
from siwesecure.services.clock import Clock
from siwesecure.services.identity_service import Actor
from siwesecure.services.registry import get_services

MONDAY = date(2024, 1, 15)
FRIDAY = date(2024, 1, 19)


class FixedClock(Clock):
    """Clock pinned to a settable date."""

    def __init__(self, today: date):
        super().__init__('UTC')
        self.current = today

    def now(self) -> datetime:
        return datetime.combine(self.current, time(9, 30))

    def today(self) -> date:
        return self.current


@pytest.fixture
def clock():
    return FixedClock(MONDAY)


@pytest.fixture
def app(clock):
    """Create test app."""
    app = create_app('testing', clock=clock)
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture
def services(app):
    return get_services()


@pytest.fixture
def location(app):
    location = CompanyLocation(
        company_name='Acme Works',
        latitude=0.0,
        longitude=0.0,
        allowed_radius_meters=100
    )
    return location.save()


@pytest.fixture
def student(app, location):
    student = Student(
        matric_number='ENG/2020/001',
        full_name='Ada Obi',
        email='ada@example.com',
        institution='Unilag',
        department='Mechanical Engineering',
        siwes_start_date=date(2024, 1, 1),
        siwes_end_date=date(2024, 6, 28),
        company_location_id=location.id
    )
    return student.save()


@pytest.fixture
def industry_supervisor(app):
    supervisor = IndustrySupervisor(
        full_name='Bola Ade',
        email='bola@acme.example.com',
        company_name='Acme Works',
        verified=True
    )
    return supervisor.save()


@pytest.fixture
def institution_supervisor(app):
    supervisor = InstitutionSupervisor(
        full_name='Dr. Chike Eze',
        email='chike@unilag.example.com',
        institution='Unilag',
        verified=True
    )
    return supervisor.save()


@pytest.fixture
def admin(app):
    return Admin(full_name='Admin', email='admin@example.com').save()


@pytest.fixture
def assignment(app, student, industry_supervisor):
    assignment = StudentSupervisorAssignment(
        student_id=student.id,
        industry_supervisor_id=industry_supervisor.id
    )
    return assignment.save()


def make_actor(user, role: UserRole) -> Actor:
    return Actor(id=user.id, role=role, verified=True, ip_address='127.0.0.1')


def auth_headers(user_id: int, role: UserRole) -> dict:
    token = create_access_token(identity=str(user_id), additional_claims={'role': role.value})
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture
def student_actor(student):
    return make_actor(student, UserRole.STUDENT)


@pytest.fixture
def supervisor_actor(industry_supervisor):
    return make_actor(industry_supervisor, UserRole.INDUSTRY_SUPERVISOR)


@pytest.fixture
def inspector_actor(institution_supervisor):
    return make_actor(institution_supervisor, UserRole.INSTITUTION_SUPERVISOR)


@pytest.fixture
def admin_actor(admin):
    return make_actor(admin, UserRole.ADMIN)


@pytest.fixture
def student_headers(student):
    return auth_headers(student.id, UserRole.STUDENT)


@pytest.fixture
def supervisor_headers(industry_supervisor):
    return auth_headers(industry_supervisor.id, UserRole.INDUSTRY_SUPERVISOR)


@pytest.fixture
def inspector_headers(institution_supervisor):
    return auth_headers(institution_supervisor.id, UserRole.INSTITUTION_SUPERVISOR)


@pytest.fixture
def admin_headers(admin):
    return auth_headers(admin.id, UserRole.ADMIN)


class _NoMatch:
    def first(self):
        return None


class MissFirstLookup:
    """Stands in for ``Model.query``; the first ``filter_by`` finds nothing.

    Reproduces a concurrent writer committing between a service's existence
    check and its insert. Later lookups hit the database.
    """

    def __init__(self, model):
        self.model = model
        self.missed = False

    def filter_by(self, **kwargs):
        if not self.missed:
            self.missed = True
            return _NoMatch()
        return db.session.query(self.model).filter_by(**kwargs)


def miss_first_lookup(monkeypatch, model):
    monkeypatch.setattr(model, 'query', MissFirstLookup(model))
