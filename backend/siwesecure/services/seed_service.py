"""Database seeding service for demo data."""
from datetime import timedelta
from typing import List

from siwesecure import db
from siwesecure.models.assignment import StudentSupervisorAssignment
from siwesecure.models.location import CompanyLocation
from siwesecure.models.user import Admin, IndustrySupervisor, InstitutionSupervisor, Student
from siwesecure.services.clock import Clock


class SeedService:
    """Service to seed database with a small, consistent demo dataset."""

    @staticmethod
    def seed_demo(clock: Clock = None) -> List[str]:
        """Seed one of everything. Existing rows (matched by email) are kept."""
        clock = clock or Clock()
        today = clock.today()
        summary = []

        admin = Admin.query.filter_by(email='admin@siwes.local').first()
        if not admin:
            admin = Admin(full_name='System Administrator', email='admin@siwes.local')
            db.session.add(admin)

        location = CompanyLocation.query.filter_by(company_name='Demo Engineering Ltd').first()
        if not location:
            location = CompanyLocation(
                company_name='Demo Engineering Ltd',
                latitude=6.5244,
                longitude=3.3792,
                allowed_radius_meters=100
            )
            db.session.add(location)

        industry = IndustrySupervisor.query.filter_by(email='industry@siwes.local').first()
        if not industry:
            industry = IndustrySupervisor(
                full_name='Industry Supervisor',
                email='industry@siwes.local',
                company_name='Demo Engineering Ltd',
                verified=True
            )
            db.session.add(industry)

        institution = InstitutionSupervisor.query.filter_by(email='institution@siwes.local').first()
        if not institution:
            institution = InstitutionSupervisor(
                full_name='Institution Supervisor',
                email='institution@siwes.local',
                institution='Demo University',
                verified=True
            )
            db.session.add(institution)

        db.session.flush()

        student = Student.query.filter_by(email='student@siwes.local').first()
        if not student:
            student = Student(
                matric_number='SIWES/0001',
                full_name='Demo Student',
                email='student@siwes.local',
                institution='Demo University',
                department='Computer Engineering',
                siwes_start_date=today - timedelta(days=14),
                siwes_end_date=today + timedelta(weeks=22),
                company_location_id=location.id
            )
            db.session.add(student)
            db.session.flush()

        if not StudentSupervisorAssignment.query.filter_by(
                student_id=student.id, industry_supervisor_id=industry.id).first():
            db.session.add(StudentSupervisorAssignment(
                student_id=student.id,
                industry_supervisor_id=industry.id
            ))

        db.session.commit()

        summary.append(f'Admin: {admin.email} (id {admin.id})')
        summary.append(f'Industry supervisor: {industry.email} (id {industry.id})')
        summary.append(f'Institution supervisor: {institution.email} (id {institution.id})')
        summary.append(f'Student: {student.email} (id {student.id}) at {location.company_name}')
        return summary
