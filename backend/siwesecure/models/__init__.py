"""Models package with all models."""
from .base import BaseModel
from .user import UserRole, Student, IndustrySupervisor, InstitutionSupervisor, Admin
from .location import CompanyLocation
from .assignment import StudentSupervisorAssignment
from .presence import PresenceLog, PresenceStatus
from .logbook import LogEntry, EntryStatus
from .review import WeeklyReview
from .inspection import FinalInspection
from .audit import AuditLog

__all__ = [
    'BaseModel', 'UserRole', 'Student', 'IndustrySupervisor',
    'InstitutionSupervisor', 'Admin', 'CompanyLocation',
    'StudentSupervisorAssignment', 'PresenceLog', 'PresenceStatus',
    'LogEntry', 'EntryStatus', 'WeeklyReview', 'FinalInspection',
    'AuditLog'
]
