"""Identity repositories, one per role."""
from dataclasses import dataclass
from typing import Dict, Optional, Type

from siwesecure import db
from siwesecure.models.base import BaseModel
from siwesecure.models.user import (
    UserRole, Student, IndustrySupervisor, InstitutionSupervisor, Admin
)


@dataclass(frozen=True)
class Actor:
    """Authenticated caller of a service operation."""
    id: int
    role: UserRole
    verified: bool = True
    ip_address: Optional[str] = None


class IdentityRepository:
    """Uniform lookup over the table that backs a role."""

    model: Type[BaseModel] = None

    def find_by_id(self, user_id: int) -> Optional[BaseModel]:
        return db.session.get(self.model, user_id)

    def exists(self, user_id: int) -> bool:
        return self.find_by_id(user_id) is not None

    def is_verified(self, user: BaseModel) -> bool:
        """Roles without a verification step are always verified."""
        return True


class StudentRepository(IdentityRepository):
    model = Student


class SupervisorRepository(IdentityRepository):

    def is_verified(self, user: BaseModel) -> bool:
        return bool(user.verified)


class IndustrySupervisorRepository(SupervisorRepository):
    model = IndustrySupervisor


class InstitutionSupervisorRepository(SupervisorRepository):
    model = InstitutionSupervisor


class AdminRepository(IdentityRepository):
    model = Admin


IDENTITY_REPOSITORIES: Dict[UserRole, IdentityRepository] = {
    UserRole.STUDENT: StudentRepository(),
    UserRole.INDUSTRY_SUPERVISOR: IndustrySupervisorRepository(),
    UserRole.INSTITUTION_SUPERVISOR: InstitutionSupervisorRepository(),
    UserRole.ADMIN: AdminRepository(),
}


def repository_for(role: UserRole) -> IdentityRepository:
    return IDENTITY_REPOSITORIES[role]


def resolve_actor(user_id: int, role_name: str, ip_address: Optional[str] = None) -> Optional[Actor]:
    """Build an ``Actor`` for a token subject, or ``None`` if it no longer exists."""
    try:
        role = UserRole(role_name)
    except ValueError:
        return None

    repository = repository_for(role)
    user = repository.find_by_id(user_id)
    if user is None:
        return None

    return Actor(
        id=user.id,
        role=role,
        verified=repository.is_verified(user),
        ip_address=ip_address
    )
