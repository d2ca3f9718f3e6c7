"""
Policy di autorizzazione.

Il gate valuta predicati puri su (attore, requisito): nessun side effect,
nessun log, nessun accesso al database. I chiamanti combinano i requisiti
(es. ruolo teacher E proprietario dell'assignment) e decidono cosa fare
con la decisione.
"""
from dataclasses import dataclass
from enum import Enum
from typing import FrozenSet, Iterable, Optional, Union

from assignment_portal.core.errors import DomainError, InsufficientRole, NotOwner
from assignment_portal.schemas.context import Role, UserContext


class DenyReason(str, Enum):
    insufficient_role = "InsufficientRole"
    not_owner = "NotOwner"


_ERRORS = {
    DenyReason.insufficient_role: InsufficientRole,
    DenyReason.not_owner: NotOwner,
}


@dataclass(frozen=True)
class RoleRequirement:
    roles: FrozenSet[Role]

    @classmethod
    def of(cls, *roles: Role) -> "RoleRequirement":
        return cls(frozenset(roles))


@dataclass(frozen=True)
class OwnershipRequirement:
    owner_id: str


Requirement = Union[RoleRequirement, OwnershipRequirement]


@dataclass(frozen=True)
class Decision:
    allowed: bool
    reason: Optional[DenyReason] = None

    def error(self) -> Optional[DomainError]:
        if self.allowed:
            return None
        return _ERRORS[self.reason]()

    def raise_for(self) -> None:
        err = self.error()
        if err is not None:
            raise err


ALLOWED = Decision(allowed=True)


class AuthorizationGate:

    def check(self, actor: UserContext, requirement: Requirement) -> Decision:
        if isinstance(requirement, RoleRequirement):
            if actor.role in requirement.roles:
                return ALLOWED
            return Decision(False, DenyReason.insufficient_role)
        if isinstance(requirement, OwnershipRequirement):
            if str(actor.user_id) == str(requirement.owner_id):
                return ALLOWED
            return Decision(False, DenyReason.not_owner)
        raise TypeError(f"Requisito non supportato: {requirement!r}")

    def check_access(self, actor: UserContext, *requirements: Requirement) -> Decision:
        """Valuta i requisiti in ordine (AND) e ritorna la prima negazione."""
        return self.check_all(actor, requirements)

    def check_all(self, actor: UserContext, requirements: Iterable[Requirement]) -> Decision:
        for requirement in requirements:
            decision = self.check(actor, requirement)
            if not decision.allowed:
                return decision
        return ALLOWED

    def require(self, actor: UserContext, *requirements: Requirement) -> None:
        self.check_all(actor, requirements).raise_for()


TEACHER_ONLY = RoleRequirement.of(Role.teacher)
STUDENT_ONLY = RoleRequirement.of(Role.student)
ANY_ROLE = RoleRequirement.of(Role.teacher, Role.student)
