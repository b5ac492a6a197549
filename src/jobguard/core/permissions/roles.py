"""Role definitions for the job board.

The numeric hierarchy is for display and reporting only. Permissions are
never derived from it; see ``jobguard.core.permissions.registry``.
"""

from enum import Enum
from types import MappingProxyType


class Role(str, Enum):
    """Named class of actor with a fixed set of granted permissions."""

    ADMIN = "admin"
    EMPLOYER = "employer"  # Posts jobs, reviews applications to them
    CANDIDATE = "candidate"  # Applies to jobs
    VIEWER = "viewer"  # Read-only

    @property
    def level(self) -> int:
        """Display rank of the role (higher is more privileged)."""
        return ROLE_HIERARCHY[self]

    @property
    def description(self) -> str:
        return ROLE_DESCRIPTIONS[self]

    @classmethod
    def parse(cls, value: "str | Role") -> "Role | None":
        """Return the Role for ``value``, or None if it names no role."""
        if isinstance(value, Role):
            return value
        try:
            return cls(value)
        except ValueError:
            return None


ROLE_HIERARCHY: MappingProxyType[Role, int] = MappingProxyType(
    {
        Role.ADMIN: 4,
        Role.EMPLOYER: 3,
        Role.CANDIDATE: 2,
        Role.VIEWER: 1,
    }
)

ROLE_DESCRIPTIONS: MappingProxyType[Role, str] = MappingProxyType(
    {
        Role.ADMIN: "Full system access - can manage users, jobs, and applications",
        Role.EMPLOYER: "Can create and manage job postings, review applications",
        Role.CANDIDATE: "Can view jobs and submit applications",
        Role.VIEWER: "Read-only access to public job listings",
    }
)


def roles_by_level() -> list[Role]:
    """All roles, most privileged first."""
    return sorted(Role, key=lambda role: role.level, reverse=True)
