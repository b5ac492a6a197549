"""Actor and ownership projection factories for tests."""

from uuid import uuid4

from polyfactory.factories.pydantic_factory import ModelFactory

from jobguard.core.auth.schemas import Actor
from jobguard.core.ownership.schemas import ApplicationOwnership, JobOwnership
from jobguard.core.permissions.roles import Role


class ActorFactory(ModelFactory):
    """Factory for authenticated actors."""

    __model__ = Actor

    @classmethod
    def id(cls) -> str:
        return uuid4().hex

    @classmethod
    def role(cls) -> Role:
        """Default to the least privileged role."""
        return Role.VIEWER

    @classmethod
    def email(cls) -> str:
        """Generate a unique email."""
        return f"actor-{uuid4().hex[:8]}@example.com"

    @classmethod
    def name(cls) -> str:
        return f"Test Actor {uuid4().hex[:4]}"


class JobOwnershipFactory(ModelFactory):
    """Factory for job ownership projections."""

    __model__ = JobOwnership

    @classmethod
    def id(cls) -> str:
        return uuid4().hex

    @classmethod
    def owner_id(cls) -> str:
        return uuid4().hex

    @classmethod
    def status(cls) -> str:
        return "open"


class ApplicationOwnershipFactory(ModelFactory):
    """Factory for application ownership projections."""

    __model__ = ApplicationOwnership

    @classmethod
    def id(cls) -> str:
        return uuid4().hex

    @classmethod
    def applicant_id(cls) -> str:
        return uuid4().hex

    @classmethod
    def job_owner_id(cls) -> str:
        return uuid4().hex

    @classmethod
    def status(cls) -> str:
        return "pending"
