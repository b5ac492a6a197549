"""Root API router: health and capability endpoints."""

from fastapi import APIRouter
from pydantic import BaseModel

from jobguard.core.authz.dependencies import AuthenticatedActor
from jobguard.core.permissions import Role, list_permissions, roles_by_level


class HealthResponse(BaseModel):
    """Health check response schema."""

    status: str


class RoleInfo(BaseModel):
    role: Role
    level: int
    description: str


class CapabilitiesResponse(BaseModel):
    """The caller's advertised permissions.

    For client-side menu gating only; every protected action is
    re-checked on the server when it is called.
    """

    actor_id: str
    role: Role
    level: int
    description: str
    permissions: list[str]


api_router = APIRouter()

health_router = APIRouter(tags=["health"])
v1_router = APIRouter(prefix="/api/v1", tags=["authorization"])


@health_router.get(
    "/health/live",
    response_model=HealthResponse,
    summary="Liveness check",
)
async def liveness() -> HealthResponse:
    """Liveness check endpoint."""
    return HealthResponse(status="alive")


@v1_router.get(
    "/permissions/me",
    response_model=CapabilitiesResponse,
    summary="Permissions of the current actor",
)
async def my_permissions(actor: AuthenticatedActor) -> CapabilitiesResponse:
    return CapabilitiesResponse(
        actor_id=actor.id,
        role=actor.role,
        level=actor.role.level,
        description=actor.role.description,
        permissions=list(list_permissions(actor.role)),
    )


@v1_router.get(
    "/roles",
    response_model=list[RoleInfo],
    summary="Available roles",
)
async def roles() -> list[RoleInfo]:
    return [
        RoleInfo(role=role, level=role.level, description=role.description)
        for role in roles_by_level()
    ]


api_router.include_router(health_router)
api_router.include_router(v1_router)
