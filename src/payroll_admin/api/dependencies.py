"""FastAPI dependencies for dependency injection."""

from collections.abc import AsyncGenerator, Callable
from typing import Annotated
from uuid import UUID

from fastapi import Depends, Header, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from payroll_admin.config import get_settings
from payroll_admin.database import get_session
from payroll_admin.services import (
    Action,
    ChangeEmitter,
    Identity,
    PayrollServices,
    SqlAlchemyPayrollStore,
    StaticIdentityProvider,
    can_perform,
)


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Get database session dependency; commits when the request succeeds."""
    async with get_session() as session:
        yield session


async def get_actor(
    x_actor_id: Annotated[str | None, Header()] = None,
    x_actor_role: Annotated[str | None, Header()] = None,
    x_actor_name: Annotated[str | None, Header()] = None,
) -> Identity:
    """Extract the authenticated actor forwarded by the auth proxy."""
    if not x_actor_id or not x_actor_role:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="X-Actor-Id and X-Actor-Role headers are required",
        )
    try:
        actor_id = UUID(x_actor_id)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid X-Actor-Id format",
        )
    return Identity(id=actor_id, display_name=x_actor_name or "", role=x_actor_role)


def get_emitter(request: Request) -> ChangeEmitter:
    """Application-wide change emitter."""
    return request.app.state.emitter


DbSession = Annotated[AsyncSession, Depends(get_db_session)]
Actor = Annotated[Identity, Depends(get_actor)]


async def get_services(
    db: DbSession,
    actor: Actor,
    emitter: Annotated[ChangeEmitter, Depends(get_emitter)],
) -> PayrollServices:
    """Payroll services bound to this request's session and actor."""
    return PayrollServices.build(
        SqlAlchemyPayrollStore(db),
        StaticIdentityProvider(actor),
        emitter,
        max_overtime_hours=get_settings().max_overtime_hours,
    )


def require(action: Action) -> Callable[[Identity], Identity]:
    """Dependency that rejects actors whose role may not perform ``action``."""

    def check(actor: Actor) -> Identity:
        if not can_perform(actor.role, action):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Role '{actor.role}' may not perform {action.value}",
            )
        return actor

    return check


Services = Annotated[PayrollServices, Depends(get_services)]
