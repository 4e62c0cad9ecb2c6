"""Acting identity used for created_by / approved_by attribution."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable
from uuid import UUID


@dataclass(frozen=True)
class Identity:
    """The authenticated actor behind an operation."""

    id: UUID
    display_name: str
    role: str


@runtime_checkable
class IdentityProvider(Protocol):
    """Accessor for the currently authenticated identity."""

    async def get_current_identity(self) -> Identity:
        ...


class StaticIdentityProvider:
    """Identity provider for a single, already-authenticated actor.

    The HTTP layer builds one per request from the auth proxy's headers.
    """

    def __init__(self, identity: Identity) -> None:
        self.identity = identity

    async def get_current_identity(self) -> Identity:
        return self.identity
