# caseguard/api/deps.py
from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID

from fastapi import Depends, Header, HTTPException


# -----------------------------------------------------------------------------
# MVP auth headers
# -----------------------------------------------------------------------------


def get_current_user_id(
    x_actor_user_id: str | None = Header(
        default=None,
        alias="X-Actor-User-Id",
        description="UUID пользователя, выполняющего действие. Временная auth для MVP.",
        examples=["33333333-3333-3333-3333-333333333333"],
    ),
) -> UUID:
    """MVP auth: X-Actor-User-Id header."""
    if not x_actor_user_id:
        raise HTTPException(status_code=401, detail="Missing X-Actor-User-Id header")
    try:
        return UUID(x_actor_user_id)
    except ValueError as e:
        raise HTTPException(status_code=400, detail="Invalid X-Actor-User-Id format (must be UUID)") from e


def get_actor_role(
    x_role: str = Header(
        "system",
        alias="X-Role",
        description="RBAC role of the caller (system, supervisor, agent, viewer).",
        examples=["system", "supervisor", "agent", "viewer"],
    )
) -> str:
    """MVP role header. Default system for convenience."""
    return x_role.strip()


@dataclass(frozen=True)
class ActorContext:
    actor_user_id: UUID
    role: str


def get_actor_context(
    actor_user_id: UUID = Depends(get_current_user_id),
    role: str = Depends(get_actor_role),
) -> ActorContext:
    return ActorContext(actor_user_id=actor_user_id, role=role)
