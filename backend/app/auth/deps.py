"""Actor identity dependencies for FastAPI.

No authentication happens here: the caller's identity arrives as opaque
headers and is only recorded in the history ledger.
"""
from typing import Annotated

from fastapi import Depends, Header, HTTPException, status

from app.auth.rbac import require_write


async def get_actor_role(
    x_actor_role: Annotated[str | None, Header()] = None,
) -> str | None:
    return x_actor_role


async def get_actor_id(
    x_actor_id: Annotated[str | None, Header()] = None,
) -> str:
    if not x_actor_id or not x_actor_id.strip():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="X-Actor-Id header is required",
        )
    return x_actor_id.strip()


async def get_writer(
    actor_id: Annotated[str, Depends(get_actor_id)],
    role: Annotated[str | None, Depends(get_actor_role)],
) -> str:
    """Actor id of a caller allowed to mutate data."""
    require_write(role)
    return actor_id
