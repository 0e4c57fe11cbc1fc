"""Role-based write permissions."""
from fastapi import HTTPException, status

READ_ONLY_ROLES = ["product manager"]


def can_write(role: str | None) -> bool:
    """Unknown or missing roles may write; read-only roles may not."""
    if not role:
        return True
    return role.strip().lower() not in READ_ONLY_ROLES


def require_write(role: str | None) -> None:
    if not can_write(role):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"Role {role!r} has read-only access",
        )
