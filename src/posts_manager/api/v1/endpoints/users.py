"""Author profile endpoint."""

from fastapi import APIRouter, HTTPException, status

from posts_manager.api.v1.dependencies import ManagerDep
from posts_manager.schemas import User

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/{user_id}", response_model=User)
async def get_user(user_id: int, manager: ManagerDep) -> User:
    """Return the full profile of an author; never served from cache."""
    user = await manager.open_user_modal(user_id)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="User could not be fetched",
        )
    return user
