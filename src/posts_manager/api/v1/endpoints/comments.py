"""Comment mutation endpoints."""

from fastapi import APIRouter, HTTPException, Query, Response, status

from posts_manager.api.v1.dependencies import ManagerDep
from posts_manager.schemas import Comment, CommentCreate, CommentUpdate

router = APIRouter(prefix="/comments", tags=["comments"])


def _bad_gateway(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=detail)


@router.post("", response_model=Comment, status_code=status.HTTP_201_CREATED)
async def create_comment(draft: CommentCreate, manager: ManagerDep) -> Comment:
    created = await manager.submit_new_comment(draft)
    if created is None:
        raise _bad_gateway("Comment could not be created")
    return created


@router.put("/{comment_id}", response_model=Comment)
async def update_comment(
    comment_id: int,
    update: CommentUpdate,
    manager: ManagerDep,
    post_id: int = Query(..., alias="postId", description="Post owning the comment"),
) -> Comment:
    updated = await manager.mutations.update_comment(comment_id, post_id, update)
    if updated is None:
        raise _bad_gateway("Comment could not be updated")
    return updated


@router.delete("/{comment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_comment(
    comment_id: int,
    manager: ManagerDep,
    post_id: int = Query(..., alias="postId", description="Post owning the comment"),
) -> Response:
    if not await manager.delete_comment(comment_id, post_id):
        raise _bad_gateway("Comment could not be deleted")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{comment_id}/like", response_model=Comment)
async def like_comment(
    comment_id: int,
    manager: ManagerDep,
    post_id: int = Query(..., alias="postId", description="Post owning the comment"),
) -> Comment:
    """Add one like based on the cached count of the comment."""
    liked = await manager.like_comment(comment_id, post_id)
    if liked is None:
        raise _bad_gateway("Comment could not be liked")
    return liked
