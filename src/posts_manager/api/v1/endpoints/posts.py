"""Post mutation and detail endpoints."""

from fastapi import APIRouter, HTTPException, Response, status

from posts_manager.api.v1.dependencies import ManagerDep
from posts_manager.schemas import PageSnapshot, PostDraft, PostUpdate, PostWithAuthor

router = APIRouter(prefix="/posts", tags=["posts"])


@router.post("", response_model=PostWithAuthor, status_code=status.HTTP_201_CREATED)
async def create_post(draft: PostDraft, manager: ManagerDep) -> PostWithAuthor:
    """Create a post and show it at the top of the page.

    Raises:
        HTTPException: If the backend rejected the post
    """
    created = await manager.submit_new_post(draft)
    if created is None:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Post could not be created",
        )
    return created


@router.put("/{post_id}", response_model=PostWithAuthor)
async def update_post(post_id: int, update: PostUpdate, manager: ManagerDep) -> PostWithAuthor:
    updated = await manager.mutations.update_post(post_id, update)
    if updated is None:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Post could not be updated",
        )
    return updated


@router.delete("/{post_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_post(post_id: int, manager: ManagerDep) -> Response:
    if not await manager.delete_post(post_id):
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Post could not be deleted",
        )
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{post_id}/detail", response_model=PageSnapshot)
async def open_post_detail(post_id: int, manager: ManagerDep) -> PageSnapshot:
    """Open the detail view of a displayed post, loading its comments once.

    Raises:
        HTTPException: If the post is not on the current page
    """
    if manager.posts.get(post_id) is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Post is not displayed",
        )
    await manager.open_post_detail(post_id)
    return manager.snapshot()
