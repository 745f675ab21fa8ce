"""Page state endpoints: navigation, query changes and search."""

from fastapi import APIRouter, Request

from posts_manager.api.v1.dependencies import LocatedManagerDep, ManagerDep
from posts_manager.schemas import PageSnapshot, QueryPatch, SearchRequest, Tag

router = APIRouter(prefix="/page", tags=["page"])


@router.get("", response_model=PageSnapshot)
async def view_page(request: Request, manager: LocatedManagerDep) -> PageSnapshot:
    """Navigate to the request's query string and return the page.

    The query string uses the page URL contract: ``skip``, ``limit``,
    ``search``, ``sortBy``, ``sortOrder`` and ``tag``. The first request mounts
    the page at that location, so nothing else is fetched.
    """
    return await manager.navigate(request.url.query)


@router.patch("/query", response_model=PageSnapshot)
async def change_query(patch: QueryPatch, manager: ManagerDep) -> PageSnapshot:
    """Apply user changes to the query and return the reloaded page."""
    return await manager.change_query(**patch.changes())


@router.post("/next", response_model=PageSnapshot)
async def next_page(manager: ManagerDep) -> PageSnapshot:
    return await manager.go_next_page()


@router.post("/previous", response_model=PageSnapshot)
async def previous_page(manager: ManagerDep) -> PageSnapshot:
    return await manager.go_previous_page()


@router.post("/back", response_model=PageSnapshot)
async def history_back(manager: ManagerDep) -> PageSnapshot:
    return await manager.back()


@router.post("/forward", response_model=PageSnapshot)
async def history_forward(manager: ManagerDep) -> PageSnapshot:
    return await manager.forward()


@router.post("/search", response_model=PageSnapshot)
async def search(body: SearchRequest, manager: ManagerDep) -> PageSnapshot:
    """Run the explicit free-text search."""
    return await manager.submit_search(body.q)


@router.get("/tags", response_model=list[Tag])
async def list_tags(manager: ManagerDep) -> list[Tag]:
    return await manager.tags.ensure_loaded()
