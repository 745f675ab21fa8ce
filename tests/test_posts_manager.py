"""Tests for the page controller: lifecycle, URL sync, dialogs and details."""

import pytest

from posts_manager.schemas import CommentUpdate, PostDraft, PostUpdate
from posts_manager.services.history import MemoryHistory
from posts_manager.services.post_collection import FetchStrategy
from posts_manager.services.posts_manager import PostsManager

from tests.conftest import LIST_TOTAL


@pytest.mark.asyncio
async def test_mount_reads_initial_url(manager, backend):
    snapshot = await manager.mount("?tag=history&limit=20")

    assert snapshot.query.tag == "history"
    assert snapshot.query.limit == 20
    assert snapshot.strategy == FetchStrategy.TAG.value
    assert [post.id for post in snapshot.posts] == [1, 3]
    assert [tag.slug for tag in snapshot.tags] == ["history", "crime", "french"]
    assert snapshot.loading is False
    assert len(backend.calls("GET", "/posts/tag/history")) == 1
    assert backend.calls("GET", "/posts") == []


@pytest.mark.asyncio
async def test_mount_twice_loads_once(manager, backend):
    await manager.mount()
    await manager.mount()

    assert len(backend.calls("GET", "/posts")) == 1
    assert len(backend.calls("GET", "/posts/tags")) == 1


@pytest.mark.asyncio
async def test_user_change_reloads_and_pushes_url(manager, history, backend):
    await manager.mount()

    snapshot = await manager.change_query(skip=10, sort_by="title")

    assert history.location == "skip=10&sortBy=title"
    assert history.can_go_back is True
    assert snapshot.query_string == "skip=10&sortBy=title"
    assert backend.calls("GET", "/posts")[-1].url.params["skip"] == "10"
    assert snapshot.has_previous_page is True
    assert snapshot.has_next_page is True


@pytest.mark.asyncio
async def test_back_navigation_reloads_without_pushing(manager, history, backend):
    await manager.mount()
    await manager.select_tag("crime")
    assert history.location == "tag=crime"

    snapshot = await manager.back()

    assert history.location == ""
    assert history.can_go_forward is True
    assert snapshot.query.tag == ""
    assert snapshot.strategy == FetchStrategy.LIST.value
    assert snapshot.total == LIST_TOTAL
    assert len(backend.calls("GET", "/posts")) == 2

    snapshot = await manager.forward()
    assert snapshot.query.tag == "crime"
    assert [post.id for post in snapshot.posts] == [1, 5]
    assert history.can_go_forward is False


@pytest.mark.asyncio
async def test_navigate_to_typed_url(manager, history):
    await manager.mount()

    snapshot = await manager.navigate("skip=20&limit=5&sortOrder=desc")

    assert snapshot.query.skip == 20
    assert snapshot.query.limit == 5
    assert snapshot.query.sort_order.value == "desc"
    assert history.location == "skip=20&limit=5&sortOrder=desc"


@pytest.mark.asyncio
async def test_pagination_buttons_follow_total(manager):
    await manager.mount()

    snapshot = await manager.go_previous_page()
    assert snapshot.query.skip == 0

    for _ in range(2):
        snapshot = await manager.go_next_page()
    assert snapshot.query.skip == 20
    assert snapshot.has_next_page is False

    snapshot = await manager.go_next_page()
    assert snapshot.query.skip == 20


@pytest.mark.asyncio
async def test_typing_search_neither_reloads_nor_navigates(manager, history, backend):
    await manager.mount()

    manager.set_search_text("candy")

    assert history.location == ""
    assert len(backend.calls("GET", "/posts")) == 1
    assert backend.calls("GET", "/posts/search") == []

    snapshot = await manager.submit_search()
    assert snapshot.search_active is True
    assert [post.id for post in snapshot.posts] == [4]
    assert snapshot.total == 1


@pytest.mark.asyncio
async def test_reactive_change_replaces_search_results(manager):
    await manager.mount()
    await manager.submit_search("candy")

    snapshot = await manager.change_query(limit=20)

    assert snapshot.search_active is False
    assert snapshot.total == LIST_TOTAL


@pytest.mark.asyncio
async def test_post_detail_loads_comments_once(manager, backend):
    await manager.mount()

    first = await manager.open_post_detail(1)
    manager.close_dialogs()
    second = await manager.open_post_detail(1)

    assert [comment.id for comment in first] == [1, 2]
    assert second == first
    assert len(backend.calls("GET", "/comments/post/1")) == 1
    snapshot = manager.snapshot()
    assert snapshot.ui.show_post_detail_dialog is True
    assert [comment.id for comment in snapshot.selected_post_comments] == [1, 2]


@pytest.mark.asyncio
async def test_post_detail_for_hidden_post(manager):
    await manager.mount()

    assert await manager.open_post_detail(999) is None
    assert manager.ui.show_post_detail_dialog is False


@pytest.mark.asyncio
async def test_user_modal_opens_only_on_success(manager, backend):
    await manager.mount()

    user = await manager.open_user_modal(1)
    assert user.full_name == "Emily Johnson"
    assert manager.ui.show_user_modal is True

    manager.close_dialogs()
    backend.fail_paths.add("/users/2")
    assert await manager.open_user_modal(2) is None
    assert manager.ui.show_user_modal is False
    assert manager.ui.selected_user.id == 1


@pytest.mark.asyncio
async def test_add_post_dialog_flow(manager):
    await manager.mount()
    manager.open_add_post()
    manager.ui.new_post = PostDraft(title="Draft", body="Text", user_id=2)

    created = await manager.submit_new_post()

    assert created.id == 251
    assert created.author.username == "michaelw"
    assert manager.ui.show_add_dialog is False
    assert manager.ui.new_post.title == ""
    assert manager.posts.total == LIST_TOTAL


@pytest.mark.asyncio
async def test_failed_add_keeps_dialog_open(manager, backend):
    await manager.mount()
    manager.open_add_post()
    backend.fail_paths.add("/posts/add")

    assert await manager.submit_new_post(PostDraft(title="x")) is None
    assert manager.ui.show_add_dialog is True


@pytest.mark.asyncio
async def test_edit_post_dialog_flow(manager):
    await manager.mount()

    draft = manager.start_edit_post(3)
    assert draft == PostUpdate(title=manager.posts.get(3).title, body=manager.posts.get(3).body)

    updated = await manager.submit_post_edit(PostUpdate(title="Edited"))

    assert updated.title == "Edited"
    assert manager.ui.show_edit_dialog is False
    assert [post.id for post in manager.posts.posts] == [1, 2, 3, 4, 5]
    assert manager.start_edit_post(999) is None


@pytest.mark.asyncio
async def test_comment_dialog_flow(manager):
    await manager.mount()
    await manager.open_post_detail(1)

    manager.open_add_comment(1)
    manager.ui.new_comment = manager.ui.new_comment.model_copy(update={"body": "Great"})
    created = await manager.submit_new_comment()
    assert created.post_id == 1
    assert manager.ui.show_add_comment_dialog is False
    assert manager.ui.new_comment.post_id is None

    assert manager.start_edit_comment(1, 1).body == "This is some awesome thinking!"
    edited = await manager.submit_comment_edit(CommentUpdate(body="Edited"))
    assert edited.body == "Edited"
    assert manager.ui.selected_comment is None

    liked = await manager.like_comment(2, 1)
    assert liked.likes == 6

    assert await manager.delete_comment(2, 1) is True
    comments = manager.snapshot().selected_post_comments
    assert [(c.id, c.body, c.likes) for c in comments] == [(1, "Edited", 3), (341, "Great", 0)]


@pytest.mark.asyncio
async def test_unmount_resets_page(manager, history, backend):
    await manager.mount()
    await manager.open_post_detail(1)

    await manager.unmount()

    assert manager.mounted is False
    assert manager.posts.posts == []
    assert manager.comments.is_loaded(1) is False
    assert manager.tags.loaded is False

    history.push("tag=crime")
    history.back()
    assert len(backend.calls("GET", "/posts")) == 1


@pytest.mark.asyncio
async def test_manager_reads_location_of_given_history(api_client):
    history = MemoryHistory("?skip=10")

    manager = PostsManager(client=api_client, history=history)

    assert manager.state.skip == 10
    await manager.unmount()
