import pytest

from core.errors import AuthorizationError, NotFoundError, ValidationError
from core.schemas import URLInput
from studios import service
from studios.schemas import StudioCreateInput, StudioUpdateInput


async def make_studio(conn, user, name, parent_id=None, urls=None):
    return await service.create_studio(
        conn,
        user,
        StudioCreateInput(name=name, parent_id=parent_id, urls=urls or []),
    )


@pytest.mark.asyncio
async def test_create_with_urls(conn, editor):
    studio = await make_studio(conn, editor, " Acme ", urls=[URLInput(url="https://acme.test", type="HOME")])

    assert studio.name == "Acme"
    assert studio.parent is None
    assert studio.child_studios == []
    assert [u.url for u in studio.urls] == ["https://acme.test"]


@pytest.mark.asyncio
async def test_parent_and_children_resolve(conn, editor):
    parent = await make_studio(conn, editor, "Network")
    child = await make_studio(conn, editor, "Channel", parent_id=parent.id)

    reloaded = await service.find_studio(conn, editor, studio_id=int(parent.id))

    assert child.parent.id == parent.id
    assert child.parent.name == "Network"
    assert [c.name for c in reloaded.child_studios] == ["Channel"]


@pytest.mark.asyncio
async def test_missing_parent_is_rejected(conn, editor):
    with pytest.raises(ValidationError):
        await make_studio(conn, editor, "Orphan", parent_id="77")

    assert conn.rows("studios") == []


@pytest.mark.asyncio
async def test_malformed_parent_id_is_rejected(conn, editor):
    with pytest.raises(ValidationError):
        await make_studio(conn, editor, "Orphan", parent_id="not-a-number")


@pytest.mark.asyncio
async def test_studio_cannot_be_its_own_parent(conn, editor):
    studio = await make_studio(conn, editor, "Loop")

    with pytest.raises(ValidationError):
        await service.update_studio(
            conn,
            editor,
            int(studio.id),
            StudioUpdateInput(name="Loop", parent_id=studio.id),
        )


@pytest.mark.asyncio
async def test_parent_cycle_is_rejected(conn, editor):
    top = await make_studio(conn, editor, "Top")
    middle = await make_studio(conn, editor, "Middle", parent_id=top.id)
    bottom = await make_studio(conn, editor, "Bottom", parent_id=middle.id)

    with pytest.raises(ValidationError):
        await service.update_studio(conn, editor, int(top.id), StudioUpdateInput(name="Top", parent_id=bottom.id))

    with pytest.raises(ValidationError):
        await service.update_studio(conn, editor, int(middle.id), StudioUpdateInput(name="Middle", parent_id=bottom.id))

    reloaded = await service.find_studio(conn, editor, studio_id=int(top.id))
    assert reloaded.parent is None
    assert conn.rollbacks == 2


@pytest.mark.asyncio
async def test_reparenting_to_unrelated_branch_is_allowed(conn, editor):
    first = await make_studio(conn, editor, "First")
    second = await make_studio(conn, editor, "Second")
    child = await make_studio(conn, editor, "Child", parent_id=first.id)

    moved = await service.update_studio(conn, editor, int(child.id), StudioUpdateInput(name="Child", parent_id=second.id))

    assert moved.parent.id == second.id


@pytest.mark.asyncio
async def test_update_replaces_urls(conn, editor):
    studio = await make_studio(conn, editor, "Acme", urls=[URLInput(url="https://old.test", type="HOME")])

    updated = await service.update_studio(
        conn,
        editor,
        int(studio.id),
        StudioUpdateInput(name="Acme Studios", urls=[URLInput(url="https://new.test", type="HOME")]),
    )

    assert updated.name == "Acme Studios"
    assert [u.url for u in updated.urls] == ["https://new.test"]


@pytest.mark.asyncio
async def test_update_missing_studio(conn, editor):
    with pytest.raises(NotFoundError):
        await service.update_studio(conn, editor, 5, StudioUpdateInput(name="Ghost"))


@pytest.mark.asyncio
async def test_destroy_parent_detaches_children(conn, editor):
    parent = await make_studio(conn, editor, "Network", urls=[URLInput(url="https://n.test", type="HOME")])
    child = await make_studio(conn, editor, "Channel", parent_id=parent.id)

    await service.destroy_studio(conn, editor, int(parent.id))

    reloaded = await service.find_studio(conn, editor, studio_id=int(child.id))
    assert reloaded.parent is None
    assert conn.rows("studio_urls") == []


@pytest.mark.asyncio
async def test_find_by_name_is_case_insensitive(conn, editor):
    await make_studio(conn, editor, "Acme")

    found = await service.find_studio(conn, editor, name="ACME")

    assert found is not None
    assert found.name == "Acme"
    assert await service.find_studio(conn, editor, name="nobody") is None


@pytest.mark.asyncio
async def test_find_without_id_or_name(conn, editor):
    assert await service.find_studio(conn, editor) is None


@pytest.mark.asyncio
async def test_reader_cannot_destroy(conn, editor, reader):
    studio = await make_studio(conn, editor, "Acme")

    with pytest.raises(AuthorizationError):
        await service.destroy_studio(conn, reader, int(studio.id))

    assert len(conn.rows("studios")) == 1
