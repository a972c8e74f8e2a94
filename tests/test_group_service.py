"""Unit tests for GroupService: CRUD, group grants and the delete guard."""

import pytest

from app.core.exceptions import (
    GroupInUseException, NotFoundException, PermissionNotFoundException
)
from app.modules.groups.schemas import GroupCreate, GroupUpdate, UpdateGroupPermissions
from app.modules.groups.service import GroupService

GROUP_ID = "ae032b1b-cc3c-4e44-9197-276ca877a7f8"
PERMISSION_ID = "2b33268a-7ff5-4cac-a87a-6bfc4430d34c"


@pytest.fixture
def service(store, cache, keys):
    store.seed("groups", id=GROUP_ID, name="Test1")
    store.seed("permissions", id=PERMISSION_ID, name="Customers")
    return GroupService(store, cache, keys)


@pytest.mark.asyncio
async def test_get_all_groups_returns_active_only(service, store):
    store.seed("groups", name="Retired", active=False)

    groups = await service.get_all_groups()

    assert [g.id for g in groups] == [GROUP_ID]


@pytest.mark.asyncio
async def test_get_group_by_id(service):
    group = await service.get_group_by_id(GROUP_ID)

    assert group.name == "Test1"


@pytest.mark.asyncio
async def test_get_unknown_group_raises_not_found(service):
    with pytest.raises(NotFoundException):
        await service.get_group_by_id("missing")


@pytest.mark.asyncio
async def test_create_group(service, store):
    group = await service.create_group(GroupCreate(name="Operators"))

    assert group.active is True
    assert (await store.find_by_id("groups", group.id))["name"] == "Operators"


@pytest.mark.asyncio
async def test_update_group(service):
    group = await service.update_group(GROUP_ID, GroupUpdate(name="Renamed"))

    assert group.name == "Renamed"
    assert (await service.get_group_by_id(GROUP_ID)).name == "Renamed"


@pytest.mark.asyncio
async def test_update_unknown_group_raises_not_found(service, store):
    with pytest.raises(NotFoundException):
        await service.update_group("missing", GroupUpdate(name="x"))
    assert "update:groups" not in store.writes


@pytest.mark.asyncio
async def test_add_permissions_to_group_returns_permissions(service, store):
    resp = await service.update_group_permissions(
        GROUP_ID, UpdateGroupPermissions(permissions=[PERMISSION_ID])
    )

    assert [p.id for p in resp] == [PERMISSION_ID]
    assert [p.name for p in resp] == ["Customers"]
    assert await store.count("group_permissions", group_id=GROUP_ID) == 1


@pytest.mark.asyncio
async def test_reapplying_group_permissions_does_not_duplicate_rows(service, store):
    request = UpdateGroupPermissions(permissions=[PERMISSION_ID, PERMISSION_ID])

    await service.update_group_permissions(GROUP_ID, request)
    await service.update_group_permissions(GROUP_ID, request)

    assert await store.count("group_permissions", group_id=GROUP_ID) == 1


@pytest.mark.asyncio
async def test_invalid_permission_lists_only_missing_ids(service, store):
    with pytest.raises(PermissionNotFoundException) as exc_info:
        await service.update_group_permissions(
            GROUP_ID, UpdateGroupPermissions(permissions=[PERMISSION_ID, "unknown-id"])
        )

    assert exc_info.value.ids == ["unknown-id"]
    assert exc_info.value.message == "Permission not found: unknown-id"
    # All-or-nothing: the valid id was not granted either
    assert await store.count("group_permissions", group_id=GROUP_ID) == 0


@pytest.mark.asyncio
async def test_inactive_permission_cannot_be_granted(service, store):
    retired = store.seed("permissions", name="Retired", active=False)

    with pytest.raises(PermissionNotFoundException) as exc_info:
        await service.update_group_permissions(
            GROUP_ID, UpdateGroupPermissions(permissions=[retired["id"]])
        )

    assert exc_info.value.ids == [retired["id"]]


@pytest.mark.asyncio
async def test_permissions_for_unknown_group_raise_not_found(service, store):
    with pytest.raises(NotFoundException):
        await service.update_group_permissions(
            "missing", UpdateGroupPermissions(permissions=[PERMISSION_ID])
        )
    assert store.tables.get("group_permissions", []) == []


@pytest.mark.asyncio
async def test_remove_and_list_group_permissions(service, store):
    await service.update_group_permissions(GROUP_ID, UpdateGroupPermissions(permissions=[PERMISSION_ID]))
    assert [p.id for p in await service.get_group_permissions(GROUP_ID)] == [PERMISSION_ID]

    removed = await service.remove_group_permissions(GROUP_ID, [PERMISSION_ID])

    assert removed == 1
    assert await service.get_group_permissions(GROUP_ID) == []


@pytest.mark.asyncio
async def test_delete_group(service):
    group = await service.delete_group(GROUP_ID)

    assert group.id == GROUP_ID
    assert group.active is False
    with pytest.raises(NotFoundException):
        await service.get_group_by_id(GROUP_ID)


@pytest.mark.asyncio
async def test_delete_group_is_idempotent(service):
    first = await service.delete_group(GROUP_ID)
    second = await service.delete_group(GROUP_ID)

    assert first == second


@pytest.mark.asyncio
async def test_delete_group_with_member_is_refused_until_membership_removed(service, store):
    store.seed("users", id="user-1", email="member@test.com")
    membership = store.seed("user_groups", user_id="user-1", group_id=GROUP_ID)

    with pytest.raises(GroupInUseException) as exc_info:
        await service.delete_group(GROUP_ID)
    assert exc_info.value.member_count == 1
    assert (await service.get_group_by_id(GROUP_ID)).active is True

    await store.delete_where("user_groups", "id", [membership["id"]])
    group = await service.delete_group(GROUP_ID)

    assert group.active is False


@pytest.mark.asyncio
async def test_delete_unknown_group_raises_not_found(service):
    with pytest.raises(NotFoundException):
        await service.delete_group("missing")
