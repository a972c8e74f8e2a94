import pytest

from app.core.exceptions import NotFoundException, PermissionExistsException
from app.modules.permissions.schemas import PermissionCreate, PermissionUpdate
from app.modules.permissions.service import PermissionService

PERMISSION_ID = "2b33268a-7ff5-4cac-a87a-6bfc4430d34c"


@pytest.fixture
def service(store, cache, keys):
    store.seed("permissions", id=PERMISSION_ID, name="CreateUser", description="Create users")
    return PermissionService(store, cache, keys)


@pytest.mark.asyncio
async def test_create_permission(service, store):
    permission = await service.create_permission(PermissionCreate(name="ViewUser"))

    assert permission.name == "ViewUser"
    assert (await store.find_by_id("permissions", permission.id))["active"] is True


@pytest.mark.asyncio
async def test_create_permission_with_taken_name_raises(service, store):
    with pytest.raises(PermissionExistsException) as exc_info:
        await service.create_permission(PermissionCreate(name="CreateUser"))

    assert exc_info.value.status_code == 409
    assert "insert:permissions" not in store.writes


@pytest.mark.asyncio
async def test_name_of_deleted_permission_can_be_reused(service):
    await service.delete_permission(PERMISSION_ID)

    permission = await service.create_permission(PermissionCreate(name="CreateUser"))

    assert permission.id != PERMISSION_ID


@pytest.mark.asyncio
async def test_update_permission_description_keeps_name(service):
    permission = await service.update_permission(
        PERMISSION_ID, PermissionUpdate(description="Create accounts")
    )

    assert permission.name == "CreateUser"
    assert permission.description == "Create accounts"


@pytest.mark.asyncio
async def test_rename_to_taken_name_raises(service, store):
    store.seed("permissions", name="ViewUser")

    with pytest.raises(PermissionExistsException):
        await service.update_permission(PERMISSION_ID, PermissionUpdate(name="ViewUser"))


@pytest.mark.asyncio
async def test_update_unknown_permission_raises_not_found(service):
    with pytest.raises(NotFoundException):
        await service.update_permission("missing", PermissionUpdate(name="Anything"))


@pytest.mark.asyncio
async def test_delete_permission(service):
    permission = await service.delete_permission(PERMISSION_ID)

    assert permission.active is False
    assert await service.get_all_permissions() == []


@pytest.mark.asyncio
async def test_find_by_names_returns_active_matches_only(service, store):
    store.seed("permissions", name="ViewUser", active=False)

    found = await service.find_by_names(["CreateUser", "ViewUser", "Unknown"])

    assert [p.id for p in found] == [PERMISSION_ID]
