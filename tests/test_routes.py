"""
API tests for the role permission routes.
"""
import pytest
from fastapi import status

from app.core.database.base import generate_ulid
from app.core.database.engine import get_db
from app.features.role_permissions.constants import StaffRole, default_features
from app.main import app


@pytest.mark.asyncio
async def test_health(client):
    response = await client.get("/health")
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"status": "healthy"}


@pytest.mark.asyncio
async def test_owner_lists_all_roles(client, company_id, auth_headers):
    response = await client.get("/role-permissions", headers=auth_headers("owner", company_id))

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert [item["role"] for item in data] == [role.value for role in StaffRole]
    assert all(item["company_id"] == company_id for item in data)
    assert data[0]["features"] == default_features(StaffRole.OWNER)


@pytest.mark.asyncio
async def test_owner_role_claim_is_case_insensitive(client, company_id, auth_headers):
    response = await client.get("/role-permissions", headers=auth_headers("OWNER", company_id))
    assert response.status_code == status.HTTP_200_OK


@pytest.mark.asyncio
@pytest.mark.parametrize("role", ["manager", "chef", "waiter", "cashier"])
async def test_staff_cannot_list_all_roles(client, company_id, auth_headers, role):
    response = await client.get("/role-permissions", headers=auth_headers(role, company_id))
    assert response.status_code == status.HTTP_403_FORBIDDEN


@pytest.mark.asyncio
async def test_my_permissions(client, company_id, auth_headers):
    response = await client.get("/role-permissions/my-permissions", headers=auth_headers("waiter", company_id))

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["role"] == "waiter"
    assert data["features"] == default_features(StaffRole.WAITER)

    listing = await client.get("/role-permissions", headers=auth_headers("owner", company_id))
    assert len(listing.json()) == 5


@pytest.mark.asyncio
async def test_my_permissions_for_super_admin_is_null(client, company_id, auth_headers):
    response = await client.get("/role-permissions/my-permissions", headers=auth_headers("super_admin", company_id))
    assert response.status_code == status.HTTP_200_OK
    assert response.json() is None


@pytest.mark.asyncio
async def test_my_permissions_requires_company(client, auth_headers):
    response = await client.get("/role-permissions/my-permissions", headers=auth_headers("waiter", None))
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["detail"] == "Company ID is required"


@pytest.mark.asyncio
async def test_malformed_company_claim_is_bad_request(client, auth_headers):
    response = await client.get("/role-permissions/my-permissions", headers=auth_headers("waiter", "507f1f77bcf86cd799439011"))
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["detail"] == "Invalid company id"


@pytest.mark.asyncio
async def test_owner_scenario_over_http(client, company_id, auth_headers):
    owner_id = generate_ulid()
    headers = auth_headers("owner", company_id, user_id=owner_id)

    response = await client.get("/role-permissions/my-permissions", headers=headers)
    assert len(response.json()["features"]) == 21

    response = await client.patch("/role-permissions", headers=headers, json={"role": "owner", "features": ["dashboard"]})
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["features"] == ["dashboard"]
    assert response.json()["updated_by_id"] == owner_id

    response = await client.get("/role-permissions/my-permissions", headers=headers)
    assert response.json()["features"] == ["dashboard"]


@pytest.mark.asyncio
async def test_customized_role_survives_another_role_first_read(client, company_id, auth_headers):
    owner_headers = auth_headers("owner", company_id)
    response = await client.patch("/role-permissions", headers=owner_headers, json={"role": "chef", "features": ["a", "b"]})
    assert response.status_code == status.HTTP_200_OK

    response = await client.get("/role-permissions/my-permissions", headers=auth_headers("waiter", company_id))
    assert response.json()["features"] == default_features(StaffRole.WAITER)

    listing = (await client.get("/role-permissions", headers=owner_headers)).json()
    by_role = {item["role"]: item["features"] for item in listing}
    assert len(listing) == 5
    assert by_role["chef"] == ["a", "b"]


@pytest.mark.asyncio
async def test_super_admin_my_permissions_keeps_customizations(client, company_id, auth_headers):
    owner_headers = auth_headers("owner", company_id)
    await client.patch("/role-permissions", headers=owner_headers, json={"role": "owner", "features": ["dashboard"]})

    response = await client.get("/role-permissions/my-permissions", headers=auth_headers("super_admin", company_id))
    assert response.status_code == status.HTTP_200_OK
    assert response.json() is None

    listing = (await client.get("/role-permissions", headers=owner_headers)).json()
    assert [(item["role"], item["features"]) for item in listing] == [("owner", ["dashboard"])]


@pytest.mark.asyncio
async def test_company_known_only_from_token_is_served(client, auth_headers):
    external_company = generate_ulid()

    response = await client.get("/role-permissions/my-permissions", headers=auth_headers("chef", external_company))

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["company_id"] == external_company
    assert response.json()["features"] == default_features(StaffRole.CHEF)


@pytest.mark.asyncio
async def test_patch_accepts_features_outside_catalog(client, company_id, auth_headers):
    response = await client.patch(
        "/role-permissions",
        headers=auth_headers("owner", company_id),
        json={"role": "chef", "features": ["wine-cellar"]},
    )
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["features"] == ["wine-cellar"]


@pytest.mark.asyncio
async def test_patch_rejects_unknown_role(client, company_id, auth_headers):
    response = await client.patch(
        "/role-permissions",
        headers=auth_headers("owner", company_id),
        json={"role": "sommelier", "features": []},
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert "role" in response.json()


@pytest.mark.asyncio
async def test_manager_cannot_patch(client, company_id, auth_headers):
    response = await client.patch(
        "/role-permissions",
        headers=auth_headers("manager", company_id),
        json={"role": "waiter", "features": []},
    )
    assert response.status_code == status.HTTP_403_FORBIDDEN


@pytest.mark.asyncio
async def test_super_admin_manages_any_company(client, company_id, auth_headers):
    headers = auth_headers("super_admin", None)

    response = await client.get(f"/role-permissions/system/company/{company_id}", headers=headers)
    assert response.status_code == status.HTTP_200_OK
    assert len(response.json()) == 5

    response = await client.patch(
        f"/role-permissions/system/company/{company_id}",
        headers=headers,
        json={"role": "cashier", "features": ["expenses"]},
    )
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["features"] == ["expenses"]


@pytest.mark.asyncio
async def test_owner_cannot_use_system_routes(client, company_id, auth_headers):
    response = await client.get(f"/role-permissions/system/company/{company_id}", headers=auth_headers("owner", company_id))
    assert response.status_code == status.HTTP_403_FORBIDDEN


@pytest.mark.asyncio
async def test_system_route_rejects_malformed_company(client, auth_headers):
    response = await client.get("/role-permissions/system/company/not-a-company", headers=auth_headers("super_admin", None))
    assert response.status_code == status.HTTP_400_BAD_REQUEST


@pytest.mark.asyncio
async def test_feature_catalog(client, company_id, auth_headers):
    response = await client.get("/role-permissions/features", headers=auth_headers("waiter", company_id))

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert len(data["features"]) == 31
    assert "inventory" in data["categories"]["inventory"]
    assert data["defaults"]["waiter"] == default_features(StaffRole.WAITER)


@pytest.mark.asyncio
async def test_missing_token_is_rejected(client):
    response = await client.get("/role-permissions/my-permissions")
    assert response.status_code in (status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN)


@pytest.mark.asyncio
async def test_expired_token_is_rejected(client, company_id, auth_headers):
    response = await client.get(
        "/role-permissions/my-permissions",
        headers=auth_headers("waiter", company_id, expires_in=-60),
    )
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json()["detail"] == "Token has expired"


@pytest.mark.asyncio
async def test_token_with_wrong_signature_is_rejected(client, company_id):
    import jwt

    token = jwt.encode({"sub": generate_ulid(), "role": "owner", "companyId": company_id, "exp": 4102444800}, "other-secret", algorithm="HS256")
    response = await client.get("/role-permissions", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


@pytest.mark.asyncio
async def test_store_failure_is_service_unavailable(client, tmp_path, company_id, auth_headers):
    from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
    from sqlalchemy.pool import NullPool

    broken = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'missing' / 'db.sqlite'}", poolclass=NullPool)

    async def broken_get_db():
        async with AsyncSession(broken) as session:
            yield session

    app.dependency_overrides[get_db] = broken_get_db
    response = await client.get("/role-permissions", headers=auth_headers("owner", company_id))
    await broken.dispose()

    assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
    assert response.json() == {"detail": "Store unavailable"}
