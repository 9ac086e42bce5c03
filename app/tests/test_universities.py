import pytest
from fastapi import status
from httpx import AsyncClient

from app.tests.conftest import create_listing


@pytest.mark.asyncio
async def test_create_university_with_logo(async_client: AsyncClient, login_as, seller, media_service):
    login_as(seller.email)

    response = await async_client.post(
        "/api/universities",
        data={"name": "Institut Teknologi Bandung", "slug": "itb"},
        files={"logo": ("itb.png", b"\x89PNG...", "image/png")},
    )
    assert response.status_code == status.HTTP_201_CREATED

    data = response.json()["university"]
    assert data["name"] == "Institut Teknologi Bandung"
    assert data["slug"] == "itb"
    assert data["logo"] == "https://res.cloudinary.com/test/universities/itb.png"
    assert media_service.uploads == [("universities", "itb.png")]


@pytest.mark.asyncio
async def test_create_university_requires_login(async_client: AsyncClient):
    response = await async_client.post(
        "/api/universities", data={"name": "Universitas Gadjah Mada", "slug": "ugm"}
    )
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


@pytest.mark.asyncio
async def test_duplicate_slug_is_rejected(async_client: AsyncClient, login_as, seller, university):
    login_as(seller.email)

    response = await async_client.post(
        "/api/universities", data={"name": "UI Depok", "slug": university.slug}
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["detail"] == "Slug already exists"


@pytest.mark.asyncio
async def test_invalid_slug_returns_field_errors(async_client: AsyncClient, login_as, seller):
    login_as(seller.email)

    response = await async_client.post(
        "/api/universities", data={"name": "Bad Slug University", "slug": "Not A Slug"}
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST

    data = response.json()
    assert data["detail"] == "Validation failed"
    assert "slug" in data["errors"]


@pytest.mark.asyncio
async def test_failed_logo_upload(async_client: AsyncClient, login_as, seller, media_service):
    login_as(seller.email)
    media_service.fail_on.add("broken.png")

    response = await async_client.post(
        "/api/universities",
        data={"name": "Universitas Airlangga", "slug": "unair"},
        files={"logo": ("broken.png", b"data", "image/png")},
    )
    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert response.json()["detail"] == "Failed to upload logo"


@pytest.mark.asyncio
async def test_list_universities_sorted_by_name(async_client: AsyncClient, login_as, seller):
    login_as(seller.email)
    for name, slug in [("Universitas Brawijaya", "ub"), ("Institut Pertanian Bogor", "ipb")]:
        response = await async_client.post(
            "/api/universities", data={"name": name, "slug": slug}
        )
        assert response.status_code == status.HTTP_201_CREATED

    response = await async_client.get("/api/universities")
    assert response.status_code == status.HTTP_200_OK

    names = [u["name"] for u in response.json()["universities"]]
    assert names == ["Institut Pertanian Bogor", "Universitas Brawijaya"]


@pytest.mark.asyncio
async def test_get_unknown_university(async_client: AsyncClient):
    response = await async_client.get("/api/universities/does-not-exist")
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json()["detail"] == "University not found"


@pytest.mark.asyncio
async def test_update_university(async_client: AsyncClient, login_as, seller, university):
    login_as(seller.email)

    response = await async_client.put(
        f"/api/universities/{university.id}", data={"name": "Universitas Indonesia Depok"}
    )
    assert response.status_code == status.HTTP_200_OK

    data = response.json()["university"]
    assert data["name"] == "Universitas Indonesia Depok"
    # untouched fields keep their value
    assert data["slug"] == university.slug


@pytest.mark.asyncio
async def test_delete_university_with_listings(
    async_client: AsyncClient, session_factory, login_as, seller, university
):
    await create_listing(session_factory, seller, university)
    login_as(seller.email)

    response = await async_client.delete(f"/api/universities/{university.id}")
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["detail"] == "University still has listings"


@pytest.mark.asyncio
async def test_delete_university(async_client: AsyncClient, login_as, seller, university):
    login_as(seller.email)

    response = await async_client.delete(f"/api/universities/{university.id}")
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["message"] == "University deleted successfully"

    response = await async_client.get(f"/api/universities/{university.id}")
    assert response.status_code == status.HTTP_404_NOT_FOUND
