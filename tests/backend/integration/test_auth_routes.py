import pytest

from coe_portal.core.security import create_access_token, decode_access_token


pytestmark = pytest.mark.asyncio


async def test_register_creates_pending_account(client):
    resp = await client.post("/api/v1/auth/register", json={"username": "founder", "password": "Secret#123"})
    assert resp.status_code == 201
    data = resp.json()["data"]
    assert data["username"] == "founder"
    assert data["role"] == "user"
    assert data["isApproved"] is False


async def test_register_rejects_duplicate_username(client):
    payload = {"username": "founder", "password": "Secret#123"}
    await client.post("/api/v1/auth/register", json=payload)
    resp = await client.post("/api/v1/auth/register", json=payload)
    assert resp.status_code == 409
    assert resp.json()["detail"] == "USERNAME_EXISTS"


async def test_register_validates_input(client):
    resp = await client.post("/api/v1/auth/register", json={"username": "ab", "password": "Secret#123"})
    assert resp.status_code == 422
    resp = await client.post("/api/v1/auth/register", json={"username": "founder", "password": "123"})
    assert resp.status_code == 422


async def test_pending_user_cannot_login_until_approved(client, create_user):
    user, password = await create_user(is_approved=False)

    resp = await client.post("/api/v1/auth/login", json={"username": user.username, "password": password})
    assert resp.status_code == 403
    assert resp.json()["detail"]["code"] == "ACCOUNT_PENDING_APPROVAL"

    user.is_approved = True
    await user.save()
    resp = await client.post("/api/v1/auth/login", json={"username": user.username, "password": password})
    assert resp.status_code == 200


async def test_login_sets_cookie_and_me_works(client, create_user):
    user, password = await create_user()
    resp = await client.post("/api/v1/auth/login", json={"username": user.username, "password": password})
    assert resp.status_code == 200
    body = resp.json()["data"]
    assert body["user"]["username"] == user.username
    assert body["accessToken"]
    assert "accessToken" in resp.cookies

    me = await client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {body['accessToken']}"})
    assert me.status_code == 200
    assert me.json()["data"]["id"] == user.id
    assert me.json()["data"]["isApproved"] is True


async def test_admin_login_ignores_approval_flag(client, create_admin):
    admin, password = await create_admin()
    admin.is_approved = False
    await admin.save()

    resp = await client.post("/api/v1/auth/login", json={"username": admin.username, "password": password})
    assert resp.status_code == 200
    assert resp.json()["data"]["user"]["isApproved"] is True


async def test_login_wrong_password(client, create_user):
    user, _ = await create_user()
    resp = await client.post("/api/v1/auth/login", json={"username": user.username, "password": "nope"})
    assert resp.status_code == 401
    assert resp.json()["detail"]["code"] == "AUTH_INVALID_CREDENTIALS"


async def test_me_requires_token(client):
    resp = await client.get("/api/v1/auth/me")
    assert resp.status_code == 401
    assert resp.json()["detail"] == "AUTH_REQUIRED"

    resp = await client.get("/api/v1/auth/me", headers={"Authorization": "Bearer garbage"})
    assert resp.status_code == 401
    assert resp.json()["detail"] == "AUTH_INVALID_TOKEN"


async def test_logout_clears_cookie(client):
    resp = await client.post("/api/v1/auth/logout")
    assert resp.status_code == 200
    assert resp.json()["success"] is True


async def test_healthz(client):
    resp = await client.get("/healthz")
    assert resp.status_code == 200
    assert resp.json() == {"ok": True}


async def test_login_token_subject_is_user_id_string(client, create_user):
    user, password = await create_user()
    resp = await client.post("/api/v1/auth/login", json={"username": user.username, "password": password})
    payload = decode_access_token(resp.json()["data"]["accessToken"])
    assert payload["sub"] == str(user.id)


async def test_non_numeric_subject_is_invalid_token(client):
    token = create_access_token("not-a-number", "user")
    resp = await client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 401
    assert resp.json()["detail"] == "AUTH_INVALID_TOKEN"
