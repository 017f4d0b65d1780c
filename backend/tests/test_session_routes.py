"""
Car Doctor Backend — Session Route Tests
==========================================

What we test:
    ✅ POST /session sets an http-only `token` cookie that verifies to the email
    ✅ GET /session/logout expires the cookie (Max-Age=0)
    ✅ a token captured before logout still authenticates until it expires
    ✅ missing signing secret → 500, bad body → 422
"""

import pytest
from httpx import ASGITransport, AsyncClient

from car_doctor.services.token_service import TokenService


def _token_from_set_cookie(header: str) -> str:
    first = header.split(";", 1)[0]
    name, _, value = first.partition("=")
    assert name == "token"
    return value.strip('"')


class TestLogin:

    @pytest.mark.asyncio
    async def test_login_sets_http_only_cookie(self, test_client, tokens):
        response = await test_client.post("/session", json={"email": "a@x.com"})

        assert response.status_code == 200
        assert response.json() == {"success": True}

        set_cookie = response.headers["set-cookie"]
        lowered = set_cookie.lower()
        assert lowered.startswith("token=")
        assert "httponly" in lowered
        assert "; secure" not in lowered
        assert tokens.verify(_token_from_set_cookie(set_cookie)).email == "a@x.com"

    @pytest.mark.asyncio
    async def test_login_does_not_touch_store(self, test_client, store):
        await test_client.post("/session", json={"email": "a@x.com"})
        assert store.calls == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("body", [{}, {"email": ""}, {"mail": "a@x.com"}])
    async def test_login_rejects_bad_body(self, test_client, body):
        response = await test_client.post("/session", json=body)
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_login_without_secret_is_server_error(self, store):
        from car_doctor.main import create_app

        app = create_app(store=store, tokens=TokenService(secret=""))
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            response = await client.post("/session", json={"email": "a@x.com"})

        assert response.status_code == 500
        assert response.json()["error"] == "server_error"
        assert "set-cookie" not in response.headers


class TestLogout:

    @pytest.mark.asyncio
    async def test_logout_expires_cookie(self, test_client):
        response = await test_client.get("/session/logout")

        assert response.status_code == 200
        assert response.json() == {"logout": True}
        set_cookie = response.headers["set-cookie"].lower()
        assert set_cookie.startswith("token=")
        assert "max-age=0" in set_cookie

    @pytest.mark.asyncio
    async def test_replayed_token_survives_logout(self, test_client, store):
        store.seed("orders", {"email": "a@x.com", "service": "oil-change", "status": False})
        login = await test_client.post("/session", json={"email": "a@x.com"})
        raw_token = _token_from_set_cookie(login.headers["set-cookie"])

        await test_client.get("/session/logout")

        response = await test_client.get(
            "/orders",
            params={"email": "a@x.com"},
            headers={"Cookie": f"token={raw_token}"},
        )
        assert response.status_code == 200
        assert len(response.json()) == 1
