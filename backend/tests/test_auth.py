"""
Car Doctor Backend — Session Authentication Tests
===================================================

What we test:
    ✅ no cookie → 401 and the store is never called
    ✅ malformed / foreign / expired token → 401, store never called
    ✅ a valid cookie attaches the identity to request.state
    ✅ strict-mode dependency is a no-op when the flag is off
"""

from datetime import datetime, timedelta, timezone

import pytest
from starlette.requests import Request

from car_doctor.config import settings
from car_doctor.exceptions import UnauthorizedError
from car_doctor.middleware.auth import order_write_identity, require_identity
from car_doctor.services.token_service import TokenService


def _request(cookie: str = "") -> Request:
    headers = [(b"cookie", cookie.encode())] if cookie else []
    return Request({
        "type": "http",
        "method": "GET",
        "path": "/orders",
        "query_string": b"",
        "headers": headers,
    })


class TestProtectedRouteRejections:

    @pytest.mark.asyncio
    async def test_no_cookie_is_unauthorized(self, test_client, store):
        store.seed("orders", {"email": "a@x.com", "service": "oil-change"})

        response = await test_client.get("/orders", params={"email": "a@x.com"})

        assert response.status_code == 401
        assert response.json()["message"] == "Unauthorized"
        assert store.calls == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("token", ["garbage", "a.b.c", "eyJhbGciOiJIUzI1NiJ9.e30.x"])
    async def test_malformed_token_is_unauthorized(self, test_client, store, token):
        response = await test_client.get(
            "/orders", params={"email": "a@x.com"}, headers={"Cookie": f"token={token}"},
        )
        assert response.status_code == 401
        assert store.calls == []

    @pytest.mark.asyncio
    async def test_token_from_other_secret_is_unauthorized(self, test_client, store):
        foreign = TokenService(secret="some-other-deployment-secret-0123456789").issue("a@x.com")
        response = await test_client.get(
            "/orders", params={"email": "a@x.com"}, headers={"Cookie": f"token={foreign}"},
        )
        assert response.status_code == 401
        assert store.calls == []

    @pytest.mark.asyncio
    async def test_expired_token_is_unauthorized(self, test_client, store):
        past = lambda: datetime.now(timezone.utc) - timedelta(hours=2)
        expired = TokenService(settings.access_token_secret, 3600, clock=past).issue("a@x.com")

        response = await test_client.get(
            "/orders", params={"email": "a@x.com"}, headers={"Cookie": f"token={expired}"},
        )
        assert response.status_code == 401
        assert store.calls == []


class TestRequireIdentity:

    @pytest.mark.asyncio
    async def test_attaches_identity_to_request_state(self, tokens):
        request = _request(f"token={tokens.issue('a@x.com')}")

        identity = await require_identity(request, tokens)

        assert identity.email == "a@x.com"
        assert request.state.identity == identity

    @pytest.mark.asyncio
    async def test_missing_cookie_raises(self, tokens):
        with pytest.raises(UnauthorizedError) as exc_info:
            await require_identity(_request(), tokens)
        assert exc_info.value.context["reason"] == "missing_token"

    @pytest.mark.asyncio
    async def test_expiry_reason_is_recorded(self, tokens):
        past = lambda: datetime.now(timezone.utc) - timedelta(hours=2)
        expired = TokenService(settings.access_token_secret, 3600, clock=past).issue("a@x.com")

        with pytest.raises(UnauthorizedError) as exc_info:
            await require_identity(_request(f"token={expired}"), tokens)
        assert exc_info.value.context["reason"] == "expired_token"

    @pytest.mark.asyncio
    async def test_order_write_identity_off_by_default(self, tokens):
        assert await order_write_identity(_request(), tokens) is None

    @pytest.mark.asyncio
    async def test_order_write_identity_in_strict_mode(self, tokens, monkeypatch):
        monkeypatch.setattr(settings, "require_auth_for_order_writes", True)

        with pytest.raises(UnauthorizedError):
            await order_write_identity(_request(), tokens)

        request = _request(f"token={tokens.issue('a@x.com')}")
        identity = await order_write_identity(request, tokens)
        assert identity.email == "a@x.com"
