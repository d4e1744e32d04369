"""Tests for identity resolution and request credentials."""

import jwt
import pytest
from starlette.requests import Request

from jira_dashboard.core.auth import (
    Identity,
    IdentityResolver,
    RequestContext,
    TokenManager,
)

SIGNING_KEY = "signature-is-not-checked-by-the-backend"


def make_request(headers: dict[str, str]) -> Request:
    scope = {
        "type": "http",
        "method": "GET",
        "path": "/",
        "headers": [(k.lower().encode(), v.encode()) for k, v in headers.items()],
    }
    return Request(scope)


class TestIdentityResolver:
    @pytest.mark.asyncio
    async def test_reads_subject_from_bearer_token(self):
        token = jwt.encode({"sub": "user:default/jdoe"}, SIGNING_KEY, algorithm="HS256")

        identity = await IdentityResolver().get_identity(
            make_request({"Authorization": f"Bearer {token}"})
        )

        assert identity == Identity(user_entity_ref="user:default/jdoe", token=token)
        assert identity.username == "jdoe"

    @pytest.mark.asyncio
    async def test_no_header(self):
        assert await IdentityResolver().get_identity(make_request({})) is None

    @pytest.mark.asyncio
    async def test_non_bearer_scheme(self):
        request = make_request({"Authorization": "Basic dXNlcjpwYXNz"})
        assert await IdentityResolver().get_identity(request) is None

    @pytest.mark.asyncio
    async def test_garbage_token(self):
        request = make_request({"Authorization": "Bearer not-a-jwt"})
        assert await IdentityResolver().get_identity(request) is None

    @pytest.mark.asyncio
    async def test_token_without_subject(self):
        token = jwt.encode({"name": "x"}, SIGNING_KEY, algorithm="HS256")
        request = make_request({"Authorization": f"Bearer {token}"})
        assert await IdentityResolver().get_identity(request) is None


class TestRequestContext:
    def test_user_entity_ref(self):
        context = RequestContext("svc", Identity("user:default/jdoe", "t"))
        assert context.user_entity_ref == "user:default/jdoe"
        assert RequestContext("svc").user_entity_ref is None

    @pytest.mark.asyncio
    async def test_token_manager(self):
        assert await TokenManager("svc").get_token() == "svc"
        assert await TokenManager().get_token() is None
