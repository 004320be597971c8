import time

import httpx
import pytest

from tests.fixtures_data import TEST_JWT_SECRET, issue_token
from whatsorder.identity.base import IdentityVerificationError
from whatsorder.identity.jwt_provider import JwtIdentityProvider
from whatsorder.identity.remote_provider import RemoteIdentityProvider
from whatsorder.identity.service import IdentityGateway, build_identity_provider, extract_bearer_token


def _remote(handler) -> RemoteIdentityProvider:
    return RemoteIdentityProvider(
        base_url="https://auth.example.test/",
        api_key="anon-key",
        transport=httpx.MockTransport(handler),
    )


def test_extract_bearer_token_prefers_header_then_cookie():
    assert extract_bearer_token("Bearer abc", "cookie") == "abc"
    assert extract_bearer_token("bearer   abc  ") == "abc"
    assert extract_bearer_token(None, "cookie-token") == "cookie-token"
    assert extract_bearer_token("Basic xyz", None) is None
    assert extract_bearer_token("Bearer ", "") is None


def test_jwt_provider_returns_subject_and_email():
    provider = JwtIdentityProvider(secret=TEST_JWT_SECRET)

    identity = provider.verify(issue_token("owner-1", email="owner@example.com"))

    assert identity.subject == "owner-1"
    assert identity.email == "owner@example.com"


@pytest.mark.parametrize(
    "token",
    [
        issue_token("owner-1", secret="other-secret"),
        issue_token("owner-1", exp=int(time.time()) - 60),
        issue_token(""),
        "not-a-jwt",
    ],
)
def test_jwt_provider_rejects_bad_tokens(token):
    provider = JwtIdentityProvider(secret=TEST_JWT_SECRET)

    with pytest.raises(IdentityVerificationError):
        provider.verify(token)


def test_jwt_provider_checks_audience_when_configured():
    provider = JwtIdentityProvider(secret=TEST_JWT_SECRET, audience="authenticated")

    assert provider.verify(issue_token("owner-1", aud="authenticated")).subject == "owner-1"
    with pytest.raises(IdentityVerificationError):
        provider.verify(issue_token("owner-1", aud="anon"))


def test_jwt_provider_without_secret_rejects_everything():
    with pytest.raises(IdentityVerificationError):
        JwtIdentityProvider(secret="").verify(issue_token("owner-1"))


def test_remote_provider_sends_token_and_api_key():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["authorization"] = request.headers.get("Authorization")
        seen["apikey"] = request.headers.get("apikey")
        return httpx.Response(200, json={"id": "user-123", "email": "a@b.test"})

    identity = _remote(handler).verify("token-xyz")

    assert identity.subject == "user-123"
    assert identity.email == "a@b.test"
    assert seen == {
        "url": "https://auth.example.test/auth/v1/user",
        "authorization": "Bearer token-xyz",
        "apikey": "anon-key",
    }


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(401, json={"msg": "invalid JWT"}),
        httpx.Response(200, json={"email": "no-id@b.test"}),
        httpx.Response(200, text="not json"),
    ],
)
def test_remote_provider_rejects_unusable_responses(response):
    provider = _remote(lambda request: response)

    with pytest.raises(IdentityVerificationError):
        provider.verify("token-xyz")


def test_remote_provider_transport_error_is_unauthorized(caplog):
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("boom", request=request)

    with caplog.at_level("WARNING"):
        with pytest.raises(IdentityVerificationError):
            _remote(handler).verify("token-xyz")

    assert any("[IDENTITY]" in record.getMessage() for record in caplog.records)


def test_gateway_requires_a_credential():
    gateway = IdentityGateway(JwtIdentityProvider(secret=TEST_JWT_SECRET))

    with pytest.raises(IdentityVerificationError):
        gateway.authenticate(None, None)
    assert gateway.authenticate(None, issue_token("owner-9")).subject == "owner-9"


def test_build_identity_provider_by_name():
    assert isinstance(build_identity_provider("jwt"), JwtIdentityProvider)
    assert isinstance(build_identity_provider("remote"), RemoteIdentityProvider)
    with pytest.raises(ValueError):
        build_identity_provider("ldap")
