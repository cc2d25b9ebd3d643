"""
Tests for the bearer token authentication gate.

The gate never rejects a request. It only decides whether the request
carries an identity; protected routers answer 401 when it does not.
"""

from fastapi import FastAPI, Request, status
from fastapi.testclient import TestClient

from bookshelf.middleware import (
    IdentityContext,
    TokenAuthenticationMiddleware,
    resolve_identity,
)
from bookshelf.services.security import create_access_token

from tests.conftest import TEST_PASSWORD, encode_claims


def make_probe_app() -> FastAPI:
    """Minimal app that echoes the identity the gate installed."""
    probe = FastAPI()
    probe.add_middleware(TokenAuthenticationMiddleware)

    @probe.get("/whoami")
    def whoami(request: Request) -> dict:
        identity = request.state.identity
        if identity is None:
            return {"principal": None}
        return {
            "principal": identity.principal,
            "credentials": identity.credentials,
            "authorities": list(identity.authorities),
        }

    return probe


class TestResolveIdentity:
    """Tests for resolve_identity()."""

    def test_no_header(self):
        assert resolve_identity(None) is None

    def test_non_bearer_scheme(self):
        assert resolve_identity("Basic dGVzdDp0ZXN0") is None

    def test_lowercase_bearer_is_not_accepted(self):
        token = create_access_token("alice")

        assert resolve_identity(f"bearer {token}") is None

    def test_valid_token(self):
        token = create_access_token("alice")

        identity = resolve_identity(f"Bearer {token}")

        assert identity == IdentityContext(principal="alice", credentials=None, authorities=())

    def test_invalid_token_is_anonymous(self):
        assert resolve_identity("Bearer not-a-jwt") is None

    def test_foreign_issuer_is_anonymous(self):
        token = encode_claims(iss="someone-else")

        assert resolve_identity(f"Bearer {token}") is None


class TestMiddleware:
    """Tests for TokenAuthenticationMiddleware on a probe app."""

    def test_anonymous_request_passes_through(self):
        client = TestClient(make_probe_app())

        response = client.get("/whoami")

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"principal": None}

    def test_bad_token_passes_through_anonymously(self):
        client = TestClient(make_probe_app())

        response = client.get("/whoami", headers={"Authorization": "Bearer garbage"})

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"principal": None}

    def test_valid_token_installs_identity(self):
        client = TestClient(make_probe_app())
        token = create_access_token("alice")

        response = client.get("/whoami", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {
            "principal": "alice",
            "credentials": None,
            "authorities": [],
        }

    def test_identity_does_not_leak_between_requests(self):
        client = TestClient(make_probe_app())
        token = create_access_token("alice")

        client.get("/whoami", headers={"Authorization": f"Bearer {token}"})
        response = client.get("/whoami")

        assert response.json() == {"principal": None}


class TestProtectedRoutes:
    """Tests for route-level authorization on the real app."""

    def test_protected_route_without_token(self, client):
        response = client.get("/api/v1/books/")

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        error = response.json()["errors"][0]
        assert error["code"] == "0400"
        assert error["message"] == "Full authentication is required to access this resource"

    def test_protected_route_with_invalid_token(self, client):
        response = client.get(
            "/api/v1/users/",
            headers={"Authorization": "Bearer garbage"},
        )

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json()["errors"][0]["code"] == "0400"

    def test_protected_route_with_valid_token(self, client, auth_headers):
        response = client.get("/api/v1/books/", headers=auth_headers)

        assert response.status_code == status.HTTP_200_OK

    def test_public_route_ignores_bad_token(self, client, sample_user):
        """A broken token never blocks login."""
        response = client.post(
            "/api/v1/auth/login",
            json={"username": "testuser", "password": TEST_PASSWORD},
            headers={"Authorization": "Bearer garbage"},
        )

        assert response.status_code == status.HTTP_201_CREATED

    def test_health_is_public(self, client):
        response = client.get("/health")

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["status"] == "healthy"

    def test_root_is_public(self, client):
        response = client.get("/")

        assert response.status_code == status.HTTP_200_OK
        assert "Welcome" in response.json()["message"]
