# hr_core/iam/tests/test_auth_and_me.py
import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

pytestmark = pytest.mark.django_db


def test_me_requires_auth():
    res = APIClient().get("/api/v1/me/")
    assert res.status_code in (401, 403)


def test_login_sets_cookies(user, settings):
    res = APIClient().post("/api/v1/auth/login/", {"username": "hruser", "password": "testpass"}, format="json")
    assert res.status_code == 200

    assert settings.SIMPLE_JWT["AUTH_COOKIE"] in res.cookies
    assert settings.SIMPLE_JWT["AUTH_COOKIE_REFRESH"] in res.cookies


def test_login_with_bad_password_is_401(user):
    res = APIClient().post("/api/v1/auth/login/", {"username": "hruser", "password": "nope"}, format="json")
    assert res.status_code == 401


def test_cookie_authenticates_follow_up_requests(user):
    client = APIClient()
    client.post("/api/v1/auth/login/", {"username": "hruser", "password": "testpass"}, format="json")

    res = client.get("/api/v1/me/")
    assert res.status_code == 200
    assert res.data["user"]["username"] == "hruser"


def test_bearer_token_and_me_payload(user, settings):
    settings.HR_CORE = {**settings.HR_CORE, "TRUST_X_FORWARDED_FOR": True}
    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {RefreshToken.for_user(user).access_token}")

    res = client.get("/api/v1/me/", HTTP_X_FORWARDED_FOR="203.0.113.5", HTTP_X_ACTOR_ROLE="ADMIN")
    assert res.status_code == 200
    body = res.json()
    assert body["roles"] == ["HR"]
    assert body["revision_identity"] == {
        "actor_id": "hruser",
        "actor_role": "HR",
        "origin_address": "203.0.113.5",
    }


def test_refresh_uses_cookie(user):
    client = APIClient()
    client.post("/api/v1/auth/login/", {"username": "hruser", "password": "testpass"}, format="json")

    res = client.post("/api/v1/auth/refresh/")
    assert res.status_code == 200
    assert res.data["detail"] == "refreshed"


def test_responses_carry_request_id(api_client):
    res = api_client.get("/api/v1/me/", HTTP_X_REQUEST_ID="abc-1")
    assert res["X-Request-Id"] == "abc-1"
