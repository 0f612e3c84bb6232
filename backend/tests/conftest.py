import pytest
from flask import g

from jarla import create_app
from jarla.extensions import db
from jarla.models import User
from jarla.utils.jwt_utils import create_access_token

TIERS = [
    {"min_views": 0, "max_views": 10000, "rate": 10},
    {"min_views": 10000, "max_views": None, "rate": 5},
]


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text=""):
        self.status_code = status_code
        self._payload = payload
        self.text = text
        self.content = b"x" if payload is not None or text else b""

    @property
    def ok(self):
        return 200 <= self.status_code < 300

    def json(self):
        if self._payload is None:
            raise ValueError("no json")
        return self._payload


@pytest.fixture()
def app():
    app = create_app({
        "TESTING": True,
        "SQLALCHEMY_DATABASE_URI": "sqlite:///:memory:",
        "SECRET_KEY": "test-secret-key-0123456789",
        "AI_GATEWAY_API_KEY": "test-ai-key",
        "FIRECRAWL_API_KEY": "test-firecrawl-key",
        "AI_RETRY_DELAY_SECONDS": 0,
        "STATS_REFRESH_MINUTES": 0,
    })

    # requests share the fixture's app context (and its g), so drop the
    # user Flask-Login cached for the previous request
    @app.before_request
    def _reset_login_user():
        g.pop("_login_user", None)

    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(app):
    return app.test_client()


def auth(token):
    return {"Authorization": f"Bearer {token}"}


def register(client, email, role="creator", **extra):
    body = {"email": email, "password": "supersecret", "role": role}
    if role == "creator":
        body.setdefault("age", 21)
    body.update(extra)
    res = client.post("/api/auth/register", json=body)
    assert res.status_code == 201, res.get_json()
    data = res.get_json()
    return {"id": data["user"]["id"], "token": data["token"], "headers": auth(data["token"])}


@pytest.fixture()
def creator(client):
    return register(client, "creator@example.com")


@pytest.fixture()
def business(client):
    return register(client, "brand@example.com", role="business", company_name="Acme")


@pytest.fixture()
def admin(app):
    user = User(email="admin@example.com", role="admin")
    user.set_password("supersecret")
    db.session.add(user)
    db.session.commit()
    token = create_access_token(user.id, role="admin")
    return {"id": user.id, "token": token, "headers": auth(token)}


def create_campaign(client, business, **overrides):
    body = {"title": "Summer drop", "description": "Show the new line", "tiers": TIERS, "max_earnings": 200}
    body.update(overrides)
    res = client.post("/api/business/campaigns", json=body, headers=business["headers"])
    assert res.status_code == 201, res.get_json()
    return res.get_json()["campaign"]


def link_tiktok(client, creator, tiktok_user_id="tt-1"):
    res = client.post(
        "/api/me/tiktok-accounts",
        json={"tiktok_user_id": tiktok_user_id, "tiktok_username": "@dancer"},
        headers=creator["headers"],
    )
    assert res.status_code in (200, 201), res.get_json()
    return res.get_json()["account"]
