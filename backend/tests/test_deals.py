import pytest

from conftest import register
from jarla.jobs import stats_refresher
from jarla.models import AuditLog, DealApplication

DEAL = {"title": "Unbox our headphones", "rate_per_view": 2.5, "max_earnings": 500, "guidelines": ["Say the name", ""]}


@pytest.fixture()
def deal(client, business):
    res = client.post("/api/business/deals", json=DEAL, headers=business["headers"])
    assert res.status_code == 201
    return res.get_json()["deal"]


def apply(client, creator, deal, message="Love it"):
    return client.post(f"/api/deals/{deal['id']}/apply", json={"message": message}, headers=creator["headers"])


class TestCreateDeal:
    def test_defaults(self, deal):
        assert deal["brand"] == "Acme"
        assert deal["type"] == "deal"
        assert deal["guidelines"] == ["Say the name"]
        assert deal["rate_per_view"] == 2.5

    def test_brand_falls_back(self, client):
        biz = register(client, "nameless@example.com", role="business")
        res = client.post("/api/business/deals", json=DEAL, headers=biz["headers"])
        assert res.get_json()["deal"]["brand"] == "My Brand"

    def test_validation(self, client, business):
        res = client.post("/api/business/deals", json={"title": "", "rate_per_view": 0, "max_earnings": -1}, headers=business["headers"])
        assert res.status_code == 400
        assert len(res.get_json()["errors"]) == 3


class TestApplications:
    def test_apply_once(self, client, creator, deal):
        first = apply(client, creator, deal)
        assert first.status_code == 201
        assert first.get_json()["already_applied"] is False
        again = apply(client, creator, deal, message="me again")
        assert again.status_code == 200
        assert again.get_json()["already_applied"] is True
        assert again.get_json()["application"]["message"] == "Love it"

    def test_feed_shows_my_status(self, client, creator, deal):
        apply(client, creator, deal)
        feed = client.get("/api/deals", headers=creator["headers"]).get_json()
        assert feed[0]["application_status"] == "pending"

    def test_business_lists_with_counts(self, client, business, creator, deal):
        apply(client, creator, deal)
        rows = client.get("/api/business/deals", headers=business["headers"]).get_json()
        assert rows[0]["application_count"] == 1

    def test_video_only_after_accept(self, client, business, creator, deal):
        app_id = apply(client, creator, deal).get_json()["application"]["id"]
        url = f"/api/deals/{deal['id']}/application"
        video = {"tiktok_video_url": "https://www.tiktok.com/@me/video/555"}
        assert client.patch(url, json=video, headers=creator["headers"]).status_code == 409

        res = client.post(
            f"/api/business/deals/{deal['id']}/applications/{app_id}/decision",
            json={"status": "accepted"},
            headers=business["headers"],
        )
        assert res.status_code == 200
        assert res.get_json()["application"]["reviewed_at"]
        assert AuditLog.query.filter_by(action="deal_application_accepted").count() == 1

        res = client.patch(url, json=video, headers=creator["headers"])
        assert res.status_code == 200
        assert res.get_json()["application"]["tiktok_video_id"] == "555"

    def test_bad_decision(self, client, business, creator, deal):
        app_id = apply(client, creator, deal).get_json()["application"]["id"]
        res = client.post(
            f"/api/business/deals/{deal['id']}/applications/{app_id}/decision",
            json={"status": "maybe"},
            headers=business["headers"],
        )
        assert res.status_code == 400

    def test_delete_removes_applications(self, client, business, creator, deal):
        apply(client, creator, deal)
        assert client.delete(f"/api/business/deals/{deal['id']}", headers=business["headers"]).status_code == 200
        assert DealApplication.query.count() == 0


def accept_with_video(client, business, creator, deal):
    app_id = apply(client, creator, deal).get_json()["application"]["id"]
    client.post(
        f"/api/business/deals/{deal['id']}/applications/{app_id}/decision",
        json={"status": "accepted"},
        headers=business["headers"],
    )
    client.patch(
        f"/api/deals/{deal['id']}/application",
        json={"tiktok_video_url": "https://www.tiktok.com/@me/video/555"},
        headers=creator["headers"],
    )
    return app_id


class TestDealStats:
    def test_job_drives_flat_rate_earnings(self, client, business, creator, deal, monkeypatch):
        app_id = accept_with_video(client, business, creator, deal)
        seen = []

        def fake_stats(url, video_id=None):
            seen.append(video_id)
            return {"views": 400000, "likes": 0}

        monkeypatch.setattr(stats_refresher, "fetch_video_stats", fake_stats)
        assert stats_refresher.refresh_submission_stats(limit=10) == {"ok": True, "checked": 1, "updated": 1}
        assert seen == ["555"]

        detail = client.get(f"/api/business/deals/{deal['id']}", headers=business["headers"]).get_json()
        assert detail["applications"][0]["current_views"] == 400000
        assert detail["applications"][0]["earned"] == 500.0
        mine = client.get(f"/api/deals/{deal['id']}/application", headers=creator["headers"]).get_json()
        assert mine["id"] == app_id
        assert mine["earned"] == 500.0

    def test_job_skips_applications_without_video(self, client, business, creator, deal, monkeypatch):
        app_id = apply(client, creator, deal).get_json()["application"]["id"]
        client.post(
            f"/api/business/deals/{deal['id']}/applications/{app_id}/decision",
            json={"status": "accepted"},
            headers=business["headers"],
        )
        monkeypatch.setattr(stats_refresher, "fetch_video_stats", lambda url, video_id=None: {"views": 1, "likes": 1})
        assert stats_refresher.refresh_submission_stats(limit=10)["checked"] == 0

    def test_endpoint_refreshes_and_reports_earned(self, client, business, creator, deal, monkeypatch):
        app_id = accept_with_video(client, business, creator, deal)
        monkeypatch.setattr(stats_refresher, "fetch_video_stats", lambda url, video_id=None: {"views": 100000, "likes": 3})
        res = client.post("/api/deal-applications/stats/refresh", json={"application_ids": [app_id]}, headers=creator["headers"])
        assert res.status_code == 200
        body = res.get_json()
        assert body["results"] == {str(app_id): {"views": 100000, "likes": 3}}
        assert body["earned"] == {str(app_id): 250.0}

    def test_endpoint_ignores_strangers(self, client, business, creator, deal, monkeypatch):
        app_id = accept_with_video(client, business, creator, deal)
        monkeypatch.setattr(stats_refresher, "fetch_video_stats", lambda url, video_id=None: {"views": 100000, "likes": 0})
        stranger = register(client, "stranger@example.com")
        res = client.post("/api/deal-applications/stats/refresh", json={"application_ids": [app_id]}, headers=stranger["headers"])
        assert res.get_json()["results"] == {}

    def test_endpoint_requires_ids(self, client, creator):
        res = client.post("/api/deal-applications/stats/refresh", json={"application_ids": "1"}, headers=creator["headers"])
        assert res.status_code == 400


class TestLooseInput:
    def test_numeric_brand_name_is_text(self, client, business):
        res = client.post("/api/business/deals", json={**DEAL, "brand_name": 42}, headers=business["headers"])
        assert res.status_code == 201
        assert res.get_json()["deal"]["brand"] == "42"

    def test_numeric_decision_is_rejected(self, client, business, creator, deal):
        app_id = apply(client, creator, deal).get_json()["application"]["id"]
        res = client.post(
            f"/api/business/deals/{deal['id']}/applications/{app_id}/decision",
            json={"status": 1},
            headers=business["headers"],
        )
        assert res.status_code == 400
