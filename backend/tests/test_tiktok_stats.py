import pytest
import requests

from conftest import FakeResponse, create_campaign, link_tiktok, register
from jarla.extensions import db
from jarla.jobs.stats_refresher import refresh_submission_stats
from jarla.models import ContentSubmission, Earning
from jarla.utils import tiktok

VIDEO = "https://www.tiktok.com/@dancer/video/7301234567890"


class FakeGet:
    def __init__(self, oembed=None, page=""):
        self.oembed = oembed
        self.page = page
        self.urls = []

    def __call__(self, url, params=None, headers=None, timeout=None):
        self.urls.append(url)
        if url == tiktok.OEMBED_URL:
            return FakeResponse(200, {} if self.oembed is None else self.oembed)
        return FakeResponse(200, None, text=self.page)


@pytest.fixture()
def submission(client, business, creator):
    campaign = create_campaign(client, business)
    account = link_tiktok(client, creator)
    res = client.post(
        f"/api/campaigns/{campaign['id']}/submissions",
        json={"tiktok_video_url": VIDEO, "tiktok_account_id": account["id"]},
        headers=creator["headers"],
    )
    return res.get_json()["submission"]


class TestParsing:
    def test_video_id(self):
        assert tiktok.parse_video_id(VIDEO) == "7301234567890"
        assert tiktok.parse_video_id("https://vm.tiktok.com/ZMabc/") is None

    def test_is_tiktok_url(self):
        assert tiktok.is_tiktok_url(VIDEO)
        assert not tiktok.is_tiktok_url("http://www.tiktok.com/@a/video/1")


class TestFetchVideoStats:
    def test_oembed(self, app, monkeypatch):
        monkeypatch.setattr(requests, "get", FakeGet(oembed={"view_count": 1200, "like_count": 30}))
        assert tiktok.fetch_video_stats(VIDEO, "7301234567890") == {"views": 1200, "likes": 30}

    def test_oembed_statistics_block(self, app, monkeypatch):
        monkeypatch.setattr(requests, "get", FakeGet(oembed={"statistics": {"playCount": 9, "diggCount": 2}}))
        assert tiktok.fetch_video_stats(VIDEO) == {"views": 9, "likes": 2}

    def test_page_fallback(self, app, monkeypatch):
        fake = FakeGet(oembed={"title": "no counters"}, page='{"stats":{"diggCount":45,"playCount":6789}}')
        monkeypatch.setattr(requests, "get", fake)
        assert tiktok.fetch_video_stats(VIDEO, "7301234567890") == {"views": 6789, "likes": 45}
        assert fake.urls == [tiktok.OEMBED_URL, VIDEO]

    def test_no_fallback_without_video_id(self, app, monkeypatch):
        fake = FakeGet(oembed={}, page='"playCount":5')
        monkeypatch.setattr(requests, "get", fake)
        assert tiktok.fetch_video_stats(VIDEO) == {"views": 0, "likes": 0}
        assert fake.urls == [tiktok.OEMBED_URL]

    def test_network_errors_give_zeros(self, app, monkeypatch):
        def boom(*args, **kwargs):
            raise requests.ConnectionError("down")

        monkeypatch.setattr(requests, "get", boom)
        assert tiktok.fetch_video_stats(VIDEO, "1") == {"views": 0, "likes": 0}

    @pytest.mark.parametrize("body", [[], "views", {"statistics": ["x"], "view_count": 12}])
    def test_odd_oembed_bodies(self, app, monkeypatch, body):
        monkeypatch.setattr(requests, "get", FakeGet(oembed=body))
        expected = 12 if isinstance(body, dict) else 0
        assert tiktok.fetch_video_stats(VIDEO) == {"views": expected, "likes": 0}

    def test_list_body_falls_back_to_page(self, app, monkeypatch):
        monkeypatch.setattr(requests, "get", FakeGet(oembed=[], page='"playCount":31'))
        assert tiktok.fetch_video_stats(VIDEO, "7301234567890") == {"views": 31, "likes": 0}


class TestRefreshEndpoint:
    def test_requires_ids(self, client, creator):
        assert client.post("/api/submissions/stats/refresh", json={}, headers=creator["headers"]).status_code == 400
        assert client.post("/api/submissions/stats/refresh", json={"submission_ids": []}, headers=creator["headers"]).status_code == 400

    def test_updates_positive_counters(self, client, creator, submission, monkeypatch):
        monkeypatch.setattr(requests, "get", FakeGet(oembed={"view_count": 4000, "like_count": 0}))
        res = client.post("/api/submissions/stats/refresh", json={"submission_ids": [submission["id"]]}, headers=creator["headers"])
        assert res.status_code == 200
        assert res.get_json()["results"] == {str(submission["id"]): {"views": 4000, "likes": 0}}
        row = db.session.get(ContentSubmission, submission["id"])
        assert row.current_views == 4000
        assert row.current_likes == 0

    def test_zero_counts_keep_old_values(self, client, creator, submission, monkeypatch):
        row = db.session.get(ContentSubmission, submission["id"])
        row.current_views = 777
        db.session.commit()
        monkeypatch.setattr(requests, "get", FakeGet(oembed={}))
        client.post("/api/submissions/stats/refresh", json={"submission_ids": [submission["id"]]}, headers=creator["headers"])
        assert db.session.get(ContentSubmission, submission["id"]).current_views == 777

    def test_strangers_refresh_nothing(self, client, submission, monkeypatch):
        monkeypatch.setattr(requests, "get", FakeGet(oembed={"view_count": 1}))
        stranger = register(client, "stranger@example.com")
        res = client.post("/api/submissions/stats/refresh", json={"submission_ids": [submission["id"]]}, headers=stranger["headers"])
        assert res.get_json()["results"] == {}

    def test_odd_oembed_body_does_not_abort_refresh(self, client, creator, submission, monkeypatch):
        monkeypatch.setattr(requests, "get", FakeGet(oembed=[]))
        res = client.post("/api/submissions/stats/refresh", json={"submission_ids": [submission["id"]]}, headers=creator["headers"])
        assert res.status_code == 200
        assert res.get_json()["results"] == {str(submission["id"]): {"views": 0, "likes": 0}}


class TestRefreshJob:
    def test_syncs_approved_earnings(self, client, business, submission, monkeypatch):
        client.post(f"/api/business/submissions/{submission['id']}/review", json={"status": "approved"}, headers=business["headers"])
        monkeypatch.setattr(requests, "get", FakeGet(oembed={"view_count": 20000, "like_count": 10}))
        out = refresh_submission_stats(limit=10)
        assert out == {"ok": True, "checked": 1, "updated": 1}
        assert Earning.query.filter_by(submission_id=submission["id"]).one().amount == 150.0

    def test_cli(self, app, submission, monkeypatch):
        monkeypatch.setattr(requests, "get", FakeGet(oembed={"view_count": 5}))
        result = app.test_cli_runner().invoke(args=["jarla", "refresh-stats", "--limit", "5"])
        assert "checked=1 updated=1" in result.output
