import json

import pytest
import requests

from conftest import FakeResponse
from jarla.models import BusinessProfile
from jarla.utils.assistant import BUSY_REPLY, CREDITS_REPLY, FALLBACK_REPLY


def chat_reply(content):
    return FakeResponse(200, {"choices": [{"message": {"content": content}}]})


def tool_reply(name, args):
    call = {"function": {"name": name, "arguments": json.dumps(args)}}
    return FakeResponse(200, {"choices": [{"message": {"tool_calls": [call]}}]})


class FakeHttp:
    """Routes Firecrawl scrapes and AI gateway calls to canned replies."""

    def __init__(self, ai=(), pages=None):
        self.ai = list(ai)
        self.pages = pages or {}
        self.ai_calls = []
        self.scraped = []

    def __call__(self, url, headers=None, json=None, timeout=None):
        if "firecrawl" in url:
            self.scraped.append((json["url"], tuple(json["formats"])))
            data = self.pages.get(json["url"])
            if data is None:
                return FakeResponse(404, {"success": False, "error": "not found"})
            return FakeResponse(200, {"success": True, "data": data})
        self.ai_calls.append(json)
        return self.ai.pop(0)


@pytest.fixture()
def http(monkeypatch):
    def install(**kwargs):
        fake = FakeHttp(**kwargs)
        monkeypatch.setattr(requests, "post", fake)
        return fake
    return install


class TestCampaignChat:
    def test_form_updates(self, client, http):
        http(ai=[chat_reply('{"message": "Added a title", "formUpdates": {"title": "Summer"}}')])
        res = client.post("/api/assistant/campaign-chat", json={"message": "make a title", "companyName": "Acme"})
        assert res.get_json() == {"response": "Added a title", "formUpdates": {"title": "Summer"}}

    def test_uses_caller_business_profile(self, client, business, http):
        fake = http(ai=[chat_reply('{"message": "ok"}')])
        client.patch("/api/business/profile", json={"industry": "Outdoor gear"}, headers=business["headers"])
        client.post(
            "/api/assistant/campaign-chat",
            json={"message": "hi", "conversationHistory": [{"role": "jarla", "content": "Hello"}]},
            headers=business["headers"],
        )
        messages = fake.ai_calls[0]["messages"]
        assert "Outdoor gear" in messages[0]["content"]
        assert messages[1] == {"role": "assistant", "content": "Hello"}
        assert messages[-1] == {"role": "user", "content": "hi"}

    @pytest.mark.parametrize("status,expected", [(429, BUSY_REPLY), (402, CREDITS_REPLY), (500, FALLBACK_REPLY)])
    def test_friendly_failures(self, client, http, status, expected):
        http(ai=[FakeResponse(status, {})])
        res = client.post("/api/assistant/campaign-chat", json={"message": "hi"})
        assert res.status_code == 200
        assert res.get_json() == {"response": expected, "formUpdates": None}

    def test_leaked_json_is_removed(self, client, http):
        leaked = json.dumps({"message": 'Done {"formUpdates": {"title": "x"}}'})
        http(ai=[chat_reply(leaked)])
        res = client.post("/api/assistant/campaign-chat", json={"message": "hi"})
        assert res.get_json()["response"] == "Done"

    def test_message_required(self, client):
        assert client.post("/api/assistant/campaign-chat", json={}).status_code == 400


class TestCompanyResearch:
    def test_chat(self, client, http):
        http(ai=[chat_reply('{"message": "Found Acme", "profileUpdates": {"company_name": "Acme AB"}}')])
        res = client.post("/api/assistant/company-research", json={"message": "Acme"})
        assert res.get_json() == {"response": "Found Acme", "profileUpdates": {"company_name": "Acme AB"}}

    def test_save_requires_auth(self, client):
        res = client.post("/api/assistant/company-research", json={"action": "save", "profileUpdates": {"industry": "x"}})
        assert res.status_code == 401

    def test_save_writes_allowed_fields(self, client, business):
        updates = {"industry": "Fashion", "logo_url": "https://logo.clearbit.com/acme.se", "vat_number": "SE1"}
        res = client.post(
            "/api/assistant/company-research",
            json={"action": "save", "profileUpdates": updates},
            headers=business["headers"],
        )
        assert res.get_json()["saved"] is True
        bp = BusinessProfile.query.filter_by(user_id=business["id"]).one()
        assert bp.industry == "Fashion"
        assert bp.vat_number is None
        assert bp.onboarding_complete is True


class TestAnalyzeWebsite:
    def test_extracts_and_filters_audience(self, client, http):
        info = {"description": "Shoes", "productsServices": "Sneakers", "country": "Sweden", "audienceTypes": ["Gamers", "Aliens"]}
        fake = http(ai=[tool_reply("extract_business_info", info)], pages={"https://acme.se": {"markdown": "# Acme shoes"}})
        res = client.post("/api/assistant/analyze-website", json={"url": "acme.se"})
        assert res.status_code == 200
        assert res.get_json()["data"]["audienceTypes"] == ["Gamers"]
        assert fake.ai_calls[0]["tool_choice"]["function"]["name"] == "extract_business_info"

    def test_missing_url(self, client):
        assert client.post("/api/assistant/analyze-website", json={}).status_code == 400

    def test_empty_page(self, client, http):
        http(pages={"https://acme.se": {"markdown": ""}})
        res = client.post("/api/assistant/analyze-website", json={"url": "https://acme.se"})
        assert res.status_code == 400
        assert res.get_json()["error"] == "No content found on website"

    def test_rate_limited(self, client, http):
        http(ai=[FakeResponse(429, {})], pages={"https://acme.se": {"markdown": "text"}})
        assert client.post("/api/assistant/analyze-website", json={"url": "acme.se"}).status_code == 429

    def test_not_configured(self, client, app):
        app.config["FIRECRAWL_API_KEY"] = ""
        assert client.post("/api/assistant/analyze-website", json={"url": "acme.se"}).status_code == 500


class TestAnalyzeCompany:
    def test_summary_with_logo_and_sources(self, client, http):
        pages = {
            "https://acme.se": {"markdown": "A" * 20000, "html": '<link rel="apple-touch-icon" href="/icon.png">'},
            "https://instagram.com/acme": {"markdown": "insta"},
        }
        fake = http(ai=[chat_reply("Acme makes shoes.")], pages=pages)
        res = client.post(
            "/api/assistant/analyze-company",
            json={"website": "https://acme.se", "socialMedia": {"instagram": "https://instagram.com/acme", "tiktok": ""}, "companyName": "Acme", "language": "sv"},
        )
        assert res.status_code == 200
        data = res.get_json()["data"]
        assert data == {"summary": "Acme makes shoes.", "sourcesAnalyzed": ["Website", "instagram"], "logo": "https://acme.se/icon.png"}
        assert fake.ai_calls[0]["model"] == "openai/gpt-5"
        user_prompt = fake.ai_calls[0]["messages"][1]["content"]
        assert "A" * 8000 in user_prompt and "A" * 8001 not in user_prompt

    def test_credits_exhausted(self, client, http):
        http(ai=[FakeResponse(402, {})], pages={"https://acme.se": {"markdown": "x"}})
        res = client.post("/api/assistant/analyze-company", json={"website": "https://acme.se", "companyName": "Acme"})
        assert res.status_code == 402
        assert res.get_json()["error"] == "AI credits exhausted"

    def test_falls_back_to_second_model(self, client, http):
        fake = http(ai=[FakeResponse(500, {}), FakeResponse(500, {}), chat_reply("ok")], pages={"https://acme.se": {"markdown": "x"}})
        res = client.post("/api/assistant/analyze-company", json={"website": "https://acme.se", "companyName": "Acme"})
        assert res.status_code == 200
        assert [c["model"] for c in fake.ai_calls] == ["openai/gpt-5", "openai/gpt-5", "google/gemini-2.5-pro"]

    def test_nothing_to_analyze(self, client):
        assert client.post("/api/assistant/analyze-company", json={"companyName": "Acme"}).status_code == 400
