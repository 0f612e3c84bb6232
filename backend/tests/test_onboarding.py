import pytest

from jarla.models import BusinessProfile
from jarla.utils import onboarding


@pytest.fixture()
def research(monkeypatch):
    replies = []

    def fake(message, history=None):
        return replies.pop(0)

    monkeypatch.setattr(onboarding, "company_research", fake)
    return replies


FOUND = {"response": "Found Acme.", "profileUpdates": {"company_name": "Acme AB", "industry": "Fashion"}}
NOTHING = {"response": "Could you spell that?", "profileUpdates": None}


class TestOnboardingFlow:
    def test_start_greets(self, client, business):
        body = client.get("/api/business/onboarding", headers=business["headers"]).get_json()
        assert body["session"]["step"] == onboarding.ASK_COMPANY
        assert body["session"]["messages"] == [{"role": "jarla", "content": onboarding.GREETING}]

    def test_start_resumes(self, client, business):
        client.get("/api/business/onboarding", headers=business["headers"])
        body = client.get("/api/business/onboarding", headers=business["headers"]).get_json()
        assert len(body["session"]["messages"]) == 1

    def test_no_updates_stays_on_ask_company(self, client, business, research):
        research.append(NOTHING)
        body = client.post("/api/business/onboarding/message", json={"message": "Acmee"}, headers=business["headers"]).get_json()
        assert body["session"]["step"] == onboarding.ASK_COMPANY
        assert body["session"]["messages"][-1] == {"role": "jarla", "content": "Could you spell that?"}

    def test_message_then_confirm(self, client, business, research):
        research.append(FOUND)
        body = client.post("/api/business/onboarding/message", json={"message": "Acme"}, headers=business["headers"]).get_json()
        assert body["session"]["step"] == onboarding.AWAITING_CONFIRMATION
        assert body["session"]["pending_updates"]["industry"] == "Fashion"

        body = client.post("/api/business/onboarding/confirm", headers=business["headers"]).get_json()
        assert body["changed"] is True
        assert body["session"]["step"] == onboarding.COMPLETE
        bp = BusinessProfile.query.filter_by(user_id=business["id"]).one()
        assert bp.company_name == "Acme AB"
        assert bp.onboarding_complete is True

        again = client.post("/api/business/onboarding/confirm", headers=business["headers"])
        assert again.status_code == 200
        assert again.get_json()["changed"] is False

    def test_confirm_without_pending_is_conflict(self, client, business):
        assert client.post("/api/business/onboarding/confirm", headers=business["headers"]).status_code == 409

    def test_completed_session_rejects_messages_and_reset(self, client, business, research):
        research.append(FOUND)
        client.post("/api/business/onboarding/message", json={"message": "Acme"}, headers=business["headers"])
        client.post("/api/business/onboarding/confirm", headers=business["headers"])
        assert client.post("/api/business/onboarding/message", json={"message": "x"}, headers=business["headers"]).status_code == 409
        assert client.post("/api/business/onboarding/reset", headers=business["headers"]).status_code == 409

    def test_reset(self, client, business, research):
        research.append(FOUND)
        client.post("/api/business/onboarding/message", json={"message": "Acme"}, headers=business["headers"])
        body = client.post("/api/business/onboarding/reset", headers=business["headers"]).get_json()
        assert body["session"]["step"] == onboarding.ASK_COMPANY
        assert body["session"]["pending_updates"] is None

    def test_empty_message(self, client, business):
        assert client.post("/api/business/onboarding/message", json={"message": " "}, headers=business["headers"]).status_code == 400

    def test_already_onboarded_profile_skips(self, client, business):
        client.post(
            "/api/assistant/company-research",
            json={"action": "save", "profileUpdates": {"industry": "Food"}},
            headers=business["headers"],
        )
        body = client.get("/api/business/onboarding", headers=business["headers"]).get_json()
        assert body["session"]["step"] == onboarding.COMPLETE
        assert body["session"]["messages"] == []

    def test_creators_are_refused(self, client, creator):
        assert client.get("/api/business/onboarding", headers=creator["headers"]).status_code == 403


def test_research_history_is_passed(app, business, monkeypatch):
    seen = {}

    def fake(message, history=None):
        seen["history"] = history
        return NOTHING

    monkeypatch.setattr(onboarding, "company_research", fake)
    session = onboarding.start(business["id"])
    onboarding.send_message(session, "Acme")
    assert seen["history"] == [{"role": "jarla", "content": onboarding.GREETING}]
