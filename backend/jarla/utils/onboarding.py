"""Business onboarding chat: ask_company -> awaiting_confirmation -> complete."""
from __future__ import annotations

from datetime import datetime

from jarla.extensions import db
from jarla.models import BusinessProfile, OnboardingSession
from jarla.utils.assistant import company_research

ASK_COMPANY = "ask_company"
AWAITING_CONFIRMATION = "awaiting_confirmation"
COMPLETE = "complete"

GREETING = "What's your company name?"
DONE_MESSAGE = "Your profile is all set. Welcome to Jarla!"


class OnboardingStateError(ValueError):
    pass


def _say(session: OnboardingSession, role: str, content: str) -> None:
    # reassign so the JSON column is flagged dirty
    session.messages = list(session.messages or []) + [{"role": role, "content": content}]
    session.updated_at = datetime.utcnow()


def get_or_create_profile(user_id: int) -> BusinessProfile:
    bp = BusinessProfile.query.filter_by(user_id=int(user_id)).first()
    if not bp:
        bp = BusinessProfile(user_id=int(user_id), company_name="")
        db.session.add(bp)
    return bp


def start(user_id: int) -> OnboardingSession:
    """Resume the caller's session, or open one with the greeting."""
    session = OnboardingSession.query.filter_by(user_id=int(user_id)).first()
    if session:
        return session
    session = OnboardingSession(user_id=int(user_id), step=ASK_COMPANY, messages=[])
    bp = BusinessProfile.query.filter_by(user_id=int(user_id)).first()
    if bp and bp.onboarding_complete:
        session.step = COMPLETE
    else:
        _say(session, "jarla", GREETING)
    db.session.add(session)
    db.session.commit()
    return session


def send_message(session: OnboardingSession, text: str) -> dict:
    if session.step == COMPLETE:
        raise OnboardingStateError("onboarding already complete")
    text = (text or "").strip()
    if not text:
        raise ValueError("message required")

    history = list(session.messages or [])
    _say(session, "user", text)
    reply = company_research(text, history)
    _say(session, "jarla", reply["response"])

    if reply.get("profileUpdates"):
        session.pending_updates = reply["profileUpdates"]
        session.step = AWAITING_CONFIRMATION
    db.session.add(session)
    db.session.commit()
    return reply


def confirm(session: OnboardingSession) -> bool:
    """Persist the pending profile. Returns False when there was nothing to do."""
    if session.step == COMPLETE:
        return False
    if session.step != AWAITING_CONFIRMATION or not session.pending_updates:
        raise OnboardingStateError("nothing to confirm yet")

    bp = get_or_create_profile(session.user_id)
    bp.apply_updates(session.pending_updates)
    bp.onboarding_complete = True
    bp.updated_at = datetime.utcnow()

    session.step = COMPLETE
    session.pending_updates = None
    _say(session, "jarla", DONE_MESSAGE)
    db.session.add(session)
    db.session.commit()
    return True


def reset(session: OnboardingSession) -> None:
    if session.step == COMPLETE:
        raise OnboardingStateError("onboarding already complete")
    session.step = ASK_COMPANY
    session.pending_updates = None
    session.messages = []
    _say(session, "jarla", GREETING)
    db.session.add(session)
    db.session.commit()
