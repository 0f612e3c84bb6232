from __future__ import annotations

from flask import Blueprint, current_app, jsonify, request
from flask_login import current_user

from jarla.extensions import db
from jarla.models import BusinessProfile
from jarla.utils import assistant

assistant_bp = Blueprint("assistant_bp", __name__, url_prefix="/api/assistant")

# What the research assistant is allowed to write on save.
RESEARCH_SAVE_FIELDS = (
    "company_name",
    "description",
    "website",
    "industry",
    "target_audience",
    "brand_values",
    "logo_url",
)


def _caller_business() -> BusinessProfile | None:
    if not current_user.is_authenticated:
        return None
    return BusinessProfile.query.filter_by(user_id=int(current_user.id)).first()


@assistant_bp.post("/campaign-chat")
def campaign_chat():
    data = request.get_json(silent=True) or {}
    message = str(data.get("message") or "").strip()
    if not message:
        return jsonify({"message": "message required"}), 400

    bp = _caller_business()
    business = bp.context() if bp else data.get("businessContext")
    if not isinstance(business, dict):
        business = None
    form = data.get("currentFormData")
    reply = assistant.campaign_chat(
        message,
        history=data.get("conversationHistory"),
        business=business,
        company_name=str(data.get("companyName") or "").strip(),
        form=form if isinstance(form, dict) else None,
    )
    return jsonify(reply), 200


@assistant_bp.post("/company-research")
def company_research():
    data = request.get_json(silent=True) or {}

    if data.get("action") == "save":
        updates = data.get("profileUpdates")
        if not isinstance(updates, dict) or not updates:
            return jsonify({"message": "profileUpdates required"}), 400
        if not current_user.is_authenticated:
            return jsonify({"message": "Unauthorized"}), 401
        bp = _caller_business()
        if not bp:
            return jsonify({"message": "Business profile not found"}), 404

        bp.apply_updates({k: updates.get(k) for k in RESEARCH_SAVE_FIELDS if updates.get(k)})
        bp.onboarding_complete = True
        try:
            db.session.commit()
        except Exception as e:
            db.session.rollback()
            current_app.logger.error("profile save failed: %s", e)
            return jsonify({"message": "Failed to save profile"}), 500
        return jsonify({"response": "Profile saved successfully!", "saved": True}), 200

    message = str(data.get("message") or "").strip()
    if not message:
        return jsonify({"message": "message required"}), 400
    return jsonify(assistant.company_research(message, data.get("conversationHistory"))), 200


@assistant_bp.post("/analyze-website")
def analyze_website():
    data = request.get_json(silent=True) or {}
    payload, status = assistant.analyze_website(str(data.get("url") or ""))
    return jsonify(payload), status


@assistant_bp.post("/analyze-company")
def analyze_company():
    data = request.get_json(silent=True) or {}
    social = data.get("socialMedia")
    payload, status = assistant.analyze_company(
        website=str(data.get("website") or "").strip(),
        social_media=social if isinstance(social, dict) else None,
        company_name=str(data.get("companyName") or "").strip(),
        language=str(data.get("language") or "en"),
    )
    return jsonify(payload), status
