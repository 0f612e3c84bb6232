from __future__ import annotations

from flask import Blueprint, jsonify, request
from flask_login import current_user, login_required

from jarla.auth import role_required
from jarla.utils import onboarding

onboarding_bp = Blueprint("onboarding_bp", __name__, url_prefix="/api/business/onboarding")


@onboarding_bp.get("")
@login_required
@role_required("business")
def get_session():
    session = onboarding.start(int(current_user.id))
    return jsonify({"ok": True, "session": session.to_dict()}), 200


@onboarding_bp.post("/message")
@login_required
@role_required("business")
def post_message():
    data = request.get_json(silent=True) or {}
    session = onboarding.start(int(current_user.id))
    try:
        reply = onboarding.send_message(session, str(data.get("message") or ""))
    except onboarding.OnboardingStateError as e:
        return jsonify({"message": str(e)}), 409
    except ValueError as e:
        return jsonify({"message": str(e)}), 400
    return jsonify({"ok": True, "reply": reply, "session": session.to_dict()}), 200


@onboarding_bp.post("/confirm")
@login_required
@role_required("business")
def confirm():
    session = onboarding.start(int(current_user.id))
    try:
        changed = onboarding.confirm(session)
    except onboarding.OnboardingStateError as e:
        return jsonify({"message": str(e)}), 409
    return jsonify({"ok": True, "changed": changed, "session": session.to_dict()}), 200


@onboarding_bp.post("/reset")
@login_required
@role_required("business")
def reset():
    session = onboarding.start(int(current_user.id))
    try:
        onboarding.reset(session)
    except onboarding.OnboardingStateError as e:
        return jsonify({"message": str(e)}), 409
    return jsonify({"ok": True, "session": session.to_dict()}), 200
