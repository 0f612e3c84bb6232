from __future__ import annotations

from datetime import datetime

from flask import Blueprint, current_app, jsonify, request
from flask_login import current_user, login_required

from jarla.auth import role_required
from jarla.extensions import db
from jarla.models import Withdrawal
from jarla.models.withdrawal import WITHDRAWAL_METHODS
from jarla.utils.audit import write_audit
from jarla.utils.earnings import ANNUAL_WITHDRAWAL_CAP, available_balance, earnings_summary, withdrawn_this_year

earnings_bp = Blueprint("earnings_bp", __name__, url_prefix="/api")

_WITHDRAWAL_OUTCOMES = ("paid", "rejected")


def _balance_payload(user_id: int) -> dict:
    withdrawn = withdrawn_this_year(user_id)
    return {
        "available": available_balance(user_id),
        "currency": "SEK",
        "withdrawn_this_year": withdrawn,
        "annual_cap": ANNUAL_WITHDRAWAL_CAP,
        "remaining_this_year": round(max(0.0, ANNUAL_WITHDRAWAL_CAP - withdrawn), 2),
    }


@earnings_bp.get("/me/earnings")
@login_required
@role_required("creator")
def my_earnings():
    return jsonify(earnings_summary(int(current_user.id))), 200


@earnings_bp.get("/me/balance")
@login_required
@role_required("creator")
def my_balance():
    return jsonify(_balance_payload(int(current_user.id))), 200


@earnings_bp.get("/me/withdrawals")
@login_required
@role_required("creator")
def my_withdrawals():
    rows = Withdrawal.query.filter_by(user_id=int(current_user.id)).order_by(Withdrawal.created_at.desc()).all()
    return jsonify([w.to_dict() for w in rows]), 200


@earnings_bp.post("/me/withdrawals")
@login_required
@role_required("creator")
def request_withdrawal():
    data = request.get_json(silent=True) or {}
    try:
        amount = round(float(data.get("amount") or 0.0), 2)
    except (TypeError, ValueError):
        return jsonify({"message": "amount must be numeric"}), 400
    if amount <= 0:
        return jsonify({"message": "amount must be > 0"}), 400

    method = str(data.get("method") or "").strip().lower()
    if method not in WITHDRAWAL_METHODS:
        return jsonify({"message": f"method must be one of {', '.join(WITHDRAWAL_METHODS)}"}), 400

    uid = int(current_user.id)
    balance = _balance_payload(uid)
    if amount > balance["available"]:
        return jsonify({"message": "Insufficient balance", "available": balance["available"]}), 400
    if amount > balance["remaining_this_year"]:
        return jsonify({
            "message": "Annual withdrawal limit reached",
            "remaining_this_year": balance["remaining_this_year"],
        }), 400

    w = Withdrawal(user_id=uid, amount=amount, currency="SEK", method=method, status="pending")
    try:
        db.session.add(w)
        db.session.flush()
        write_audit(uid, "withdrawal_requested", "withdrawal", w.id, {"amount": amount, "method": method})
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        current_app.logger.error("withdrawal insert failed: %s", e)
        return jsonify({"message": "Failed", "error": str(e)}), 500
    return jsonify({"ok": True, "withdrawal": w.to_dict(), "balance": _balance_payload(uid)}), 201


@earnings_bp.post("/admin/withdrawals/<int:withdrawal_id>/status")
@login_required
@role_required("admin")
def set_withdrawal_status(withdrawal_id: int):
    w = db.session.get(Withdrawal, withdrawal_id)
    if not w:
        return jsonify({"message": "Withdrawal not found"}), 404
    data = request.get_json(silent=True) or {}
    status = str(data.get("status") or "").strip().lower()
    if status not in _WITHDRAWAL_OUTCOMES:
        return jsonify({"message": f"status must be one of {', '.join(_WITHDRAWAL_OUTCOMES)}"}), 400
    if w.status != "pending":
        return jsonify({"message": f"Withdrawal already {w.status}"}), 409

    w.status = status
    w.updated_at = datetime.utcnow()
    write_audit(current_user.id, f"withdrawal_{status}", "withdrawal", w.id, {"amount": w.amount})
    db.session.commit()
    return jsonify({"ok": True, "withdrawal": w.to_dict()}), 200
