from __future__ import annotations

from jarla.extensions import db
from jarla.models import AuditLog


def write_audit(actor_user_id: int | None, action: str, target_type: str, target_id: int, details: dict | None = None) -> AuditLog:
    """Stage an audit row; the caller's commit persists it."""
    row = AuditLog(
        actor_user_id=int(actor_user_id) if actor_user_id is not None else None,
        action=action[:64],
        target_type=target_type,
        target_id=int(target_id),
        details=details or None,
    )
    db.session.add(row)
    return row
