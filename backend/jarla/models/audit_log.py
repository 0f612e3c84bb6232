from datetime import datetime

from jarla.extensions import db


class AuditLog(db.Model):
    """Who decided what on a submission, deal application or withdrawal."""

    __tablename__ = "audit_logs"

    id = db.Column(db.Integer, primary_key=True)
    actor_user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=True)

    action = db.Column(db.String(64), nullable=False)
    target_type = db.Column(db.String(64), nullable=False)
    target_id = db.Column(db.Integer, nullable=False)
    details = db.Column(db.JSON, nullable=True)

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    __table_args__ = (
        db.Index("ix_audit_logs_target", "target_type", "target_id"),
    )

    @classmethod
    def trail(cls, target_type: str, target_id: int):
        return cls.query.filter_by(target_type=target_type, target_id=int(target_id)).order_by(cls.created_at.asc(), cls.id.asc()).all()

    def to_dict(self):
        return {
            "action": self.action,
            "actor_user_id": int(self.actor_user_id) if self.actor_user_id else None,
            "details": dict(self.details or {}),
            "at": self.created_at.isoformat() if self.created_at else None,
        }
