from datetime import datetime

from jarla.extensions import db


class OnboardingSession(db.Model):
    __tablename__ = "onboarding_sessions"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, unique=True, index=True)

    # ask_company / awaiting_confirmation / complete
    step = db.Column(db.String(32), nullable=False, default="ask_company")
    messages = db.Column(db.JSON, nullable=False, default=list)
    pending_updates = db.Column(db.JSON, nullable=True)

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    def to_dict(self):
        return {
            "step": self.step,
            "messages": list(self.messages or []),
            "pending_updates": self.pending_updates or None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
