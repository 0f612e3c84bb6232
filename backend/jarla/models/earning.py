from datetime import datetime

from jarla.extensions import db


class Earning(db.Model):
    """What one approved submission has earned so far."""

    __tablename__ = "earnings"

    id = db.Column(db.Integer, primary_key=True)
    creator_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    submission_id = db.Column(db.Integer, db.ForeignKey("content_submissions.id"), nullable=False, unique=True)

    amount = db.Column(db.Float, nullable=False, default=0.0)
    views_counted = db.Column(db.Integer, nullable=False, default=0)

    is_paid = db.Column(db.Boolean, nullable=False, default=False)
    paid_at = db.Column(db.DateTime, nullable=True)

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    submission = db.relationship("ContentSubmission", lazy="joined")

    def to_dict(self):
        return {
            "id": int(self.id),
            "submission_id": int(self.submission_id),
            "campaign_title": self.submission.campaign.title if self.submission and self.submission.campaign else "",
            "amount": round(float(self.amount or 0.0), 2),
            "views_counted": int(self.views_counted or 0),
            "is_paid": bool(self.is_paid),
            "paid_at": self.paid_at.isoformat() if self.paid_at else None,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
