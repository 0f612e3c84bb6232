from datetime import datetime

from jarla.extensions import db

SUBMISSION_STATUSES = ("pending_review", "approved", "denied", "paid")


class ContentSubmission(db.Model):
    __tablename__ = "content_submissions"

    id = db.Column(db.Integer, primary_key=True)
    campaign_id = db.Column(db.Integer, db.ForeignKey("campaigns.id"), nullable=False, index=True)
    creator_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    tiktok_account_id = db.Column(db.Integer, db.ForeignKey("tiktok_accounts.id"), nullable=False)

    tiktok_video_url = db.Column(db.String(512), nullable=False)
    tiktok_video_id = db.Column(db.String(64), nullable=True)

    current_views = db.Column(db.Integer, nullable=False, default=0)
    current_likes = db.Column(db.Integer, nullable=False, default=0)
    stats_refreshed_at = db.Column(db.DateTime, nullable=True)

    status = db.Column(db.String(24), nullable=False, default="pending_review", index=True)
    review_notes = db.Column(db.Text, nullable=True)
    reviewed_at = db.Column(db.DateTime, nullable=True)
    reviewed_by = db.Column(db.Integer, nullable=True)

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    campaign = db.relationship("Campaign", lazy="joined")

    __table_args__ = (
        db.UniqueConstraint("campaign_id", "tiktok_video_url", name="uq_content_submissions_campaign_url"),
    )

    def to_dict(self):
        return {
            "id": int(self.id),
            "campaign_id": int(self.campaign_id),
            "campaign_title": self.campaign.title if self.campaign else "",
            "creator_id": int(self.creator_id),
            "tiktok_account_id": int(self.tiktok_account_id),
            "tiktok_video_url": self.tiktok_video_url,
            "tiktok_video_id": self.tiktok_video_id or "",
            "current_views": int(self.current_views or 0),
            "current_likes": int(self.current_likes or 0),
            "status": self.status,
            "review_notes": self.review_notes or "",
            "reviewed_at": self.reviewed_at.isoformat() if self.reviewed_at else None,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
