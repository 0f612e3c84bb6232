from datetime import datetime

from jarla.extensions import db

APPLICATION_STATUSES = ("pending", "accepted", "rejected")


class Deal(db.Model):
    """A direct collaboration request with a flat rate per 1000 views."""

    __tablename__ = "deals"

    id = db.Column(db.Integer, primary_key=True)
    business_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)

    brand_name = db.Column(db.String(160), nullable=False)
    brand_logo_url = db.Column(db.String(512), nullable=True)

    title = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=True)
    guidelines = db.Column(db.JSON, nullable=True)
    category = db.Column(db.String(120), nullable=True)
    cover_image_url = db.Column(db.String(512), nullable=True)

    # SEK per 1000 views
    rate_per_view = db.Column(db.Float, nullable=False, default=0.0)
    # per-creator payout cap
    max_earnings = db.Column(db.Float, nullable=False, default=0.0)
    total_budget = db.Column(db.Float, nullable=True)

    status = db.Column(db.String(24), nullable=False, default="active")
    is_active = db.Column(db.Boolean, nullable=False, default=True, index=True)

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, index=True)
    updated_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    applications = db.relationship(
        "DealApplication",
        backref="deal",
        cascade="all, delete-orphan",
        order_by="DealApplication.created_at.desc()",
        lazy="select",
    )

    def to_dict(self):
        return {
            "id": int(self.id),
            "type": "deal",
            "business_id": int(self.business_id),
            "brand": self.brand_name,
            "logo": self.brand_logo_url or "",
            "title": self.title,
            "description": self.description or "",
            "guidelines": list(self.guidelines or []),
            "content_type": self.category or "",
            "image": self.cover_image_url or "",
            "rate_per_view": float(self.rate_per_view or 0.0),
            "max_earnings": float(self.max_earnings or 0.0),
            "status": self.status or "active",
            "is_active": bool(self.is_active),
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


class DealApplication(db.Model):
    __tablename__ = "deal_applications"

    id = db.Column(db.Integer, primary_key=True)
    deal_id = db.Column(db.Integer, db.ForeignKey("deals.id"), nullable=False, index=True)
    creator_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)

    status = db.Column(db.String(24), nullable=False, default="pending")
    message = db.Column(db.Text, nullable=True)

    tiktok_video_url = db.Column(db.String(512), nullable=True)
    tiktok_video_id = db.Column(db.String(64), nullable=True)
    current_views = db.Column(db.Integer, nullable=False, default=0)
    stats_refreshed_at = db.Column(db.DateTime, nullable=True)

    reviewed_at = db.Column(db.DateTime, nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    __table_args__ = (
        db.UniqueConstraint("deal_id", "creator_id", name="uq_deal_applications_deal_creator"),
    )

    def to_dict(self, earned: float | None = None):
        out = {
            "id": int(self.id),
            "deal_id": int(self.deal_id),
            "creator_id": int(self.creator_id),
            "status": self.status,
            "message": self.message or "",
            "tiktok_video_url": self.tiktok_video_url or "",
            "tiktok_video_id": self.tiktok_video_id or "",
            "current_views": int(self.current_views or 0),
            "reviewed_at": self.reviewed_at.isoformat() if self.reviewed_at else None,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
        if earned is not None:
            out["earned"] = earned
        return out
