from datetime import datetime

from jarla.extensions import db


class Campaign(db.Model):
    """A pay-per-view brief ("Spread") creators can join."""

    __tablename__ = "campaigns"

    id = db.Column(db.Integer, primary_key=True)
    business_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)

    brand_name = db.Column(db.String(160), nullable=False)
    brand_logo_url = db.Column(db.String(512), nullable=True)

    title = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=True)
    category = db.Column(db.String(120), nullable=True)
    product_visibility = db.Column(db.String(120), nullable=True)
    video_length = db.Column(db.String(64), nullable=True)

    cover_image_url = db.Column(db.String(512), nullable=True)
    example_image_urls = db.Column(db.JSON, nullable=True)
    assets_urls = db.Column(db.JSON, nullable=True)
    guidelines = db.Column(db.JSON, nullable=True)

    total_budget = db.Column(db.Float, nullable=True)
    max_earnings = db.Column(db.Float, nullable=True)
    deadline = db.Column(db.DateTime, nullable=True)

    status = db.Column(db.String(24), nullable=False, default="active")  # draft/active/ended
    is_active = db.Column(db.Boolean, nullable=False, default=True, index=True)

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, index=True)
    updated_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    tiers = db.relationship(
        "CampaignTier",
        backref="campaign",
        cascade="all, delete-orphan",
        order_by="CampaignTier.min_views",
        lazy="selectin",
    )

    def to_dict(self):
        return {
            "id": int(self.id),
            "business_id": int(self.business_id),
            "brand": self.brand_name,
            "logo": self.brand_logo_url or "",
            "title": self.title,
            "description": self.description or "",
            "content_type": self.category or "",
            "product_visibility": self.product_visibility or "",
            "video_length": self.video_length or "",
            "image": self.cover_image_url or "",
            "example_images": list(self.example_image_urls or []),
            "assets": list(self.assets_urls or []),
            "guidelines": list(self.guidelines or []),
            "total_budget": float(self.total_budget or 0.0),
            "max_earnings": float(self.max_earnings or 0.0),
            "deadline": self.deadline.isoformat() if self.deadline else None,
            "status": self.status or "active",
            "is_active": bool(self.is_active),
            "tiers": [t.to_dict() for t in self.tiers],
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


class CampaignTier(db.Model):
    __tablename__ = "campaign_tiers"

    id = db.Column(db.Integer, primary_key=True)
    campaign_id = db.Column(db.Integer, db.ForeignKey("campaigns.id"), nullable=False, index=True)

    min_views = db.Column(db.Integer, nullable=False, default=0)
    max_views = db.Column(db.Integer, nullable=True)  # NULL = open-ended

    # SEK per 1000 views
    rate_per_view = db.Column(db.Float, nullable=False, default=0.0)

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    def to_dict(self):
        return {
            "min_views": int(self.min_views or 0),
            "max_views": int(self.max_views) if self.max_views is not None else None,
            "rate": float(self.rate_per_view or 0.0),
        }
