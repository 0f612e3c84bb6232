from datetime import datetime

from jarla.extensions import db


class TikTokAccount(db.Model):
    __tablename__ = "tiktok_accounts"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)

    tiktok_user_id = db.Column(db.String(64), nullable=False)
    tiktok_username = db.Column(db.String(64), nullable=False)
    follower_count = db.Column(db.Integer, nullable=False, default=0)
    is_active = db.Column(db.Boolean, nullable=False, default=True)

    # Never serialized.
    access_token = db.Column(db.Text, nullable=True)
    refresh_token = db.Column(db.Text, nullable=True)
    token_expires_at = db.Column(db.DateTime, nullable=True)

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    __table_args__ = (
        db.UniqueConstraint("user_id", "tiktok_user_id", name="uq_tiktok_accounts_user_tiktok"),
    )

    def to_dict(self):
        return {
            "id": int(self.id),
            "user_id": int(self.user_id),
            "tiktok_user_id": self.tiktok_user_id,
            "tiktok_username": self.tiktok_username,
            "follower_count": int(self.follower_count or 0),
            "is_active": bool(self.is_active),
            "token_expires_at": self.token_expires_at.isoformat() if self.token_expires_at else None,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
