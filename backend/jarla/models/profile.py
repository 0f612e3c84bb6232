from datetime import datetime

from jarla.extensions import db


class Profile(db.Model):
    """Creator-facing public profile."""

    __tablename__ = "profiles"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, unique=True, index=True)

    username = db.Column(db.String(30), nullable=True, unique=True, index=True)
    username_changed_at = db.Column(db.DateTime, nullable=True)

    full_name = db.Column(db.String(120), nullable=True)
    bio = db.Column(db.Text, nullable=True)
    avatar_url = db.Column(db.String(512), nullable=True)
    phone_number = db.Column(db.String(32), nullable=True)

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    def to_dict(self):
        return {
            "user_id": int(self.user_id),
            "username": self.username or "",
            "username_changed_at": self.username_changed_at.isoformat() if self.username_changed_at else None,
            "full_name": self.full_name or "",
            "bio": self.bio or "",
            "avatar_url": self.avatar_url or "",
            "phone_number": self.phone_number or "",
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
