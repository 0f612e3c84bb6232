from datetime import datetime

from jarla.extensions import db

WITHDRAWAL_METHODS = ("swish", "bank")


class Withdrawal(db.Model):
    __tablename__ = "withdrawals"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)

    amount = db.Column(db.Float, nullable=False, default=0.0)
    currency = db.Column(db.String(8), nullable=False, default="SEK")
    method = db.Column(db.String(16), nullable=False, default="swish")
    status = db.Column(db.String(24), nullable=False, default="pending")  # pending/paid/rejected

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    def to_dict(self):
        return {
            "id": int(self.id),
            "user_id": int(self.user_id),
            "amount": float(self.amount or 0.0),
            "currency": self.currency or "SEK",
            "method": self.method,
            "status": self.status,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
