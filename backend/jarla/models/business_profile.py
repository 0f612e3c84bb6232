from datetime import datetime

from jarla.extensions import db

# Fields a business (or the onboarding assistant) may write.
EDITABLE_FIELDS = (
    "company_name",
    "description",
    "website",
    "industry",
    "target_audience",
    "brand_values",
    "logo_url",
    "organization_number",
    "vat_number",
    "phone_number",
    "address",
    "postal_code",
    "city",
    "country",
)


class BusinessProfile(db.Model):
    __tablename__ = "business_profiles"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, unique=True, index=True)

    company_name = db.Column(db.String(160), nullable=False, default="")
    description = db.Column(db.Text, nullable=True)
    website = db.Column(db.String(255), nullable=True)
    industry = db.Column(db.String(120), nullable=True)
    target_audience = db.Column(db.String(255), nullable=True)
    brand_values = db.Column(db.String(255), nullable=True)
    logo_url = db.Column(db.String(512), nullable=True)

    organization_number = db.Column(db.String(32), nullable=True)
    vat_number = db.Column(db.String(32), nullable=True)
    phone_number = db.Column(db.String(32), nullable=True)
    address = db.Column(db.String(255), nullable=True)
    postal_code = db.Column(db.String(16), nullable=True)
    city = db.Column(db.String(80), nullable=True)
    country = db.Column(db.String(80), nullable=True)

    onboarding_complete = db.Column(db.Boolean, nullable=False, default=False)

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    def apply_updates(self, updates: dict) -> list:
        """Copy non-empty editable fields from `updates`; returns the changed field names."""
        changed = []
        for field in EDITABLE_FIELDS:
            value = updates.get(field)
            if value is None:
                continue
            value = str(value).strip()
            if not value and field == "company_name":
                continue
            setattr(self, field, value or None)
            changed.append(field)
        if changed:
            self.updated_at = datetime.utcnow()
        return changed

    def context(self) -> dict:
        """The slice of the profile the AI assistant is told about."""
        return {
            "company_name": self.company_name or "",
            "website": self.website or "",
            "description": self.description or "",
            "industry": self.industry or "",
            "target_audience": self.target_audience or "",
            "brand_values": self.brand_values or "",
        }

    def to_dict(self):
        out = {field: (getattr(self, field) or "") for field in EDITABLE_FIELDS}
        out.update({
            "user_id": int(self.user_id),
            "onboarding_complete": bool(self.onboarding_complete),
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        })
        return out
