from .user import User  # noqa: F401
from .profile import Profile  # noqa: F401
from .business_profile import BusinessProfile  # noqa: F401
from .tiktok_account import TikTokAccount  # noqa: F401
from .campaign import Campaign, CampaignTier  # noqa: F401
from .submission import ContentSubmission, SUBMISSION_STATUSES  # noqa: F401
from .earning import Earning  # noqa: F401
from .favorite import Favorite  # noqa: F401
from .deal import Deal, DealApplication  # noqa: F401
from .withdrawal import Withdrawal  # noqa: F401
from .onboarding_session import OnboardingSession  # noqa: F401
from .audit_log import AuditLog  # noqa: F401
