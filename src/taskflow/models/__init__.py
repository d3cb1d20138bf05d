"""Model exports.

Import from here: `from src.taskflow.models import User, Organization`
"""

# Enums
from src.taskflow.models.enums import OrgRole, SubscriptionStatus, SubscriptionTier

# Table models
from src.taskflow.models.auth import RefreshToken
from src.taskflow.models.organization import Organization
from src.taskflow.models.project import Project
from src.taskflow.models.user import OrganizationMember, User

__all__ = [
    # Enums
    "OrgRole",
    "SubscriptionStatus",
    "SubscriptionTier",
    # Table models
    "Organization",
    "OrganizationMember",
    "Project",
    "RefreshToken",
    "User",
]
