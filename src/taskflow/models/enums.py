"""Shared enums for models."""

from enum import Enum


class OrgRole(str, Enum):
    """User role within an organization."""

    OWNER = "OWNER"
    ADMIN = "ADMIN"
    MEMBER = "MEMBER"
    GUEST = "GUEST"


class SubscriptionTier(str, Enum):
    """Billing plan of an organization."""

    FREE = "FREE"
    STARTER = "STARTER"
    BUSINESS = "BUSINESS"
    ENTERPRISE = "ENTERPRISE"


class SubscriptionStatus(str, Enum):
    """Billing state of an organization. Only ACTIVE grants access."""

    ACTIVE = "ACTIVE"
    PAST_DUE = "PAST_DUE"
    CANCELED = "CANCELED"
    TRIALING = "TRIALING"
