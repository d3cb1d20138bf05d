"""Organization and project factories for test data generation."""

from uuid import uuid4

from polyfactory import Use

from src.taskflow.models import Organization, Project, SubscriptionStatus, SubscriptionTier
from src.taskflow.models.organization import (
    DEFAULT_MAX_PROJECTS,
    DEFAULT_MAX_STORAGE_MB,
    DEFAULT_MAX_USERS,
)
from src.taskflow.models.project import DEFAULT_PROJECT_COLOR
from tests.factories.base import BaseFactory, short_id, utc_now


class OrganizationFactory(BaseFactory):
    """Factory for generating Organization test data."""

    __model__ = Organization

    id = Use(uuid4)
    name = Use(lambda: f"Test Org {short_id()}")
    slug = Use(lambda: f"test-org-{short_id()}")
    domain = None
    subscription_tier = SubscriptionTier.FREE.value
    subscription_status = SubscriptionStatus.ACTIVE.value
    max_users = DEFAULT_MAX_USERS
    max_projects = DEFAULT_MAX_PROJECTS
    max_storage = DEFAULT_MAX_STORAGE_MB
    current_users = 0
    current_projects = 0
    current_storage = 0
    created_at = Use(utc_now)
    updated_at = Use(utc_now)

    @classmethod
    def past_due(cls, **kwargs):
        """An organization whose subscription lapsed."""
        return cls.build(subscription_status=SubscriptionStatus.PAST_DUE.value, **kwargs)


class ProjectFactory(BaseFactory):
    """Factory for generating Project test data."""

    __model__ = Project

    id = Use(uuid4)
    organization_id = None  # Required FK - must be set explicitly
    name = Use(lambda: f"Project {short_id()}")
    key = Use(lambda: f"P{short_id()[:5].upper()}")
    description = None
    color = DEFAULT_PROJECT_COLOR
    is_archived = False
    created_at = Use(utc_now)
    updated_at = Use(utc_now)
