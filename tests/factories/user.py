"""User and membership factories for test data generation."""

from uuid import uuid4

from polyfactory import Use

from src.taskflow.core.security import hash_password
from src.taskflow.models import OrganizationMember, OrgRole, User
from tests.factories.base import BaseFactory, short_id, utc_now

# Default test password - strong enough for the registration strength check
DEFAULT_TEST_PASSWORD = "correct-horse-battery-staple"


class UserFactory(BaseFactory):
    """Factory for generating User test data."""

    __model__ = User

    id = Use(uuid4)
    email = Use(lambda: f"user_{short_id()}@example.com")
    name = "Test User"
    image = None
    hashed_password = Use(lambda: hash_password(DEFAULT_TEST_PASSWORD))
    created_at = Use(utc_now)
    updated_at = Use(utc_now)

    @classmethod
    def without_password(cls, **kwargs):
        """A user created through an external identity provider."""
        return cls.build(hashed_password=None, **kwargs)


class OrganizationMemberFactory(BaseFactory):
    """Factory for generating OrganizationMember test data."""

    __model__ = OrganizationMember

    id = Use(uuid4)
    organization_id = None  # Required FK - must be set explicitly
    user_id = None  # Required FK - must be set explicitly
    role = OrgRole.MEMBER.value
    created_at = Use(utc_now)
    updated_at = Use(utc_now)
