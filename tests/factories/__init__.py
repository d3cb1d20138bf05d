"""Test factories for generating test data.

Re-exports all factories for convenient imports:
    from tests.factories import UserFactory, OrganizationFactory, ...
"""

from tests.factories.auth import RefreshTokenFactory, generate_token_hash
from tests.factories.base import BaseFactory, short_id, utc_now
from tests.factories.organization import OrganizationFactory, ProjectFactory
from tests.factories.user import (
    DEFAULT_TEST_PASSWORD,
    OrganizationMemberFactory,
    UserFactory,
)

__all__ = [
    # Base
    "BaseFactory",
    "short_id",
    "utc_now",
    # Organization
    "OrganizationFactory",
    "ProjectFactory",
    # User
    "DEFAULT_TEST_PASSWORD",
    "OrganizationMemberFactory",
    "UserFactory",
    # Auth
    "RefreshTokenFactory",
    "generate_token_hash",
]
