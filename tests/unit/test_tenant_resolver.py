"""Unit tests for tenant resolution."""

from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from src.taskflow.core.exceptions import OrgAccessDenied, OrganizationIdRequired, OrgInactive
from src.taskflow.models import OrgRole
from src.taskflow.repositories import MembershipRepository, OrganizationRepository
from src.taskflow.services import TenantResolver
from tests.factories import OrganizationFactory, OrganizationMemberFactory

pytestmark = [pytest.mark.unit, pytest.mark.asyncio]


@pytest.fixture
def organization_repo() -> AsyncMock:
    return AsyncMock(spec=OrganizationRepository)


@pytest.fixture
def membership_repo() -> AsyncMock:
    return AsyncMock(spec=MembershipRepository)


@pytest.fixture
def resolver(organization_repo, membership_repo) -> TenantResolver:
    return TenantResolver(organization_repo, membership_repo)


@pytest.mark.parametrize("organization_id", [None, ""])
async def test_missing_organization_id(resolver, membership_repo, organization_id):
    with pytest.raises(OrganizationIdRequired):
        await resolver.resolve(uuid4(), organization_id)

    membership_repo.get_membership.assert_not_awaited()


async def test_malformed_id_looks_like_foreign_organization(resolver, membership_repo):
    with pytest.raises(OrgAccessDenied):
        await resolver.resolve(uuid4(), "not-a-uuid")

    membership_repo.get_membership.assert_not_awaited()


async def test_non_member_is_denied(resolver, membership_repo, organization_repo):
    membership_repo.get_membership.return_value = None

    with pytest.raises(OrgAccessDenied):
        await resolver.resolve(uuid4(), str(uuid4()))

    organization_repo.get_by_id.assert_not_awaited()


async def test_inactive_organization(resolver, membership_repo, organization_repo):
    organization = OrganizationFactory.past_due()
    user_id = uuid4()
    membership_repo.get_membership.return_value = OrganizationMemberFactory.build(
        user_id=user_id, organization_id=organization.id
    )
    organization_repo.get_by_id.return_value = organization

    with pytest.raises(OrgInactive):
        await resolver.resolve(user_id, organization.id)


async def test_resolves_role_from_membership(resolver, membership_repo, organization_repo):
    organization = OrganizationFactory.build()
    user_id = uuid4()
    membership_repo.get_membership.return_value = OrganizationMemberFactory.build(
        user_id=user_id, organization_id=organization.id, role=OrgRole.GUEST.value
    )
    organization_repo.get_by_id.return_value = organization

    context = await resolver.resolve(user_id, str(organization.id))

    assert context.organization_id == organization.id
    assert context.role is OrgRole.GUEST
    membership_repo.get_membership.assert_awaited_once_with(user_id, organization.id)
