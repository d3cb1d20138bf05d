"""Tenant resolution - which organization a request acts on, and as whom."""

from dataclasses import dataclass
from uuid import UUID

from src.taskflow.core.exceptions import OrgAccessDenied, OrganizationIdRequired, OrgInactive
from src.taskflow.core.logging import get_logger
from src.taskflow.models import Organization, OrgRole
from src.taskflow.repositories import MembershipRepository, OrganizationRepository

logger = get_logger(__name__)


@dataclass(frozen=True)
class TenantContext:
    """The resolved organization and the caller's role in it."""

    organization: Organization
    role: OrgRole

    @property
    def organization_id(self) -> UUID:
        return self.organization.id


class TenantResolver:
    def __init__(
        self,
        organization_repo: OrganizationRepository,
        membership_repo: MembershipRepository,
    ):
        self.organization_repo = organization_repo
        self.membership_repo = membership_repo

    async def resolve(self, user_id: UUID, organization_id: UUID | str | None) -> TenantContext:
        """Resolve the caller's membership in ``organization_id``.

        An unknown or malformed id is reported exactly like an organization
        the caller does not belong to.

        Raises:
            OrganizationIdRequired: No organization id was supplied
            OrgAccessDenied: The caller is not a member
            OrgInactive: The organization's subscription is not ACTIVE
        """
        if organization_id is None or organization_id == "":
            raise OrganizationIdRequired()

        if isinstance(organization_id, str):
            try:
                organization_id = UUID(organization_id)
            except ValueError as e:
                raise OrgAccessDenied() from e

        membership = await self.membership_repo.get_membership(user_id, organization_id)
        if membership is None:
            logger.info(
                "Organization access denied",
                user_id=str(user_id),
                organization_id=str(organization_id),
            )
            raise OrgAccessDenied()

        organization = await self.organization_repo.get_by_id(organization_id)
        if organization is None:
            raise OrgAccessDenied()
        if not organization.is_active:
            raise OrgInactive()

        return TenantContext(organization=organization, role=membership.role_enum)
