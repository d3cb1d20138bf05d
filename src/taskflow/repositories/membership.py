"""Repository for OrganizationMember entity."""

from typing import Any
from uuid import UUID

from sqlalchemy import func
from sqlmodel import select

from src.taskflow.models import Organization, OrganizationMember, OrgRole, User
from src.taskflow.repositories.base import BaseRepository


class MembershipRepository(BaseRepository[OrganizationMember]):
    """User-organization memberships."""

    model = OrganizationMember

    async def get_membership(
        self, user_id: UUID, organization_id: UUID
    ) -> OrganizationMember | None:
        """Get membership for a user in an organization."""
        result = await self.session.execute(
            select(OrganizationMember).where(
                OrganizationMember.user_id == user_id,
                OrganizationMember.organization_id == organization_id,
            )
        )
        return result.scalar_one_or_none()

    async def get_first_membership(self, user_id: UUID) -> OrganizationMember | None:
        """Get the user's oldest membership - the default organization for tokens."""
        result = await self.session.execute(
            select(OrganizationMember)
            .where(OrganizationMember.user_id == user_id)
            .order_by(OrganizationMember.created_at.asc(), OrganizationMember.id.asc())  # type: ignore[attr-defined]
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def list_user_organizations(
        self, user_id: UUID
    ) -> list[tuple[OrganizationMember, Organization]]:
        """List (membership, organization) pairs for a user, oldest first."""
        result = await self.session.execute(
            select(OrganizationMember, Organization)
            .join(Organization, Organization.id == OrganizationMember.organization_id)  # type: ignore[arg-type]
            .where(OrganizationMember.user_id == user_id)
            .order_by(OrganizationMember.created_at.asc(), OrganizationMember.id.asc())  # type: ignore[attr-defined]
        )
        return [(row[0], row[1]) for row in result.all()]

    def user_organizations_query(self, user_id: UUID) -> Any:
        """Query of (membership, organization) rows for cursor pagination."""
        return (
            select(OrganizationMember, Organization)
            .join(Organization, Organization.id == OrganizationMember.organization_id)  # type: ignore[arg-type]
            .where(OrganizationMember.user_id == user_id)
        )

    async def list_members(
        self, organization_id: UUID
    ) -> list[tuple[OrganizationMember, User]]:
        """List (membership, user) pairs of an organization, oldest first."""
        result = await self.session.execute(
            select(OrganizationMember, User)
            .join(User, User.id == OrganizationMember.user_id)  # type: ignore[arg-type]
            .where(OrganizationMember.organization_id == organization_id)
            .order_by(OrganizationMember.created_at.asc())  # type: ignore[attr-defined]
        )
        return [(row[0], row[1]) for row in result.all()]

    async def count_owners(self, organization_id: UUID) -> int:
        result = await self.session.execute(
            select(func.count())
            .select_from(OrganizationMember)
            .where(
                OrganizationMember.organization_id == organization_id,
                OrganizationMember.role == OrgRole.OWNER.value,
            )
        )
        return int(result.scalar_one())

    def create_membership(
        self,
        user_id: UUID,
        organization_id: UUID,
        role: OrgRole = OrgRole.MEMBER,
    ) -> OrganizationMember:
        """Create a new membership (add to session, no commit)."""
        membership = OrganizationMember(
            user_id=user_id,
            organization_id=organization_id,
            role=role.value,
        )
        self.session.add(membership)
        return membership
