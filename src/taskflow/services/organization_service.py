"""Organization and membership management."""

from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.taskflow.core.exceptions import (
    DomainAlreadyExists,
    LastOwner,
    MemberAlreadyExists,
    MemberNotFound,
    OrganizationLimitReached,
    PermissionDenied,
    SlugAlreadyExists,
    UserNotFound,
)
from src.taskflow.core.logging import get_logger
from src.taskflow.models import Organization, OrganizationMember, OrgRole, User
from src.taskflow.models.base import utc_now
from src.taskflow.repositories import (
    MembershipRepository,
    OrganizationRepository,
    UserRepository,
)
from src.taskflow.schemas import (
    MemberAdd,
    MemberRead,
    MembershipRead,
    OrganizationCreate,
    OrganizationUpdate,
    PaginatedResponse,
)
from src.taskflow.services.auth_service import to_membership_read

logger = get_logger(__name__)


def to_member_read(membership: OrganizationMember, user: User) -> MemberRead:
    return MemberRead(
        user_id=user.id,
        email=user.email,
        name=user.name,
        image=user.image,
        role=membership.role_enum,
        joined_at=membership.created_at,
    )


class OrganizationService:
    """Organization lifecycle and membership rules.

    Permission checks happen in the API layer before these methods run;
    the service enforces the rules that depend on data: plan limits, owner
    protection and uniqueness.
    """

    def __init__(
        self,
        organization_repo: OrganizationRepository,
        membership_repo: MembershipRepository,
        user_repo: UserRepository,
        session: AsyncSession,
    ):
        self.organization_repo = organization_repo
        self.membership_repo = membership_repo
        self.user_repo = user_repo
        self.session = session

    async def create_organization(self, user_id: UUID, data: OrganizationCreate) -> Organization:
        """Create an organization with the caller as its first OWNER.

        Raises:
            SlugAlreadyExists: If the slug is taken
        """
        try:
            if await self.organization_repo.exists_by_slug(data.slug):
                raise SlugAlreadyExists()

            organization = Organization(name=data.name, slug=data.slug, current_users=1)
            self.organization_repo.add(organization)
            await self.session.flush()

            self.membership_repo.create_membership(user_id, organization.id, OrgRole.OWNER)
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            raise SlugAlreadyExists() from e
        except Exception:
            await self.session.rollback()
            raise

        logger.info(
            "Organization created",
            organization_id=str(organization.id),
            user_id=str(user_id),
        )
        return organization

    async def list_my_organizations(
        self, user_id: UUID, cursor: str | None, limit: int
    ) -> PaginatedResponse[MembershipRead]:
        """Newest memberships first."""
        rows, next_cursor, has_more = await self.membership_repo.paginate(
            self.membership_repo.user_organizations_query(user_id),
            cursor=cursor,
            limit=limit,
            cursor_field=OrganizationMember.created_at,
        )
        return PaginatedResponse[MembershipRead](
            items=[to_membership_read(m, o) for m, o in rows],
            next_cursor=next_cursor,
            has_more=has_more,
        )

    async def update_organization(
        self, organization: Organization, data: OrganizationUpdate
    ) -> Organization:
        """Apply a partial update. Only fields present in the request change.

        Raises:
            DomainAlreadyExists: If another organization claims the domain
        """
        updates = data.model_dump(exclude_unset=True)
        if "name" in updates and updates["name"] is None:
            del updates["name"]
        try:
            for field, value in updates.items():
                setattr(organization, field, value)
            organization.updated_at = utc_now()
            self.session.add(organization)
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            raise DomainAlreadyExists() from e
        except Exception:
            await self.session.rollback()
            raise
        return organization

    async def delete_organization(self, organization: Organization) -> None:
        """Delete the organization; memberships and projects cascade."""
        organization_id = organization.id
        try:
            await self.organization_repo.delete(organization)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        logger.info("Organization deleted", organization_id=str(organization_id))

    async def list_members(self, organization_id: UUID) -> list[MemberRead]:
        rows = await self.membership_repo.list_members(organization_id)
        return [to_member_read(m, u) for m, u in rows]

    async def _get_member(self, organization_id: UUID, user_id: UUID) -> OrganizationMember:
        membership = await self.membership_repo.get_membership(user_id, organization_id)
        if membership is None:
            raise MemberNotFound()
        return membership

    async def _ensure_not_last_owner(self, membership: OrganizationMember) -> None:
        if membership.role_enum is not OrgRole.OWNER:
            return
        if await self.membership_repo.count_owners(membership.organization_id) <= 1:
            raise LastOwner()

    async def add_member(
        self, organization: Organization, actor_role: OrgRole, data: MemberAdd
    ) -> MemberRead:
        """Add an existing user to the organization.

        Raises:
            PermissionDenied: A non-owner tried to grant OWNER
            UserNotFound: No user has that email
            MemberAlreadyExists: The user is already a member
            OrganizationLimitReached: ``max_users`` reached
        """
        if data.role is OrgRole.OWNER and actor_role is not OrgRole.OWNER:
            raise PermissionDenied("Only owners can grant the OWNER role")

        try:
            user = await self.user_repo.get_by_email(data.email)
            if user is None:
                raise UserNotFound()
            if await self.membership_repo.get_membership(user.id, organization.id) is not None:
                raise MemberAlreadyExists()
            if not await self.organization_repo.reserve_user_slot(organization.id):
                raise OrganizationLimitReached(
                    f"Organization has reached its limit of {organization.max_users} members"
                )

            membership = self.membership_repo.create_membership(
                user.id, organization.id, data.role
            )
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            raise MemberAlreadyExists() from e
        except Exception:
            await self.session.rollback()
            raise

        logger.info(
            "Member added",
            organization_id=str(organization.id),
            member_user_id=str(user.id),
            role=data.role.value,
        )
        return to_member_read(membership, user)

    async def update_member_role(
        self,
        organization: Organization,
        actor_role: OrgRole,
        user_id: UUID,
        role: OrgRole,
    ) -> MemberRead:
        """Change a member's role.

        Only an OWNER may grant or revoke OWNER, and the last OWNER cannot be
        demoted.
        """
        try:
            membership = await self._get_member(organization.id, user_id)
            touches_owner = membership.role_enum is OrgRole.OWNER or role is OrgRole.OWNER
            if touches_owner and actor_role is not OrgRole.OWNER:
                raise PermissionDenied("Only owners can grant or revoke the OWNER role")
            if role is not OrgRole.OWNER:
                await self._ensure_not_last_owner(membership)

            membership.role = role.value
            membership.updated_at = utc_now()
            self.session.add(membership)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        user = await self.user_repo.get_by_id(user_id)
        if user is None:
            raise MemberNotFound()
        return to_member_read(membership, user)

    async def remove_member(
        self, organization: Organization, actor_role: OrgRole, user_id: UUID
    ) -> None:
        """Remove a member and free their seat. Owners follow the same rules as role changes."""
        try:
            membership = await self._get_member(organization.id, user_id)
            if membership.role_enum is OrgRole.OWNER and actor_role is not OrgRole.OWNER:
                raise PermissionDenied("Only owners can remove an owner")
            await self._ensure_not_last_owner(membership)

            await self.membership_repo.delete(membership)
            await self.organization_repo.release_user_slot(organization.id)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info(
            "Member removed",
            organization_id=str(organization.id),
            member_user_id=str(user_id),
        )
