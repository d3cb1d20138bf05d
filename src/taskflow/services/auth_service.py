"""Session service - register, login, refresh, logout, current user."""

import asyncio
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.taskflow.core.cache import is_refresh_token_revoked, revoke_refresh_token
from src.taskflow.core.config import get_settings
from src.taskflow.core.exceptions import (
    EmailAlreadyExists,
    InvalidCredentials,
    TokenExpired,
    TokenInvalid,
    UserNotFound,
)
from src.taskflow.core.logging import get_logger
from src.taskflow.core.security import (
    DUMMY_PASSWORD_HASH,
    create_access_token,
    create_refresh_token,
    hash_password,
    hash_token,
    verify_password,
    verify_refresh_token,
)
from src.taskflow.models import Organization, OrganizationMember, User
from src.taskflow.models.base import utc_now
from src.taskflow.repositories import (
    MembershipRepository,
    RefreshTokenRepository,
    UserRepository,
    normalize_email,
)
from src.taskflow.schemas import (
    CurrentUserRead,
    LoginResponse,
    MembershipRead,
    MessageResponse,
    OrganizationSummary,
    RefreshResponse,
    RegisterResponse,
    UserRead,
)

logger = get_logger(__name__)


def to_membership_read(
    membership: OrganizationMember, organization: Organization
) -> MembershipRead:
    return MembershipRead(
        organization=OrganizationSummary.model_validate(organization),
        role=membership.role_enum,
        joined_at=membership.created_at,
    )


class AuthService:
    """Authentication service.

    State machine per client: anonymous -> authenticated (login/register)
    -> refreshed any number of times -> logged out. Refresh tokens rotate on
    every successful refresh; the stored row is the source of truth and the
    Redis revoked cache only short-circuits known-bad tokens.
    """

    def __init__(
        self,
        user_repo: UserRepository,
        token_repo: RefreshTokenRepository,
        membership_repo: MembershipRepository,
        session: AsyncSession,
    ):
        self.user_repo = user_repo
        self.token_repo = token_repo
        self.membership_repo = membership_repo
        self.session = session

    async def _store_refresh_token(self, user: User) -> str:
        """Issue and persist a refresh token, pruning the user's oldest rows.

        Flushes but does not commit.
        """
        refresh_token, expires_at = create_refresh_token(user.id, user.email)
        self.token_repo.create(user.id, hash_token(refresh_token), expires_at)
        await self.session.flush()

        cap = get_settings().max_refresh_tokens_per_user
        if cap > 0:
            pruned = await self.token_repo.prune_for_user(user.id, keep=cap)
            if pruned:
                logger.info("Pruned oldest refresh tokens", user_id=str(user.id), pruned=pruned)
        return refresh_token

    async def _revoke_in_cache(self, token_hash: str, ttl: int) -> None:
        # Cache only; the database delete has already been committed
        try:
            await revoke_refresh_token(token_hash, ttl)
        except Exception as e:
            logger.warning("Failed to cache revoked refresh token", error=str(e))

    async def register(self, name: str, email: str, password: str) -> RegisterResponse:
        """Create a user and sign them in.

        The email check is only an early exit; the unique index enforces it
        when two registrations race.

        Raises:
            EmailAlreadyExists: If the email is taken
        """
        email = normalize_email(email)
        try:
            if await self.user_repo.exists_by_email(email):
                raise EmailAlreadyExists()

            hashed_password = await asyncio.to_thread(hash_password, password)
            user = User(email=email, name=name, hashed_password=hashed_password)
            self.user_repo.add(user)
            await self.session.flush()

            access_token = create_access_token(user.id, user.email)
            refresh_token = await self._store_refresh_token(user)
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            raise EmailAlreadyExists() from e
        except Exception:
            await self.session.rollback()
            raise

        logger.info("User registered", user_id=str(user.id))
        return RegisterResponse(
            user=UserRead.model_validate(user),
            access_token=access_token,
            refresh_token=refresh_token,
        )

    async def login(self, email: str, password: str) -> LoginResponse:
        """Verify credentials and issue a token pair.

        Unknown email, missing password hash and wrong password all raise the
        same error. A dummy hash is verified for unknown users so response
        time does not reveal which emails are registered.

        The access token carries the user's oldest membership as the default
        organization.

        Raises:
            InvalidCredentials: On any credential failure
        """
        try:
            user = await self.user_repo.get_by_email(email)
            password_hash = (
                user.hashed_password if user and user.hashed_password else DUMMY_PASSWORD_HASH
            )
            password_valid = await asyncio.to_thread(verify_password, password, password_hash)

            if user is None or user.hashed_password is None or not password_valid:
                logger.info("Login failed", user_known=user is not None)
                raise InvalidCredentials()

            memberships = await self.membership_repo.list_user_organizations(user.id)
            default = memberships[0][0] if memberships else None
            access_token = create_access_token(
                user.id,
                user.email,
                organization_id=default.organization_id if default else None,
                role=default.role if default else None,
            )
            refresh_token = await self._store_refresh_token(user)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info("User logged in", user_id=str(user.id))
        return LoginResponse(
            user=UserRead.model_validate(user),
            access_token=access_token,
            refresh_token=refresh_token,
            organizations=[to_membership_read(m, o) for m, o in memberships],
        )

    async def refresh_access_token(self, refresh_token: str) -> RefreshResponse:
        """Exchange a refresh token for a new access token and a new refresh token.

        The presented token's row is deleted (rotation), so each refresh
        token works exactly once. The organization and role embedded in the
        new access token are re-resolved from current memberships.

        Raises:
            TokenInvalid: Bad signature, wrong type, revoked, or not stored
            TokenExpired: JWT expiry or stored expiry has passed
        """
        claims = verify_refresh_token(refresh_token)
        token_hash = hash_token(refresh_token)

        if await is_refresh_token_revoked(token_hash) is True:
            logger.warning("Revoked refresh token presented", user_id=str(claims.user_id))
            raise TokenInvalid()

        try:
            # FOR UPDATE: two concurrent rotations of one token cannot both succeed
            stored = await self.token_repo.get_by_hash(token_hash, for_update=True)
            if stored is None:
                logger.warning("Unknown refresh token presented", user_id=str(claims.user_id))
                raise TokenInvalid()

            if stored.expires_at <= utc_now():
                await self.token_repo.delete(stored)
                await self.session.commit()
                raise TokenExpired()

            user = await self.user_repo.get_by_id(stored.user_id)
            if user is None:
                raise TokenInvalid()

            remaining = int((stored.expires_at - utc_now()).total_seconds())
            await self.token_repo.delete(stored)

            membership = await self.membership_repo.get_first_membership(user.id)
            access_token = create_access_token(
                user.id,
                user.email,
                organization_id=membership.organization_id if membership else None,
                role=membership.role if membership else None,
            )
            new_refresh_token = await self._store_refresh_token(user)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        await self._revoke_in_cache(token_hash, remaining)
        return RefreshResponse(access_token=access_token, refresh_token=new_refresh_token)

    async def logout(self, refresh_token: str) -> MessageResponse:
        """Delete every stored row for ``refresh_token``.

        Idempotent: an unknown, already-deleted or unparsable token still
        succeeds.
        """
        token_hash = hash_token(refresh_token)
        try:
            stored = await self.token_repo.get_by_hash(token_hash)
            ttl = int((stored.expires_at - utc_now()).total_seconds()) if stored else 0
            deleted = await self.token_repo.delete_by_hash(token_hash)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        if ttl > 0:
            await self._revoke_in_cache(token_hash, ttl)
        logger.info("Refresh token logged out", tokens_deleted=deleted)
        return MessageResponse(message="Logged out successfully")

    async def get_current_user(self, user_id: UUID) -> CurrentUserRead:
        """Get a user with their organization memberships.

        Raises:
            UserNotFound: If the user no longer exists
        """
        user = await self.user_repo.get_by_id(user_id)
        if user is None:
            raise UserNotFound()

        memberships = await self.membership_repo.list_user_organizations(user.id)
        return CurrentUserRead(
            **UserRead.model_validate(user).model_dump(),
            organizations=[to_membership_read(m, o) for m, o in memberships],
        )
