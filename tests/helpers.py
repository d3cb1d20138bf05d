"""Test helper functions for common data creation patterns."""

from typing import Any

from httpx import AsyncClient, Response
from sqlalchemy.ext.asyncio import AsyncSession

from src.taskflow.models import Organization, OrganizationMember, OrgRole, User
from tests.factories import (
    DEFAULT_TEST_PASSWORD,
    OrganizationFactory,
    OrganizationMemberFactory,
    UserFactory,
    short_id,
)


async def create_organization(session: AsyncSession, **organization_kwargs) -> Organization:
    """Create an organization.

    Args:
        session: Database session
        **organization_kwargs: Args passed to OrganizationFactory

    Returns:
        Created organization (flushed, not committed)
    """
    organization = OrganizationFactory.build(**organization_kwargs)
    session.add(organization)
    await session.flush()
    return organization


async def create_user_with_membership(
    session: AsyncSession,
    organization: Organization,
    role: OrgRole = OrgRole.MEMBER,
    **user_kwargs,
) -> tuple[User, OrganizationMember]:
    """Create a user and their membership in an organization.

    Also bumps ``current_users`` so seat accounting stays consistent.

    Returns:
        Tuple of (user, membership)
    """
    user = UserFactory.build(**user_kwargs)
    session.add(user)
    await session.flush()

    membership = OrganizationMemberFactory.build(
        user_id=user.id,
        organization_id=organization.id,
        role=role.value,
    )
    session.add(membership)
    organization.current_users += 1
    session.add(organization)
    await session.flush()

    return user, membership


def auth_headers(access_token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {access_token}"}


async def register(
    client: AsyncClient,
    email: str | None = None,
    password: str = DEFAULT_TEST_PASSWORD,
    name: str = "Test User",
) -> Response:
    """POST /auth/register with a unique email unless one is given."""
    return await client.post(
        "/api/v1/auth/register",
        json={
            "name": name,
            "email": email or f"user_{short_id()}@example.com",
            "password": password,
        },
    )


async def login(
    client: AsyncClient, email: str, password: str = DEFAULT_TEST_PASSWORD
) -> Response:
    return await client.post("/api/v1/auth/login", json={"email": email, "password": password})


async def register_and_login(client: AsyncClient, **kwargs: Any) -> dict[str, Any]:
    """Register a user and return the registration body plus the password used."""
    response = await register(client, **kwargs)
    assert response.status_code == 201, response.json()
    body = response.json()
    body["password"] = kwargs.get("password", DEFAULT_TEST_PASSWORD)
    return body


async def create_organization_via_api(
    client: AsyncClient, access_token: str, name: str = "Acme", slug: str | None = None
) -> dict[str, Any]:
    response = await client.post(
        "/api/v1/organizations",
        json={"name": name, "slug": slug or f"org-{short_id()}"},
        headers=auth_headers(access_token),
    )
    assert response.status_code == 201, response.json()
    return response.json()
