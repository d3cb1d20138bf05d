"""Organization resolution and permission dependencies."""

from collections.abc import Awaitable, Callable
from typing import Annotated

from fastapi import Depends, Header, Request

from src.taskflow.api.dependencies.auth import CurrentClaims
from src.taskflow.api.dependencies.services import TenantResolverDep
from src.taskflow.core.logging import bind_organization_context
from src.taskflow.core.security import Permission, require_permission
from src.taskflow.services import TenantContext


async def get_organization_id(
    request: Request,
    x_organization_id: Annotated[str | None, Header()] = None,
) -> str | None:
    """Organization id from the path, then the query string, then ``X-Organization-ID``."""
    return (
        request.path_params.get("organization_id")
        or request.query_params.get("organization_id")
        or x_organization_id
    )


async def get_tenant_context(
    claims: CurrentClaims,
    organization_id: Annotated[str | None, Depends(get_organization_id)],
    resolver: TenantResolverDep,
) -> TenantContext:
    context = await resolver.resolve(claims.user_id, organization_id)
    bind_organization_context(context.organization_id, context.role.value)
    return context


TenantContextDep = Annotated[TenantContext, Depends(get_tenant_context)]


def permission_required(permission: Permission) -> Callable[..., Awaitable[TenantContext]]:
    """Build a dependency that resolves the tenant and enforces ``permission``.

    Usage::

        context: Annotated[TenantContext, Depends(permission_required(Permission.PROJECT_CREATE))]
    """

    async def _check(context: TenantContextDep) -> TenantContext:
        require_permission(context.role, permission)
        return context

    return _check
