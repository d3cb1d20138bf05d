from src.taskflow.services.auth_service import AuthService
from src.taskflow.services.organization_service import OrganizationService
from src.taskflow.services.project_service import ProjectService
from src.taskflow.services.tenant_service import TenantContext, TenantResolver

__all__ = [
    "AuthService",
    "OrganizationService",
    "ProjectService",
    "TenantContext",
    "TenantResolver",
]
