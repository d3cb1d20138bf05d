"""Bearer token authentication dependencies."""

from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from src.taskflow.core.exceptions import NotAuthenticated
from src.taskflow.core.logging import bind_user_context
from src.taskflow.core.security import TokenClaims, verify_access_token

bearer_scheme = HTTPBearer(auto_error=False)


async def get_token_claims(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
) -> TokenClaims:
    """Validate the ``Authorization: Bearer`` access token.

    Stateless: no database lookup. Runs before any business logic, so a
    missing or bad token is always a 401.

    Raises:
        NotAuthenticated: Header missing or not a Bearer credential
        TokenExpired: Token signature is valid but it has expired
        TokenInvalid: Token is forged, malformed, or not an access token
    """
    if credentials is None or not credentials.credentials:
        raise NotAuthenticated()

    claims = verify_access_token(credentials.credentials)
    bind_user_context(claims.user_id, claims.email)
    return claims


CurrentClaims = Annotated[TokenClaims, Depends(get_token_claims)]
