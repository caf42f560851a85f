from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from coastwatch.core.errors import Unauthorized
from coastwatch.services.auth import AuthService

bearer_scheme = HTTPBearer(auto_error=False)

async def get_current_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> int:
    """Verified identity for the request; routes that act as a user must depend on this."""
    if credentials is None or not credentials.credentials:
        raise Unauthorized("Authorization header required")
    return AuthService.verify(credentials.credentials)
