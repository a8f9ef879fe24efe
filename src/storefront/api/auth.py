"""Request dependencies that resolve the bearer token to a user."""

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from storefront.account.authentication import user_for_token
from storefront.account.user import User
from storefront.errors import PermissionDenied

_bearer = HTTPBearer(auto_error=False)


async def current_user(credentials: HTTPAuthorizationCredentials | None = Depends(_bearer)) -> User:
    return user_for_token(credentials.credentials if credentials else None)


async def admin_user(user: User = Depends(current_user)) -> User:
    if not user.is_admin:
        raise PermissionDenied("Not authorized as an admin")
    return user
