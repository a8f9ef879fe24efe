"""Credential checks for login and bearer-token requests."""

import jwt
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from storefront.account.security import decode_token, verify_secret
from storefront.account.user import User
from storefront.domain import logger
from storefront.errors import NotAuthenticated

INVALID_CREDENTIALS = "Invalid credentials"
ACCOUNT_DEACTIVATED = "Account is deactivated. Please contact support."


def authenticate(email: str, password: str) -> User:
    """Return the user owning ``email`` when ``password`` matches.

    Verification status is left to the caller; deactivated accounts are refused.
    """
    user = current_domain.repository_for(User).find_by_email(email)
    if user is None:
        raise NotAuthenticated(INVALID_CREDENTIALS)

    if not user.is_active:
        raise NotAuthenticated(ACCOUNT_DEACTIVATED)

    if not verify_secret(password, user.password_hash):
        logger.info("login_rejected", user_id=str(user.id))
        raise NotAuthenticated(INVALID_CREDENTIALS)

    return user


def user_for_token(token: str | None) -> User:
    """Resolve an access token to an active user."""
    if not token:
        raise NotAuthenticated("Not authorized, no token")

    try:
        user_id = decode_token(token)
    except jwt.PyJWTError as exc:
        raise NotAuthenticated("Not authorized, token failed") from exc

    try:
        user = current_domain.repository_for(User).get(user_id)
    except ObjectNotFoundError as exc:
        raise NotAuthenticated("Not authorized, user not found") from exc

    if not user.is_active:
        raise NotAuthenticated(ACCOUNT_DEACTIVATED)

    return user
