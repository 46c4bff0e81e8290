"""
Bearer-token authentication.

Tokens are issued by the external identity provider; this module only
verifies them, mirrors the identity into the local users table and applies
the ban check and capability requirements as FastAPI dependencies.
"""

from typing import Optional

import jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import ValidationError
from sqlalchemy.orm import Session

import models.schemas as schemas
import repositories.db_models as db_models
from models.config import settings
from models.exceptions import (
    AuthenticationException,
    InsufficientPermissionsException,
    SessionExpiredException,
    UserBannedException,
)
from repositories.database import get_db
from services.access_policy_service import AccessPolicyService, Capability
from services.user_service import UserService

bearer_scheme = HTTPBearer(auto_error=False)


def decode_identity_token(token: str) -> schemas.IdentityClaims:
    """
    Verify an identity provider token and return its claims.

    Args:
        token: Encoded JWT

    Returns:
        Parsed identity claims

    Raises:
        SessionExpiredException: If the token is expired
        AuthenticationException: If the token is malformed, signed with the
            wrong key or lacks a subject
    """
    options = {"require": ["sub"], "verify_aud": settings.TOKEN_AUDIENCE is not None}
    try:
        payload = jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.ALGORITHM],
            audience=settings.TOKEN_AUDIENCE,
            options=options,
        )
    except jwt.exceptions.ExpiredSignatureError:
        raise SessionExpiredException()
    except jwt.exceptions.InvalidTokenError:
        raise AuthenticationException("Could not validate credentials")

    try:
        return schemas.IdentityClaims.model_validate(payload)
    except ValidationError:
        raise AuthenticationException("Could not validate credentials")


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> db_models.User:
    """
    Get the authenticated user, creating the local record on first sight.

    Raises:
        AuthenticationException: If no valid bearer token was sent
    """
    if credentials is None:
        raise AuthenticationException("Not authenticated")

    claims = decode_identity_token(credentials.credentials)
    return UserService.upsert_from_identity(db, claims)


async def get_current_user_optional(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> Optional[db_models.User]:
    """
    Get current user if authenticated, otherwise return None.

    An expired token still raises so the client knows to sign in again.
    Other invalid tokens are treated as anonymous access. Banned users are
    treated as anonymous too.
    """
    if credentials is None:
        return None

    try:
        claims = decode_identity_token(credentials.credentials)
    except SessionExpiredException:
        raise
    except AuthenticationException:
        return None

    user = UserService.upsert_from_identity(db, claims)
    if AccessPolicyService.check_ban_status(db, user).is_banned:
        return None
    return user


async def get_current_active_user(
    current_user: db_models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> db_models.User:
    """
    Get the current user and verify they are not banned.

    An expired temporary ban is lifted here as a side effect.

    Raises:
        UserBannedException: If the user is currently banned
    """
    ban = AccessPolicyService.check_ban_status(db, current_user)
    if ban.is_banned:
        raise UserBannedException(ban.reason, ban.banned_until)
    return current_user


async def get_moderator_user(
    current_user: db_models.User = Depends(get_current_active_user),
) -> db_models.User:
    """
    Require the moderate capability.

    Raises:
        InsufficientPermissionsException: If the user cannot moderate
    """
    if not AccessPolicyService.has_capability(current_user, Capability.MODERATE):
        raise InsufficientPermissionsException("Moderator access required")
    return current_user


async def get_admin_user(
    current_user: db_models.User = Depends(get_current_active_user),
) -> db_models.User:
    """
    Require admin permissions.

    Raises:
        InsufficientPermissionsException: If the user cannot manage users
    """
    if not AccessPolicyService.has_capability(current_user, Capability.MANAGE_USERS):
        raise InsufficientPermissionsException("Not enough permissions")
    return current_user
