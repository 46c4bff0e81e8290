"""
Access Policy Service

Decides who may read an entry, who holds which capability, and whether a
user's ban still applies. Everything here except the lazy ban expiry in
`check_ban_status` is pure: callers pass the requester explicitly and no
request state is consulted.
"""

import enum
import hmac
import secrets
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from loguru import logger
from sqlalchemy.orm import Session

import repositories.db_models as db_models
from helpers.time_utils import ensure_utc, utc_now
from models.config import settings
from repositories.user_repository import UserRepository


class Capability(str, enum.Enum):
    """Abstract permissions derived from a user's role and legacy admin flag."""

    MODERATE = "moderate"
    MANAGE_CONTENT = "manage_content"
    MANAGE_USERS = "manage_users"


class Visibility(str, enum.Enum):
    VISIBLE = "visible"
    NOT_FOUND = "not_found"
    ACCESS_DENIED = "access_denied"


# Capabilities granted by each role; admins (role or legacy flag) get all.
ROLE_CAPABILITIES: dict[db_models.UserRole, frozenset[Capability]] = {
    db_models.UserRole.USER: frozenset(),
    db_models.UserRole.MODERATOR: frozenset({Capability.MODERATE}),
    db_models.UserRole.ADMIN: frozenset(Capability),
}


@dataclass(frozen=True)
class BanStatus:
    """Outcome of a ban check."""

    is_banned: bool
    reason: Optional[str] = None
    banned_until: Optional[datetime] = None


NOT_BANNED = BanStatus(is_banned=False)


class AccessPolicyService:
    """Capability checks, entry visibility and ban status."""

    @staticmethod
    def has_capability(
        user: Optional[db_models.User], capability: Capability
    ) -> bool:
        """
        Check whether a user holds a capability.

        This is the only place that reads `role` and `is_admin`.

        Args:
            user: User to check (None for anonymous callers)
            capability: Capability required

        Returns:
            True if the user holds the capability
        """
        if user is None:
            return False
        if bool(user.is_admin):
            return True
        role = db_models.UserRole(user.role or db_models.UserRole.USER)
        return capability in ROLE_CAPABILITIES[role]

    @staticmethod
    def tokens_match(supplied: Optional[str], expected: Optional[str]) -> bool:
        """
        Compare a supplied special access token with the stored one.

        Uses a constant-time comparison. A missing token on either side never
        matches.
        """
        if not supplied or not expected:
            return False
        return hmac.compare_digest(supplied.encode(), expected.encode())

    @staticmethod
    def resolve_visibility(
        entry: Optional[db_models.WikiEntry],
        requester: Optional[db_models.User],
        token: Optional[str] = None,
    ) -> Visibility:
        """
        Decide whether a requester may read an entry.

        Rules, first match wins:
        1. missing entry -> NOT_FOUND
        2. owner -> VISIBLE
        3. moderator capability -> VISIBLE
        4. special entry -> VISIBLE only with the exact access token
        5. otherwise VISIBLE only when approved

        Args:
            entry: Entry being requested, or None if it does not exist
            requester: Authenticated user, or None for anonymous callers
            token: Special access token supplied with the request

        Returns:
            Visibility decision
        """
        if entry is None:
            return Visibility.NOT_FOUND

        if requester is not None and requester.id == entry.user_id:
            return Visibility.VISIBLE

        if AccessPolicyService.has_capability(requester, Capability.MODERATE):
            return Visibility.VISIBLE

        if bool(entry.is_special):
            if AccessPolicyService.tokens_match(token, entry.special_access_token):
                return Visibility.VISIBLE
            return Visibility.ACCESS_DENIED

        if entry.status == db_models.EntryStatus.APPROVED:
            return Visibility.VISIBLE
        return Visibility.ACCESS_DENIED

    @staticmethod
    def check_ban_status(
        db: Session,
        user: Optional[db_models.User],
        now: Optional[datetime] = None,
    ) -> BanStatus:
        """
        Check whether a user is currently banned, lifting expired bans.

        A temporary ban whose end is at or before `now` is cleared in the
        store and reported as not banned. Calling this again afterwards sees
        the cleared record and writes nothing.

        Args:
            db: Database session
            user: User to check (None is never banned)
            now: Reference time, defaults to the current UTC time

        Returns:
            BanStatus for the user
        """
        if user is None or not bool(user.is_banned):
            return NOT_BANNED

        if user.banned_until is not None:
            current = ensure_utc(now or utc_now())
            if ensure_utc(user.banned_until) <= current:
                UserRepository(db).clear_ban(user)
                logger.info(f"Temporary ban expired for user {user.id}; ban lifted")
                return NOT_BANNED

        return BanStatus(
            is_banned=True,
            reason=user.ban_reason,
            banned_until=(
                ensure_utc(user.banned_until) if user.banned_until is not None else None
            ),
        )

    @staticmethod
    def generate_special_token() -> str:
        """
        Create a new special access token.

        Returns:
            Hex string carrying SPECIAL_TOKEN_BYTES of randomness (64 characters
            by default)
        """
        return secrets.token_hex(settings.SPECIAL_TOKEN_BYTES)
