"""
User Service

Handles user records mirrored from the identity provider, profile
customization and admin user management (roles, badges, bans, deletion).
"""

from typing import List, Optional

from loguru import logger
from sqlalchemy.orm import Session

import models.schemas as schemas
import repositories.db_models as db_models
from helpers.sanitization import (
    is_allowed_image_reference,
    sanitize_html,
    sanitize_plain_text,
)
from helpers.time_utils import hours_from_now
from models.exceptions import (
    InsufficientPermissionsException,
    SelfModerationException,
    UserNotFoundException,
    ValidationException,
)
from repositories.entry_repository import EntryRepository
from repositories.user_repository import UserRepository
from services.access_policy_service import (
    AccessPolicyService,
    Capability,
    Visibility,
)


def _require_manage_users(requester: db_models.User) -> None:
    if not AccessPolicyService.has_capability(requester, Capability.MANAGE_USERS):
        raise InsufficientPermissionsException("Admin access required")


def _require_image_reference(value: str, field: str) -> str:
    if not value or not value.strip():
        raise ValidationException(f"{field} is required", field=field, value=value)
    if not is_allowed_image_reference(value):
        raise ValidationException(
            "Image must be an http(s) URL, an image data URL or a site path",
            field=field,
            value=value,
        )
    return value.strip()


class UserService:
    """Service for user profiles and admin user management."""

    @staticmethod
    def get_user_or_404(db: Session, user_id: str) -> db_models.User:
        """
        Get a user by ID.

        Raises:
            UserNotFoundException: If the user does not exist
        """
        user = UserRepository(db).get_by_id(user_id)
        if user is None:
            raise UserNotFoundException(user_id)
        return user

    @staticmethod
    def upsert_from_identity(
        db: Session, claims: schemas.IdentityClaims
    ) -> db_models.User:
        """
        Create or refresh the local record of an identity provider user.

        Only identity fields are written. Role, admin flag, badge and ban
        state belong to this service and are never taken from claims.

        Args:
            db: Database session
            claims: Verified token claims

        Returns:
            The local user
        """
        repo = UserRepository(db)
        user = repo.get_by_id(claims.sub)

        email = claims.email
        if email:
            holder = repo.get_by_email(email)
            if holder is not None and holder.id != claims.sub:
                logger.warning(
                    f"Email claim for {claims.sub} already belongs to user "
                    f"{holder.id}; keeping existing email"
                )
                email = None

        if user is None:
            user = db_models.User(
                id=claims.sub,
                email=email,
                first_name=claims.first_name,
                last_name=claims.last_name,
                profile_image_url=claims.profile_image_url,
            )
            user = repo.create(user)
            logger.info(f"New user {user.id} registered from identity provider")
            return user

        changed = False
        for field, value in (
            ("email", email),
            ("first_name", claims.first_name),
            ("last_name", claims.last_name),
        ):
            if value is not None and getattr(user, field) != value:
                setattr(user, field, value)
                changed = True
        # Identity provider avatar only fills an empty slot; a gallery pick wins
        if claims.profile_image_url and not user.profile_image_url:
            user.profile_image_url = claims.profile_image_url
            changed = True

        if changed:
            user = repo.update(user)
        return user

    @staticmethod
    def get_profile(
        db: Session, user_id: str, viewer: Optional[db_models.User]
    ) -> schemas.UserProfile:
        """
        Get a user's public profile with the entries the viewer may see.

        The owner and moderators see every entry. Anyone else sees only
        entries readable without a special access token.

        Args:
            db: Database session
            user_id: Profile owner ID
            viewer: User looking at the profile

        Returns:
            Profile with entries

        Raises:
            UserNotFoundException: If the user does not exist
        """
        user = UserService.get_user_or_404(db, user_id)
        entries = EntryRepository(db).list_by_user(user.id)
        visible = [
            entry
            for entry in entries
            if AccessPolicyService.resolve_visibility(entry, viewer)
            == Visibility.VISIBLE
        ]

        profile = schemas.UserPublic.model_validate(user).model_dump()
        return schemas.UserProfile(
            **profile,
            entries=[schemas.Entry.model_validate(entry) for entry in visible],
        )

    @staticmethod
    def list_users_with_counts(db: Session) -> List[schemas.UserWithEntryCount]:
        """All users with the number of entries each owns, newest first."""
        rows = UserRepository(db).list_with_entry_counts()
        return [
            schemas.UserWithEntryCount(
                **schemas.User.model_validate(user).model_dump(), entry_count=count
            )
            for user, count in rows
        ]

    @staticmethod
    def update_profile(
        db: Session, user: db_models.User, payload: schemas.UserProfileUpdate
    ) -> db_models.User:
        """
        Update names and bio. Omitted fields are kept.

        Args:
            db: Database session
            user: User being updated
            payload: New values

        Returns:
            Updated user
        """
        changes = payload.model_dump(exclude_unset=True)
        if "first_name" in changes:
            user.first_name = sanitize_plain_text(changes["first_name"])
        if "last_name" in changes:
            user.last_name = sanitize_plain_text(changes["last_name"])
        if "bio" in changes:
            user.bio = sanitize_html(changes["bio"])
        return UserRepository(db).update(user)

    @staticmethod
    def set_avatar(db: Session, user: db_models.User, image_url: str) -> db_models.User:
        """
        Set the profile picture.

        Raises:
            ValidationException: If the URL is empty or not an image reference
        """
        user.profile_image_url = _require_image_reference(image_url, "image_url")
        return UserRepository(db).update(user)

    @staticmethod
    def set_background(
        db: Session, user: db_models.User, background_url: str
    ) -> db_models.User:
        """
        Set the profile background image.

        Raises:
            ValidationException: If the URL is empty or not an image reference
        """
        user.profile_background_url = _require_image_reference(
            background_url, "background_url"
        )
        return UserRepository(db).update(user)

    # Admin operations

    @staticmethod
    def set_role(
        db: Session,
        user_id: str,
        role: db_models.UserRole,
        requester: db_models.User,
    ) -> db_models.User:
        """
        Change a user's role.

        Args:
            db: Database session
            user_id: Target user ID
            role: New role
            requester: Admin making the change

        Returns:
            Updated user

        Raises:
            InsufficientPermissionsException: If requester cannot manage users
            UserNotFoundException: If the target does not exist
            SelfModerationException: If an admin tries to demote themselves
        """
        _require_manage_users(requester)
        user = UserService.get_user_or_404(db, user_id)
        if user.id == requester.id and role != db_models.UserRole.ADMIN:
            raise SelfModerationException("demote")

        previous = user.role
        user.role = role
        user = UserRepository(db).update(user)
        logger.info(
            f"User {user.id} role changed {previous.value} -> {role.value} "
            f"by {requester.id}"
        )
        return user

    @staticmethod
    def set_badge(
        db: Session,
        user_id: str,
        badge: db_models.UserBadge,
        requester: db_models.User,
    ) -> db_models.User:
        """Assign a cosmetic badge."""
        _require_manage_users(requester)
        user = UserService.get_user_or_404(db, user_id)
        user.badge = badge
        return UserRepository(db).update(user)

    @staticmethod
    def ban_user(
        db: Session,
        user_id: str,
        reason: str,
        hours: Optional[float],
        requester: db_models.User,
    ) -> db_models.User:
        """
        Ban a user, temporarily when `hours` is positive, otherwise for good.

        Args:
            db: Database session
            user_id: Target user ID
            reason: Reason shown to the banned user
            hours: Ban length in hours; None or 0 means permanent
            requester: Admin issuing the ban

        Returns:
            Updated user

        Raises:
            InsufficientPermissionsException: If requester cannot manage users
            ValidationException: If reason is empty
            UserNotFoundException: If the target does not exist
            SelfModerationException: If an admin tries to ban themselves
        """
        _require_manage_users(requester)
        clean_reason = (sanitize_plain_text(reason) or "").strip()
        if not clean_reason:
            raise ValidationException(
                "A ban reason is required", field="reason", value=reason
            )

        user = UserService.get_user_or_404(db, user_id)
        if user.id == requester.id:
            raise SelfModerationException("ban")

        banned_until = hours_from_now(hours)

        user = UserRepository(db).set_ban(user, clean_reason, banned_until)
        logger.warning(
            f"User {user.id} banned by {requester.id} "
            f"until {banned_until.isoformat() if banned_until else 'permanent'}"
        )
        return user

    @staticmethod
    def unban_user(
        db: Session, user_id: str, requester: db_models.User
    ) -> db_models.User:
        """Lift a ban and clear its reason and end time."""
        _require_manage_users(requester)
        user = UserService.get_user_or_404(db, user_id)
        user = UserRepository(db).clear_ban(user)
        logger.info(f"User {user.id} unbanned by {requester.id}")
        return user

    @staticmethod
    def delete_user(db: Session, user_id: str, requester: db_models.User) -> None:
        """
        Delete a user together with everything they own.

        Raises:
            InsufficientPermissionsException: If requester cannot manage users
            UserNotFoundException: If the target does not exist
            SelfModerationException: If an admin tries to delete themselves
        """
        _require_manage_users(requester)
        user = UserService.get_user_or_404(db, user_id)
        if user.id == requester.id:
            raise SelfModerationException("delete")

        UserRepository(db).delete(user)
        logger.warning(f"User {user_id} and all their content deleted by {requester.id}")
