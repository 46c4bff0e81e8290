"""
Entry Service

Moderation workflow for wiki entries: creation, owner edits, the special-post
toggle, moderator decisions, admin verification and deletion, plus the read
paths that apply the access policy.
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
from models.exceptions import (
    AccessDeniedException,
    EntryNotFoundException,
    InsufficientPermissionsException,
    InvalidChoiceException,
    NotOwnerException,
    ValidationException,
)
from repositories.entry_repository import EntryRepository
from services.access_policy_service import (
    AccessPolicyService,
    Capability,
    Visibility,
)

# Statuses a moderator may set; pending is only ever set by an owner edit.
MODERATION_DECISIONS = (db_models.EntryStatus.APPROVED, db_models.EntryStatus.REJECTED)


def _clean_image_url(image_url: Optional[str]) -> Optional[str]:
    if image_url is None or image_url == "":
        return None
    if not is_allowed_image_reference(image_url):
        raise ValidationException(
            "Image must be an http(s) URL, an image data URL or a site path",
            field="image_url",
            value=image_url,
        )
    return image_url.strip()


def _clean_text(title: str, description: str) -> tuple[str, str]:
    clean_title = sanitize_plain_text(title) or ""
    clean_description = sanitize_html(description) or ""
    if not clean_title.strip():
        raise ValidationException("Title cannot be empty", field="title", value=title)
    if not clean_description.strip():
        raise ValidationException(
            "Description cannot be empty", field="description", value=description
        )
    return clean_title.strip(), clean_description


class EntryService:
    """Service for wiki entry business logic."""

    @staticmethod
    def get_entry_or_404(db: Session, entry_id: str) -> db_models.WikiEntry:
        """
        Get an entry by ID without any visibility check.

        Raises:
            EntryNotFoundException: If the entry does not exist
        """
        entry = EntryRepository(db).get_by_id(entry_id)
        if entry is None:
            raise EntryNotFoundException(entry_id)
        return entry

    @staticmethod
    def get_entry_for_viewer(
        db: Session,
        entry_id: str,
        requester: Optional[db_models.User],
        token: Optional[str] = None,
    ) -> db_models.WikiEntry:
        """
        Get an entry if the requester may read it.

        Args:
            db: Database session
            entry_id: Entry ID
            requester: Authenticated user or None
            token: Special access token from the request

        Returns:
            The entry

        Raises:
            EntryNotFoundException: If the entry does not exist
            AccessDeniedException: If the entry exists but may not be read
        """
        entry = EntryRepository(db).get_by_id(entry_id)
        visibility = AccessPolicyService.resolve_visibility(entry, requester, token)

        if visibility == Visibility.NOT_FOUND:
            raise EntryNotFoundException(entry_id)
        if visibility == Visibility.ACCESS_DENIED:
            raise AccessDeniedException()
        return entry  # type: ignore[return-value]

    @staticmethod
    def list_approved_entries(
        db: Session, skip: int = 0, limit: int = 100
    ) -> List[db_models.WikiEntry]:
        """Approved, non-special entries with their authors, newest first."""
        return EntryRepository(db).list_public(skip=skip, limit=limit)

    @staticmethod
    def list_user_entries(db: Session, user_id: str) -> List[db_models.WikiEntry]:
        """Every entry owned by a user, whatever its status."""
        return EntryRepository(db).list_by_user(user_id)

    @staticmethod
    def list_all_entries(
        db: Session,
        requester: db_models.User,
        status: Optional[db_models.EntryStatus] = None,
        skip: int = 0,
        limit: int = 100,
    ) -> List[db_models.WikiEntry]:
        """
        Moderation listing of entries in every state.

        Args:
            db: Database session
            requester: User asking for the listing
            status: Optional status filter
            skip: Number of records to skip
            limit: Maximum number of records to return

        Returns:
            Entries with authors, newest first

        Raises:
            InsufficientPermissionsException: If requester cannot moderate
        """
        if not AccessPolicyService.has_capability(requester, Capability.MODERATE):
            raise InsufficientPermissionsException("Moderator access required")
        return EntryRepository(db).list_all_with_authors(
            status=status, skip=skip, limit=limit
        )

    @staticmethod
    def create_entry(
        db: Session, payload: schemas.EntryCreate, requester: db_models.User
    ) -> db_models.WikiEntry:
        """
        Create an entry owned by the requester.

        New entries always start pending; a special entry gets its access
        token immediately.

        Args:
            db: Database session
            payload: Entry data
            requester: Author of the entry

        Returns:
            Created entry

        Raises:
            ValidationException: If title, description or image is invalid
        """
        title, description = _clean_text(payload.title, payload.description)

        entry = db_models.WikiEntry(
            user_id=requester.id,
            title=title,
            description=description,
            image_url=_clean_image_url(payload.image_url),
            status=db_models.EntryStatus.PENDING,
            is_special=payload.is_special,
            special_access_token=(
                AccessPolicyService.generate_special_token()
                if payload.is_special
                else None
            ),
        )
        entry = EntryRepository(db).create(entry)
        logger.info(
            f"Entry {entry.id} created by user {requester.id} "
            f"(special={entry.is_special})"
        )
        return entry

    @staticmethod
    def update_entry(
        db: Session,
        entry_id: str,
        payload: schemas.EntryUpdate,
        requester: db_models.User,
    ) -> db_models.WikiEntry:
        """
        Apply an owner edit and send the entry back to moderation.

        Args:
            db: Database session
            entry_id: Entry ID
            payload: Fields to change; omitted fields are kept
            requester: User making the edit

        Returns:
            Updated entry, always pending

        Raises:
            EntryNotFoundException: If the entry does not exist
            NotOwnerException: If requester is not the owner
            ValidationException: If a provided field is invalid
        """
        repo = EntryRepository(db)
        entry = EntryService.get_entry_or_404(db, entry_id)
        if entry.user_id != requester.id:
            raise NotOwnerException("You can only edit your own entries")

        changes = payload.model_dump(exclude_unset=True)
        if changes.get("title") is not None or changes.get("description") is not None:
            title, description = _clean_text(
                changes.get("title") or entry.title,
                changes.get("description") or entry.description,
            )
            entry.title = title
            entry.description = description
        if "image_url" in changes:
            entry.image_url = _clean_image_url(changes["image_url"])

        new_special = changes.get("is_special")
        if new_special is not None:
            if new_special and not entry.is_special:
                entry.special_access_token = (
                    AccessPolicyService.generate_special_token()
                )
            entry.is_special = new_special

        previous_status = entry.status
        entry.status = db_models.EntryStatus.PENDING
        entry = repo.update(entry)
        logger.info(
            f"Entry {entry.id} edited by owner; status {previous_status.value} -> pending"
        )
        return entry

    @staticmethod
    def set_special(
        db: Session, entry_id: str, is_special: bool, requester: db_models.User
    ) -> db_models.WikiEntry:
        """
        Toggle special (token-gated) visibility on an owned entry.

        Every switch to special issues a new token. Switching off keeps the
        old token, which is never consulted for non-special entries. Status is
        left as is.

        Raises:
            EntryNotFoundException: If the entry does not exist
            NotOwnerException: If requester is not the owner
        """
        entry = EntryService.get_entry_or_404(db, entry_id)
        if entry.user_id != requester.id:
            raise NotOwnerException("You can only change your own entries")

        if is_special and not entry.is_special:
            entry.special_access_token = AccessPolicyService.generate_special_token()
        entry.is_special = is_special
        entry = EntryRepository(db).update(entry)
        logger.info(f"Entry {entry.id} special visibility set to {is_special}")
        return entry

    @staticmethod
    def moderate_entry(
        db: Session,
        entry_id: str,
        status: db_models.EntryStatus | str,
        requester: db_models.User,
    ) -> db_models.WikiEntry:
        """
        Record a moderation decision.

        Args:
            db: Database session
            entry_id: Entry ID
            status: "approved" or "rejected"
            requester: Moderator making the decision

        Returns:
            Updated entry

        Raises:
            InsufficientPermissionsException: If requester cannot moderate
            InvalidChoiceException: If status is not approved or rejected
            EntryNotFoundException: If the entry does not exist
        """
        if not AccessPolicyService.has_capability(requester, Capability.MODERATE):
            raise InsufficientPermissionsException("Moderator access required")

        allowed = [s.value for s in MODERATION_DECISIONS]
        try:
            decision = db_models.EntryStatus(status)
        except ValueError:
            raise InvalidChoiceException("status", status, allowed)
        if decision not in MODERATION_DECISIONS:
            raise InvalidChoiceException("status", decision.value, allowed)

        entry = EntryService.get_entry_or_404(db, entry_id)
        previous_status = entry.status
        entry.status = decision
        entry = EntryRepository(db).update(entry)
        logger.info(
            f"Entry {entry.id} moderated by {requester.id}: "
            f"{previous_status.value} -> {decision.value}"
        )
        return entry

    @staticmethod
    def set_verification(
        db: Session,
        entry_id: str,
        verification: db_models.EntryVerification | str,
        requester: db_models.User,
    ) -> db_models.WikiEntry:
        """
        Set the fact-check verdict of an entry. Never changes its status.

        Raises:
            InsufficientPermissionsException: If requester cannot manage content
            InvalidChoiceException: If verification is not a known verdict
            EntryNotFoundException: If the entry does not exist
        """
        if not AccessPolicyService.has_capability(
            requester, Capability.MANAGE_CONTENT
        ):
            raise InsufficientPermissionsException("Admin access required")

        try:
            verdict = db_models.EntryVerification(verification)
        except ValueError:
            raise InvalidChoiceException(
                "verification",
                verification,
                [v.value for v in db_models.EntryVerification],
            )

        entry = EntryService.get_entry_or_404(db, entry_id)
        entry.verification = verdict
        entry = EntryRepository(db).update(entry)
        logger.info(f"Entry {entry.id} verification set to {verdict.value}")
        return entry

    @staticmethod
    def delete_entry(db: Session, entry_id: str, requester: db_models.User) -> None:
        """
        Delete an entry with its reports, comments and likes.

        Raises:
            EntryNotFoundException: If the entry does not exist
            NotOwnerException: If requester is neither owner nor content admin
        """
        entry = EntryService.get_entry_or_404(db, entry_id)
        is_owner = entry.user_id == requester.id
        if not is_owner and not AccessPolicyService.has_capability(
            requester, Capability.MANAGE_CONTENT
        ):
            raise NotOwnerException("You can only delete your own entries")

        EntryRepository(db).delete(entry)
        logger.info(
            f"Entry {entry_id} deleted by {'owner' if is_owner else 'admin'} "
            f"{requester.id}"
        )
