"""
Unit tests for UserService.
"""

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.orm import Session

import models.schemas as schemas
import repositories.db_models as db_models
from models.exceptions import (
    InsufficientPermissionsException,
    SelfModerationException,
    UserNotFoundException,
    ValidationException,
)
from services.user_service import UserService


class TestUpsertFromIdentity:
    """Tests for UserService.upsert_from_identity."""

    def test_creates_user_on_first_sight(self, db_session: Session):
        user = UserService.upsert_from_identity(
            db_session,
            schemas.IdentityClaims(
                sub="idp|42", email="new@example.com", first_name="Ada"
            ),
        )

        assert user.id == "idp|42"
        assert user.email == "new@example.com"
        assert user.role == db_models.UserRole.USER
        assert user.is_banned is False

    def test_refreshes_names_but_not_privileges(
        self, db_session: Session, admin_user
    ):
        user = UserService.upsert_from_identity(
            db_session,
            schemas.IdentityClaims(sub=admin_user.id, first_name="Renamed"),
        )

        assert user.first_name == "Renamed"
        assert user.role == db_models.UserRole.ADMIN

    def test_ignores_privilege_claims(self, db_session: Session, test_user):
        claims = schemas.IdentityClaims.model_validate(
            {"sub": test_user.id, "role": "admin", "is_admin": True}
        )

        user = UserService.upsert_from_identity(db_session, claims)

        assert user.role == db_models.UserRole.USER
        assert user.is_admin is False

    def test_email_taken_by_another_user_is_not_copied(
        self, db_session: Session, test_user
    ):
        user = UserService.upsert_from_identity(
            db_session,
            schemas.IdentityClaims(sub="idp|99", email=test_user.email),
        )

        assert user.email is None

    def test_keeps_chosen_avatar(self, db_session: Session, test_user):
        test_user.profile_image_url = "https://cdn.example.com/mine.png"
        db_session.commit()

        user = UserService.upsert_from_identity(
            db_session,
            schemas.IdentityClaims(
                sub=test_user.id, profile_image_url="https://idp.example.com/a.png"
            ),
        )

        assert user.profile_image_url == "https://cdn.example.com/mine.png"


class TestGetProfile:
    """Tests for UserService.get_profile."""

    def test_other_users_see_only_public_entries(
        self,
        db_session: Session,
        test_user,
        other_user,
        approved_entry,
        pending_entry,
        special_entry,
    ):
        profile = UserService.get_profile(db_session, test_user.id, other_user)

        assert [e.id for e in profile.entries] == [approved_entry.id]

    def test_owner_sees_everything(
        self, db_session: Session, test_user, approved_entry, pending_entry, special_entry
    ):
        profile = UserService.get_profile(db_session, test_user.id, test_user)
        assert len(profile.entries) == 3

    def test_moderator_sees_everything(
        self, db_session: Session, test_user, moderator_user, approved_entry, pending_entry
    ):
        profile = UserService.get_profile(db_session, test_user.id, moderator_user)
        assert len(profile.entries) == 2

    def test_missing_user(self, db_session: Session, test_user):
        with pytest.raises(UserNotFoundException):
            UserService.get_profile(db_session, "nobody", test_user)


class TestProfileCustomization:
    """Tests for profile, avatar and background updates."""

    def test_update_profile(self, db_session: Session, test_user):
        user = UserService.update_profile(
            db_session,
            test_user,
            schemas.UserProfileUpdate(bio="<p>Hi</p><script>x</script>"),
        )

        assert "<script>" not in user.bio
        assert user.first_name == "Test"

    def test_set_avatar(self, db_session: Session, test_user):
        user = UserService.set_avatar(
            db_session, test_user, "data:image/png;base64,iVBORw0K"
        )
        assert user.profile_image_url == "data:image/png;base64,iVBORw0K"

    def test_blank_avatar_rejected(self, db_session: Session, test_user):
        with pytest.raises(ValidationException):
            UserService.set_avatar(db_session, test_user, "   ")

    def test_set_background(self, db_session: Session, test_user):
        user = UserService.set_background(
            db_session, test_user, "https://cdn.example.com/bg.jpg"
        )
        assert user.profile_background_url == "https://cdn.example.com/bg.jpg"

    def test_script_background_rejected(self, db_session: Session, test_user):
        with pytest.raises(ValidationException):
            UserService.set_background(db_session, test_user, "javascript:alert(1)")


class TestListUsersWithCounts:
    def test_counts_entries(
        self, db_session: Session, test_user, other_user, approved_entry, pending_entry
    ):
        rows = {u.id: u.entry_count for u in UserService.list_users_with_counts(db_session)}
        assert rows[test_user.id] == 2
        assert rows[other_user.id] == 0


class TestAdminOperations:
    """Tests for role, badge, ban and delete operations."""

    def test_set_role(self, db_session: Session, admin_user, test_user):
        user = UserService.set_role(
            db_session, test_user.id, db_models.UserRole.MODERATOR, admin_user
        )
        assert user.role == db_models.UserRole.MODERATOR

    def test_admin_cannot_demote_self(self, db_session: Session, admin_user):
        with pytest.raises(SelfModerationException):
            UserService.set_role(
                db_session, admin_user.id, db_models.UserRole.USER, admin_user
            )

    def test_moderator_cannot_manage_users(
        self, db_session: Session, moderator_user, test_user
    ):
        with pytest.raises(InsufficientPermissionsException):
            UserService.set_role(
                db_session, test_user.id, db_models.UserRole.ADMIN, moderator_user
            )

    def test_set_badge(self, db_session: Session, admin_user, test_user):
        user = UserService.set_badge(
            db_session, test_user.id, db_models.UserBadge.GREEN_CHECK, admin_user
        )
        assert user.badge == db_models.UserBadge.GREEN_CHECK

    def test_temporary_ban(self, db_session: Session, admin_user, test_user):
        before = datetime.now(timezone.utc)
        user = UserService.ban_user(db_session, test_user.id, "spam", 24, admin_user)

        assert user.is_banned is True
        assert user.ban_reason == "spam"
        banned_until = user.banned_until.replace(tzinfo=timezone.utc)
        assert banned_until >= before + timedelta(hours=23, minutes=59)

    @pytest.mark.parametrize("hours", [None, 0])
    def test_permanent_ban(self, db_session: Session, admin_user, test_user, hours):
        user = UserService.ban_user(db_session, test_user.id, "abuse", hours, admin_user)

        assert user.is_banned is True
        assert user.banned_until is None

    def test_ban_requires_reason(self, db_session: Session, admin_user, test_user):
        with pytest.raises(ValidationException):
            UserService.ban_user(db_session, test_user.id, "  ", None, admin_user)

    def test_admin_cannot_ban_self(self, db_session: Session, admin_user):
        with pytest.raises(SelfModerationException):
            UserService.ban_user(db_session, admin_user.id, "oops", None, admin_user)

    def test_unban_clears_everything(self, db_session: Session, admin_user, test_user):
        UserService.ban_user(db_session, test_user.id, "spam", 5, admin_user)

        user = UserService.unban_user(db_session, test_user.id, admin_user)

        assert user.is_banned is False
        assert user.ban_reason is None
        assert user.banned_until is None

    def test_delete_user_cascades(
        self, db_session: Session, admin_user, test_user, other_user, approved_entry
    ):
        db_session.add_all(
            [
                db_models.UserImage(user_id=test_user.id, image_url="/a.png"),
                db_models.Comment(
                    entry_id=approved_entry.id, user_id=other_user.id, content="Hi"
                ),
                db_models.Like(entry_id=approved_entry.id, user_id=other_user.id),
            ]
        )
        db_session.commit()

        UserService.delete_user(db_session, test_user.id, admin_user)

        assert db_session.get(db_models.User, test_user.id) is None
        assert db_session.query(db_models.WikiEntry).count() == 0
        assert db_session.query(db_models.UserImage).count() == 0
        assert db_session.query(db_models.Comment).count() == 0
        assert db_session.query(db_models.Like).count() == 0
        assert db_session.get(db_models.User, other_user.id) is not None

    def test_delete_user_removes_own_comments_and_likes(
        self, db_session: Session, admin_user, test_user, other_user
    ):
        first = db_models.WikiEntry(
            user_id=test_user.id, title="First", description="One"
        )
        second = db_models.WikiEntry(
            user_id=test_user.id, title="Second", description="Two"
        )
        foreign = db_models.WikiEntry(
            user_id=other_user.id,
            title="Foreign",
            description="Kept",
            status=db_models.EntryStatus.APPROVED,
        )
        db_session.add_all([first, second, foreign])
        db_session.commit()
        db_session.add_all(
            [
                db_models.Comment(
                    entry_id=first.id, user_id=test_user.id, content="Own"
                ),
                db_models.Comment(
                    entry_id=foreign.id, user_id=test_user.id, content="Elsewhere"
                ),
                db_models.Comment(
                    entry_id=foreign.id, user_id=test_user.id, content="Again"
                ),
                db_models.Like(entry_id=foreign.id, user_id=test_user.id),
            ]
        )
        db_session.commit()
        foreign_id = foreign.id

        UserService.delete_user(db_session, test_user.id, admin_user)

        assert db_session.query(db_models.Comment).count() == 0
        assert db_session.query(db_models.Like).count() == 0
        assert (
            db_session.query(db_models.WikiEntry)
            .filter(db_models.WikiEntry.user_id == test_user.id)
            .count()
            == 0
        )
        assert db_session.get(db_models.WikiEntry, foreign_id) is not None

    def test_admin_cannot_delete_self(self, db_session: Session, admin_user):
        with pytest.raises(SelfModerationException):
            UserService.delete_user(db_session, admin_user.id, admin_user)

    def test_missing_target(self, db_session: Session, admin_user):
        with pytest.raises(UserNotFoundException):
            UserService.unban_user(db_session, "ghost", admin_user)
