"""
Database models using SQLAlchemy 2.0 style with Mapped type hints.

Identifiers are opaque strings: users take the subject id issued by the
identity provider, every other row gets a UUID4 on insert.

Ownership cascades are declared twice: as ON DELETE CASCADE foreign keys for
databases that enforce them, and as ORM relationship cascades so that
`session.delete(user)` or `session.delete(entry)` removes dependent rows on
every backend.
"""

import enum
import uuid
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import (
    Boolean,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from repositories.database import Base


class UserRole(str, enum.Enum):
    USER = "user"
    MODERATOR = "moderator"
    ADMIN = "admin"


class UserBadge(str, enum.Enum):
    """Cosmetic profile marker; has no effect on permissions."""

    NONE = "none"
    GREEN_CHECK = "green_check"
    RED_CHECK = "red_check"
    BLACK_CHECK = "black_check"


class EntryStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class EntryVerification(str, enum.Enum):
    """Admin fact-check verdict, independent of moderation status."""

    VERIFIED = "verified"
    FAKE = "fake"
    UNKNOWN = "unknown"


class ReportReason(str, enum.Enum):
    """Reasons for reporting an entry."""

    SPAM = "spam"
    HARASSMENT = "harassment"
    MISINFORMATION = "misinformation"
    INAPPROPRIATE = "inappropriate"
    COPYRIGHT = "copyright"
    OTHER = "other"


class ReportStatus(str, enum.Enum):
    """Status of a content report."""

    PENDING = "pending"
    INVESTIGATING = "investigating"
    RESOLVED = "resolved"
    DISMISSED = "dismissed"


def _utc_now() -> datetime:
    """Return current UTC datetime (timezone-aware)."""
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return str(uuid.uuid4())


class User(Base):
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=_new_id)
    email: Mapped[Optional[str]] = mapped_column(
        String, unique=True, index=True, nullable=True
    )
    first_name: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    last_name: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    bio: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Opaque URL or data-URL strings picked from the user's gallery
    profile_image_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    profile_background_url: Mapped[Optional[str]] = mapped_column(
        Text, nullable=True
    )

    # Privileges: `role` is authoritative, `is_admin` is the legacy flag.
    # Both are read through AccessPolicyService.has_capability only.
    role: Mapped[UserRole] = mapped_column(
        Enum(UserRole), default=UserRole.USER, nullable=False
    )
    is_admin: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    badge: Mapped[UserBadge] = mapped_column(
        Enum(UserBadge), default=UserBadge.NONE, nullable=False
    )

    # Ban state; banned_until NULL means permanent
    is_banned: Mapped[bool] = mapped_column(
        Boolean, default=False, nullable=False, index=True
    )
    banned_until: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    ban_reason: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=_utc_now)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=_utc_now, onupdate=_utc_now
    )

    # Relationships
    entries: Mapped[List["WikiEntry"]] = relationship(
        "WikiEntry", back_populates="author", cascade="all, delete-orphan"
    )
    images: Mapped[List["UserImage"]] = relationship(
        "UserImage", back_populates="user", cascade="all, delete-orphan"
    )
    reports: Mapped[List["ContentReport"]] = relationship(
        "ContentReport", back_populates="reporter", cascade="all, delete-orphan"
    )
    comments: Mapped[List["Comment"]] = relationship(
        "Comment", back_populates="user", cascade="all, delete-orphan"
    )
    likes: Mapped[List["Like"]] = relationship(
        "Like", back_populates="user", cascade="all, delete-orphan"
    )

    @property
    def display_name(self) -> str:
        """Full name when known, otherwise the email, otherwise the id."""
        name = " ".join(part for part in (self.first_name, self.last_name) if part)
        return name or self.email or self.id


class WikiEntry(Base):
    __tablename__ = "wiki_entries"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    user_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    image_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    status: Mapped[EntryStatus] = mapped_column(
        Enum(EntryStatus), default=EntryStatus.PENDING, nullable=False
    )
    verification: Mapped[EntryVerification] = mapped_column(
        Enum(EntryVerification), default=EntryVerification.UNKNOWN, nullable=False
    )
    is_special: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    special_access_token: Mapped[Optional[str]] = mapped_column(
        String(128), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(DateTime, default=_utc_now)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=_utc_now, onupdate=_utc_now
    )

    # Relationships
    author: Mapped["User"] = relationship("User", back_populates="entries")
    reports: Mapped[List["ContentReport"]] = relationship(
        "ContentReport", back_populates="entry", cascade="all, delete-orphan"
    )
    comments: Mapped[List["Comment"]] = relationship(
        "Comment", back_populates="entry", cascade="all, delete-orphan"
    )
    likes: Mapped[List["Like"]] = relationship(
        "Like", back_populates="entry", cascade="all, delete-orphan"
    )

    __table_args__ = (
        Index("ix_wiki_entries_user_id", "user_id"),
        Index("ix_wiki_entries_status", "status"),
        Index("ix_wiki_entries_verification", "verification"),
        Index("ix_wiki_entries_is_special", "is_special"),
    )


class UserImage(Base):
    __tablename__ = "user_images"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    user_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    image_url: Mapped[str] = mapped_column(Text, nullable=False)
    file_name: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=_utc_now)

    user: Mapped["User"] = relationship("User", back_populates="images")


class ContentReport(Base):
    __tablename__ = "content_reports"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    entry_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("wiki_entries.id", ondelete="CASCADE"), nullable=False
    )
    reporter_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    reason: Mapped[ReportReason] = mapped_column(Enum(ReportReason), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    status: Mapped[ReportStatus] = mapped_column(
        Enum(ReportStatus), default=ReportStatus.PENDING, nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(DateTime, default=_utc_now)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=_utc_now, onupdate=_utc_now
    )

    entry: Mapped["WikiEntry"] = relationship("WikiEntry", back_populates="reports")
    reporter: Mapped["User"] = relationship("User", back_populates="reports")

    __table_args__ = (
        Index("ix_content_reports_entry_id", "entry_id"),
        Index("ix_content_reports_reporter_id", "reporter_id"),
        Index("ix_content_reports_status", "status"),
    )


class Comment(Base):
    __tablename__ = "comments"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    entry_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("wiki_entries.id", ondelete="CASCADE"), nullable=False
    )
    user_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=_utc_now)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=_utc_now, onupdate=_utc_now
    )

    entry: Mapped["WikiEntry"] = relationship("WikiEntry", back_populates="comments")
    user: Mapped["User"] = relationship("User", back_populates="comments")

    __table_args__ = (
        Index("ix_comments_entry_id", "entry_id"),
        Index("ix_comments_user_id", "user_id"),
    )


class Like(Base):
    __tablename__ = "likes"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    entry_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("wiki_entries.id", ondelete="CASCADE"), nullable=False
    )
    user_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(DateTime, default=_utc_now)

    entry: Mapped["WikiEntry"] = relationship("WikiEntry", back_populates="likes")
    user: Mapped["User"] = relationship("User", back_populates="likes")

    __table_args__ = (
        # One like per user per entry, enforced by the database
        UniqueConstraint("entry_id", "user_id", name="uq_like_entry_user"),
        Index("ix_likes_entry_id", "entry_id"),
        Index("ix_likes_user_id", "user_id"),
    )
