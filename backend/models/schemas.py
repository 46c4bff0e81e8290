from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from repositories.db_models import (
    EntryStatus,
    EntryVerification,
    ReportReason,
    ReportStatus,
    UserBadge,
    UserRole,
)


# User Schemas
class UserPublic(BaseModel):
    """Public user profile (visible to others)."""

    id: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    display_name: str
    bio: Optional[str] = None
    profile_image_url: Optional[str] = None
    profile_background_url: Optional[str] = None
    role: UserRole
    badge: UserBadge

    model_config = ConfigDict(from_attributes=True)


class User(UserPublic):
    email: Optional[str] = None
    is_admin: bool
    is_banned: bool
    banned_until: Optional[datetime] = None
    ban_reason: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class UserWithEntryCount(User):
    entry_count: int = 0


class UserProfileUpdate(BaseModel):
    first_name: Optional[str] = Field(default=None, max_length=100)
    last_name: Optional[str] = Field(default=None, max_length=100)
    bio: Optional[str] = Field(default=None, max_length=2000)


class AvatarUpdate(BaseModel):
    image_url: str = Field(..., min_length=1)


class BackgroundUpdate(BaseModel):
    background_url: str = Field(..., min_length=1)


# Identity provider claims
class IdentityClaims(BaseModel):
    """Claims read from an identity provider bearer token."""

    sub: str = Field(..., min_length=1)
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    profile_image_url: Optional[str] = None

    model_config = ConfigDict(extra="ignore")


# Admin user management
class RoleUpdate(BaseModel):
    role: UserRole


class BadgeUpdate(BaseModel):
    badge: UserBadge


class BanRequest(BaseModel):
    reason: str = Field(..., min_length=1, max_length=1000)
    hours: Optional[float] = Field(
        default=None,
        ge=0,
        description="Ban length in hours; omit or 0 for a permanent ban",
    )


# Wiki Entry Schemas
# Unknown keys (including `status`) are ignored, so callers cannot pick the
# moderation state of their own entries.
class EntryCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)
    image_url: Optional[str] = None
    is_special: bool = False

    model_config = ConfigDict(extra="ignore")


class EntryUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = Field(default=None, min_length=1)
    image_url: Optional[str] = None
    is_special: Optional[bool] = None

    model_config = ConfigDict(extra="ignore")


class EntrySpecialUpdate(BaseModel):
    is_special: bool


class EntryModerate(BaseModel):
    status: EntryStatus


class EntryVerify(BaseModel):
    verification: EntryVerification


class Entry(BaseModel):
    id: str
    user_id: str
    title: str
    description: str
    image_url: Optional[str] = None
    status: EntryStatus
    verification: EntryVerification
    is_special: bool
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class OwnedEntry(Entry):
    """Entry as seen by its owner, including the special access token."""

    special_access_token: Optional[str] = None


class EntryWithAuthor(Entry):
    author: UserPublic


class UserProfile(UserPublic):
    entries: List[Entry]


# Gallery Schemas
class ImageCreate(BaseModel):
    image_url: str = Field(..., min_length=1)
    file_name: Optional[str] = Field(default=None, max_length=255)


class Image(BaseModel):
    id: str
    user_id: str
    image_url: str
    file_name: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


# Report Schemas
class ReportCreate(BaseModel):
    entry_id: str = Field(..., min_length=1)
    reason: ReportReason
    description: Optional[str] = Field(default=None, max_length=2000)
    token: Optional[str] = Field(
        default=None, description="Share link token when reporting a special entry"
    )


class ReportStatusUpdate(BaseModel):
    status: ReportStatus


class Report(BaseModel):
    id: str
    entry_id: str
    reporter_id: str
    reason: ReportReason
    description: Optional[str] = None
    status: ReportStatus
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ReportWithDetails(Report):
    entry: EntryWithAuthor
    reporter: UserPublic


# Comment Schemas
class CommentCreate(BaseModel):
    entry_id: str = Field(..., min_length=1)
    content: str = Field(..., min_length=1, max_length=5000)
    token: Optional[str] = None


class Comment(BaseModel):
    id: str
    entry_id: str
    user_id: str
    content: str
    created_at: datetime
    user: UserPublic

    model_config = ConfigDict(from_attributes=True)


# Like Schemas
class LikeCreate(BaseModel):
    entry_id: str = Field(..., min_length=1)
    token: Optional[str] = None


class Like(BaseModel):
    id: str
    entry_id: str
    user_id: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class LikeSummary(BaseModel):
    entry_id: str
    count: int
    liked_by_me: bool = False
