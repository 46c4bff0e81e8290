"""
Services layer for business logic.

This package contains service modules that encapsulate business logic
separate from the API routes.
"""

from .access_policy_service import AccessPolicyService
from .comment_service import CommentService
from .entry_service import EntryService
from .gallery_service import GalleryService
from .like_service import LikeService
from .report_service import ReportService
from .user_service import UserService

__all__ = [
    "AccessPolicyService",
    "CommentService",
    "EntryService",
    "GalleryService",
    "LikeService",
    "ReportService",
    "UserService",
]
