"""
Repository pattern implementation for data access layer.
"""

from .base import BaseRepository
from .comment_repository import CommentRepository
from .entry_repository import EntryRepository
from .image_repository import ImageRepository
from .like_repository import LikeRepository
from .report_repository import ReportRepository
from .user_repository import UserRepository

__all__ = [
    "BaseRepository",
    "CommentRepository",
    "EntryRepository",
    "ImageRepository",
    "LikeRepository",
    "ReportRepository",
    "UserRepository",
]
