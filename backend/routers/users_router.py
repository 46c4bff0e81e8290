from typing import List, Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

import authentication.auth as auth
import models.schemas as schemas
import repositories.db_models as db_models
from repositories.database import get_db
from services.gallery_service import GalleryService
from services.user_service import UserService

router = APIRouter(tags=["users"])


@router.get("/auth/user", response_model=Optional[schemas.User])
def get_auth_user(
    current_user: Optional[db_models.User] = Depends(auth.get_current_user_optional),
) -> Optional[db_models.User]:
    """Current user, or null for anonymous callers."""
    return current_user


@router.get("/users", response_model=List[schemas.UserWithEntryCount])
def list_users(
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(auth.get_current_active_user),
) -> List[schemas.UserWithEntryCount]:
    """All users with their entry counts."""
    return UserService.list_users_with_counts(db)


@router.get("/profile/{user_id}", response_model=schemas.UserProfile)
def get_profile(
    user_id: str,
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(auth.get_current_active_user),
) -> schemas.UserProfile:
    """
    A user's profile with the entries the caller may see.

    Domain exceptions are caught by centralized exception handlers.
    """
    return UserService.get_profile(db, user_id, current_user)


@router.patch("/user/profile", response_model=schemas.User)
def update_profile(
    payload: schemas.UserProfileUpdate,
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(auth.get_current_active_user),
) -> db_models.User:
    """Update own names and bio."""
    return UserService.update_profile(db, current_user, payload)


@router.patch("/user/avatar", response_model=schemas.User)
def update_avatar(
    payload: schemas.AvatarUpdate,
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(auth.get_current_active_user),
) -> db_models.User:
    """Set own profile picture."""
    return UserService.set_avatar(db, current_user, payload.image_url)


@router.patch("/user/background", response_model=schemas.User)
def update_background(
    payload: schemas.BackgroundUpdate,
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(auth.get_current_active_user),
) -> db_models.User:
    """Set own profile background."""
    return UserService.set_background(db, current_user, payload.background_url)


# Gallery


@router.get("/user/gallery", response_model=List[schemas.Image])
def get_gallery(
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(auth.get_current_active_user),
) -> List[db_models.UserImage]:
    """Own gallery, newest first."""
    return GalleryService.list_images(db, current_user)


@router.post(
    "/user/gallery", response_model=schemas.Image, status_code=status.HTTP_201_CREATED
)
def add_gallery_image(
    image: schemas.ImageCreate,
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(auth.get_current_active_user),
) -> db_models.UserImage:
    """Add an image to own gallery."""
    return GalleryService.add_image(
        db, current_user, image.image_url, file_name=image.file_name
    )


@router.delete("/user/gallery/{image_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_gallery_image(
    image_id: str,
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(auth.get_current_active_user),
) -> None:
    """Remove an image from own gallery."""
    GalleryService.delete_image(db, image_id, current_user)
