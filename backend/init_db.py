"""Initialize the database and promote the bootstrap admin account."""

from typing import Optional

from sqlalchemy.orm import Session

from models.config import settings
from repositories.database import Base, SessionLocal, engine
from repositories.db_models import User, UserRole


def promote_bootstrap_admin(db: Session, email: Optional[str]) -> Optional[User]:
    """Give the admin role to the account with the given email.

    Accounts are created on first sign-in through the identity provider, so
    nothing happens until that user has logged in once.

    Args:
        db: Database session
        email: Email of the account to promote

    Returns:
        The promoted user, or None if no such account exists yet
    """
    if not email:
        return None

    user = db.query(User).filter(User.email == email).first()
    if user is None:
        return None

    if user.role != UserRole.ADMIN:
        user.role = UserRole.ADMIN
        db.commit()
        db.refresh(user)
    return user


def init_db() -> None:
    """Create tables and apply bootstrap data."""
    Base.metadata.create_all(bind=engine)
    print("[OK] Database tables created")

    db = SessionLocal()
    try:
        admin = promote_bootstrap_admin(db, settings.BOOTSTRAP_ADMIN_EMAIL)
        if admin is not None:
            print(f"[OK] {admin.email} has the admin role")
        elif settings.BOOTSTRAP_ADMIN_EMAIL:
            print(
                f"[..] {settings.BOOTSTRAP_ADMIN_EMAIL} has not signed in yet; "
                "run init_db.py again after their first login"
            )

        print("\n[OK] Database initialization complete!")
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    init_db()
