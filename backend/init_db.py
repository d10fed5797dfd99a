"""Initialize the database schema and promote the initial admin profile."""

import uuid
from datetime import datetime, timezone

from loguru import logger
from sqlalchemy.orm import Session

from models.config import settings
from repositories.database import Base, SessionLocal, engine
from repositories.db_models import Profile, Role


def promote_initial_admin(db: Session, admin_id: str | None) -> bool:
    """
    Give the admin role to ``admin_id``.

    Profiles are created on first sign-in, so the admin has to sign in once
    before this can succeed.

    Returns:
        True when a profile was promoted (or already admin).
    """
    if not admin_id:
        logger.info("INITIAL_ADMIN_ID not set; no admin promoted")
        return False

    try:
        profile_id = uuid.UUID(admin_id)
    except ValueError:
        logger.error(f"INITIAL_ADMIN_ID is not a UUID: {admin_id!r}")
        return False

    profile = db.get(Profile, profile_id)
    if profile is None:
        logger.warning(
            f"Profile {profile_id} not found; sign in once, then run init_db again"
        )
        return False

    if profile.role != Role.ADMIN:
        profile.role = Role.ADMIN
        profile.updated_at = datetime.now(timezone.utc)
        db.commit()
        logger.info(f"Profile {profile_id} promoted to admin")
    return True


def init_db() -> None:
    """Create tables and promote the configured admin."""
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables created")

    db = SessionLocal()
    try:
        promote_initial_admin(db, settings.INITIAL_ADMIN_ID)
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    init_db()
