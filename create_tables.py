"""Create the schema without alembic and seed the achievement catalog (local development)."""
from app.core.achievements import DEFAULT_CATALOG
from app.db import models  # noqa: F401
from app.db.base import Base
from app.db.session import engine, session_scope
from app.services.achievement_service import AchievementService

if __name__ == "__main__":
    print("Creating tables...")
    Base.metadata.create_all(bind=engine)
    with session_scope() as db:
        created = AchievementService(db).seed_catalog(DEFAULT_CATALOG)
    print(f"Tables created, {created} achievements seeded.")
