"""Seed the achievement catalog into the database."""
from __future__ import annotations

import sys
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parent.parent))

from app.core.achievements import DEFAULT_CATALOG
from app.db.session import session_scope
from app.services.achievement_service import AchievementService


def main() -> None:
    """Insert missing catalog rows and refresh existing ones by key."""

    print(f"Seeding {len(DEFAULT_CATALOG)} achievement definitions...")
    with session_scope() as db:
        created = AchievementService(db).seed_catalog(DEFAULT_CATALOG)

    print("✓ Achievement seeding complete!")
    print(f"  Created: {created}, updated: {len(DEFAULT_CATALOG) - created}")
    types = sorted({definition.achievement_type.value for definition in DEFAULT_CATALOG})
    print(f"  Types: {', '.join(types)}")


if __name__ == "__main__":
    main()
