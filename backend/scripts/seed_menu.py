"""
Seed the catering menu and a bootstrap admin account.

This script provides idempotent seeding:
- Menu items are matched by name; existing items are left alone unless
  --update is given, in which case their fields are refreshed
- The admin account is created only when no user has that email

Usage:
    python -m scripts.seed_menu [--menu-file path/to/menu.json] [--update]
                                [--admin-email admin@dsis.com] [--admin-password ...]

Environment:
    APP_DATABASE_URL: Database connection (default: sqlite:///catering.db)
"""

import argparse
import json
import logging
import os
import sys
from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

# Add the backend directory to path so we can import catering modules
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from catering.db import user_utils
from catering.db.menu_utils import DEFAULT_MENU, create_menu_item
from catering.db.models import MenuItem
from catering.storage.sqlalchemy_adapter import DEFAULT_DATABASE_URL, SQLAlchemyStorage
from catering.utils.money import to_cents

# Setup logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

DEFAULT_ADMIN = {
    "username": "admin",
    "email": "admin@dsis.com",
    "password": "admin123",
    "first_name": "Admin",
    "last_name": "User",
}


def load_menu_json(menu_file: str) -> List[Dict[str, Any]]:
    """
    Load menu entries from a JSON file.

    The file holds a list of objects with item_name, category, price and
    optionally description, image_url and is_available.
    """
    if not os.path.exists(menu_file):
        raise FileNotFoundError(f"Menu file not found: {menu_file}")

    with open(menu_file, 'r', encoding='utf-8') as f:
        menu = json.load(f)

    if not isinstance(menu, list):
        raise ValueError("Menu file must contain a JSON list")
    logger.info("Loaded %d menu entries from %s", len(menu), menu_file)
    return menu


def seed_menu(session: Session, menu: List[Dict[str, Any]], update: bool = False) -> Dict[str, int]:
    """
    Insert menu entries that are not present yet (matched by item name).

    Returns:
        Dict with items_created, items_updated and items_skipped counts
    """
    stats = {"items_created": 0, "items_updated": 0, "items_skipped": 0}

    for entry in menu:
        name = (entry.get("item_name") or "").strip()
        if not name or entry.get("category") is None or entry.get("price") is None:
            logger.warning("Skipping incomplete menu entry: %r", entry)
            stats["items_skipped"] += 1
            continue

        existing = session.execute(select(MenuItem).where(MenuItem.item_name == name)).scalars().first()
        if existing is None:
            create_menu_item(
                session,
                item_name=name,
                category=entry["category"],
                price=entry["price"],
                description=entry.get("description", ""),
                image_url=entry.get("image_url", ""),
                is_available=entry.get("is_available", True),
            )
            stats["items_created"] += 1
        elif update:
            existing.category = entry["category"]
            existing.price_per_serving = to_cents(entry["price"])
            existing.description = entry.get("description", existing.description)
            existing.image_url = entry.get("image_url", existing.image_url)
            stats["items_updated"] += 1
        else:
            stats["items_skipped"] += 1

    session.commit()
    logger.info(
        "Menu seeded: %d created, %d updated, %d skipped",
        stats["items_created"], stats["items_updated"], stats["items_skipped"],
    )
    return stats


def ensure_admin(session: Session, email: str, password: str, username: Optional[str] = None) -> bool:
    """Create the bootstrap admin unless an account with that email exists. Returns True if created."""
    if user_utils.find_by_email(session, email) is not None:
        logger.info("Admin %s already exists", email)
        return False

    user_utils.create_user(
        session,
        username=username or DEFAULT_ADMIN["username"],
        email=email,
        password=password,
        first_name=DEFAULT_ADMIN["first_name"],
        last_name=DEFAULT_ADMIN["last_name"],
        user_type="admin",
    )
    session.commit()
    logger.info("Created admin %s", email)
    return True


def main(argv: Optional[List[str]] = None) -> int:
    """Command-line interface for seeding."""
    parser = argparse.ArgumentParser(
        description="Seed the catering menu and a bootstrap admin idempotently"
    )
    parser.add_argument(
        '--menu-file',
        help='Path to a JSON menu list (default: built-in catering menu)',
        default=None
    )
    parser.add_argument(
        '--update',
        action='store_true',
        help='Refresh price/category/description of items that already exist'
    )
    parser.add_argument('--admin-email', default=DEFAULT_ADMIN["email"])
    parser.add_argument('--admin-password', default=DEFAULT_ADMIN["password"])
    parser.add_argument(
        '--skip-admin',
        action='store_true',
        help='Do not create the bootstrap admin account'
    )
    parser.add_argument(
        '--database-url',
        help=f'Database URL (default: env var APP_DATABASE_URL or {DEFAULT_DATABASE_URL})',
        default=None
    )

    args = parser.parse_args(argv)

    try:
        menu = load_menu_json(args.menu_file) if args.menu_file else DEFAULT_MENU
    except (OSError, ValueError) as e:
        logger.error("Failed to load menu: %s", e)
        return 1

    db_url = args.database_url or os.getenv('APP_DATABASE_URL', DEFAULT_DATABASE_URL)
    logger.info("Using database: %s", db_url)

    # Use create_all for safety in scripts
    storage = SQLAlchemyStorage(db_url, use_alembic=False)
    session = storage._get_session()

    try:
        stats = seed_menu(session, menu, update=args.update)
        admin_created = False if args.skip_admin else ensure_admin(session, args.admin_email, args.admin_password)

        print("\n" + "=" * 60)
        print("SEED RESULTS")
        print("=" * 60)
        print(f"Items Created:    {stats['items_created']}")
        print(f"Items Updated:    {stats['items_updated']}")
        print(f"Items Skipped:    {stats['items_skipped']}")
        print(f"Admin Created:    {admin_created}")
        print("=" * 60 + "\n")

        return 0

    except Exception as e:
        logger.error("Seeding failed: %s", e, exc_info=True)
        session.rollback()
        return 1
    finally:
        session.close()
        storage.close()


if __name__ == '__main__':
    sys.exit(main())
