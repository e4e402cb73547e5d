# fooddelivery/seed.py
"""Load demo restaurants and menus: python -m fooddelivery.seed [file.json]"""
from __future__ import annotations

import json
import sys
from pathlib import Path

from . import accounts, catalog
from .auth import ROLE_RESTAURANT
from .db import db_session, init_db
from .schemas import MenuItemIn, RestaurantRegisterIn

# Demo restaurants live here
DATA_FILE = Path(__file__).resolve().parents[1] / "data" / "restaurants.json"


def seed(path: Path) -> int:
    entries = json.loads(path.read_text(encoding="utf-8"))
    init_db()

    made = 0
    db = db_session()
    try:
        for entry in entries:
            menu = entry.pop("menu", [])
            payload = RestaurantRegisterIn(**entry)

            if accounts.find_by_email(db, ROLE_RESTAURANT, payload.email):
                print(f"SKIP (exists): {payload.email}")
                continue

            restaurant = accounts.register(db, ROLE_RESTAURANT, payload).principal
            for item in menu:
                catalog.add_menu_item(db, restaurant, MenuItemIn(**item))

            print(f"OK  {restaurant.name}  ->  id={restaurant.id}  ({len(menu)} menu items)")
            made += 1
    finally:
        db.close()

    print(f"\nDone. Seeded {made} restaurants from: {path}")
    return made


def main() -> None:
    path = Path(sys.argv[1]) if len(sys.argv) > 1 else DATA_FILE
    if not path.exists():
        raise SystemExit(f"No seed file found at {path}")
    seed(path)


if __name__ == "__main__":
    main()
