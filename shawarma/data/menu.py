from __future__ import annotations

from typing import List, Optional

from .models import MenuItem

# Prices in minor units (sen).
MENU_ITEMS: List[MenuItem] = [
    MenuItem(id="chicken-shawarma", name="Chicken Shawarma", default_price=1000, category="Shawarma"),
    MenuItem(id="beef-shawarma", name="Beef Shawarma", default_price=1200, category="Shawarma"),
    MenuItem(id="lamb-shawarma", name="Lamb Shawarma", default_price=1400, category="Shawarma"),
    MenuItem(id="cheese-shawarma", name="Cheesy Chicken Shawarma", default_price=1200, category="Shawarma"),
    MenuItem(id="shawarma-plate", name="Shawarma Plate", default_price=1500, category="Plates"),
    MenuItem(id="fries", name="Fries", default_price=500, category="Sides"),
    MenuItem(id="garlic-sauce", name="Extra Garlic Sauce", default_price=100, category="Sides"),
    MenuItem(id="soft-drink", name="Soft Drink", default_price=300, category="Drinks"),
]


def active_menu_items() -> List[MenuItem]:
    return [item for item in MENU_ITEMS if item.is_active]


def find_menu_item(name: str) -> Optional[MenuItem]:
    """Look up an active menu item by its display name."""
    for item in active_menu_items():
        if item.name == name:
            return item
    return None
