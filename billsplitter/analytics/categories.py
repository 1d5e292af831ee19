"""
Item Categorization

Keyword-based category detection for item names. Rules are checked in
order against the lowercased name and the first rule with a matching
keyword wins; anything unmatched is OTHER.
"""

from enum import Enum


class ItemCategory(str, Enum):
    """Spending categories for items."""
    FOOD = "Food"
    BEVERAGES = "Beverages"
    TRANSPORTATION = "Transportation"
    ENTERTAINMENT = "Entertainment"
    SERVICE = "Service"
    OTHER = "Other"


CATEGORY_RULES: tuple[tuple[ItemCategory, tuple[str, ...]], ...] = (
    (ItemCategory.FOOD, (
        "pizza", "burger", "sandwich", "salad", "pasta",
        "rice", "chicken", "beef", "fish",
    )),
    (ItemCategory.BEVERAGES, (
        "coffee", "tea", "beer", "wine", "cocktail",
        "soda", "juice", "water",
    )),
    (ItemCategory.TRANSPORTATION, (
        "taxi", "uber", "lyft", "bus", "train",
        "gas", "parking", "toll",
    )),
    (ItemCategory.ENTERTAINMENT, (
        "movie", "concert", "game", "show", "ticket", "entertainment",
    )),
    (ItemCategory.SERVICE, (
        "tip", "service", "fee",
    )),
)


def categorize_item(name: str) -> ItemCategory:
    """
    Detect the category of an item from its name.

    Substring matching, so "Chicken wings" is FOOD and "Iced tea" is
    BEVERAGES.
    """
    lowered = name.lower()
    for category, keywords in CATEGORY_RULES:
        if any(keyword in lowered for keyword in keywords):
            return category
    return ItemCategory.OTHER
