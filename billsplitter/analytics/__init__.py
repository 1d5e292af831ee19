"""Analytics package."""

from billsplitter.analytics.aggregator import (
    AnalyticsAggregator,
    aggregate,
    aggregate_for_person,
)
from billsplitter.analytics.categories import (
    CATEGORY_RULES,
    ItemCategory,
    categorize_item,
)

__all__ = [
    "AnalyticsAggregator",
    "CATEGORY_RULES",
    "ItemCategory",
    "aggregate",
    "aggregate_for_person",
    "categorize_item",
]
