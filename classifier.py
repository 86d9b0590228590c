"""Keyword classification of free-text search queries."""

from collections.abc import Mapping
from types import MappingProxyType

from schema import Category

# Definition order is significant: the first category with a matching trigger
# wins, so "clean the kitchen" classifies as cleaning.
CATEGORY_TRIGGERS: Mapping[Category, tuple[str, ...]] = MappingProxyType({
    Category.CLEANING: ('window clean', 'clean', 'cleaner', 'cleaning', 'wash',
                        'pressure wash'),
    Category.KITCHEN: ('kitchen', 'worktop', 'cabinet', 'cupboard'),
    Category.BATHROOM: ('bathroom', 'shower', 'toilet', 'basin', 'bath'),
    Category.FLOORING: ('floor', 'carpet', 'laminate', 'vinyl', 'tile floor'),
    Category.HEATING: ('heat', 'boiler', 'radiator', 'central heating'),
    Category.ELECTRICAL: ('electric', 'wiring', 'socket', 'lighting'),
    Category.ROOFING: ('roof', 'gutter', 'slate', 'tile roof'),
    Category.WINDOWS: ('window', 'double glaz', 'upvc'),
    Category.DOORS: ('door', 'entrance', 'patio door'),
    Category.GARDEN: ('garden', 'landscap', 'fence', 'patio'),
    Category.PAINTING: ('paint', 'decorat', 'wallpaper'),
    Category.PLUMBING: ('plumb', 'pipe', 'drain', 'tap'),
    Category.TOOLS: ('tool', 'drill', 'saw', 'equipment'),
    Category.AUTOMOTIVE: ('car', 'vehicle', 'auto', 'motor'),
    Category.ELECTRONICS: ('computer', 'laptop', 'phone', 'tv'),
})


class CategoryClassifier:
    """First-match-wins substring classifier over an ordered trigger table."""

    def __init__(self,
                 triggers: Mapping[Category, tuple[str, ...]] | None = None):
        self.triggers = CATEGORY_TRIGGERS if triggers is None else triggers

    def classify(self, query: str) -> Category | None:
        """
        Map a query to the first category whose triggers it contains.

        Args:
            query (str): free text (case insensitive)

        Returns:
            The matching Category, or None if no trigger appears in the query.
        """

        query = query.lower()
        for category, keywords in self.triggers.items():
            if any(keyword in query for keyword in keywords):
                return category
        return None


_default_classifier = CategoryClassifier()


def classify(query: str) -> Category | None:
    """Classify a query with the default trigger table."""

    return _default_classifier.classify(query)
