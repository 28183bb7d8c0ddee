"""
Modifier Classifier for bucketing ingredient phrases into categories.

Splits a dish description into ingredient fragments and assigns each
fragment to the first category whose keyword it contains.
"""

import re
import logging
from typing import Dict, List, Optional, Sequence

from app.models import CategoryKeywords, ModifierCategory, ModifierGroup
from .text_normalizer import normalize, strip_trailing_markers

logger = logging.getLogger(__name__)


# Checked top to bottom; the first matching row wins
CATEGORY_KEYWORDS = (
    CategoryKeywords(ModifierCategory.SAUCES, ("sauce", "oil", "gravy")),
    CategoryKeywords(ModifierCategory.CHEESES, ("cheese", "mozzarella", "ricotta")),
    CategoryKeywords(
        ModifierCategory.MEATS,
        ("chicken", "bacon", "ham", "salami", "pepperoni",
         "prawns", "chorizo", "sausage", "meatball"),
    ),
    CategoryKeywords(
        ModifierCategory.VEGETABLES,
        ("mushroom", "olive", "spinach", "capsicum", "onion", "artichoke", "jalapeno"),
    ),
    CategoryKeywords(ModifierCategory.SEASONINGS, ("garlic", "oregano", "chili", "chipotle")),
)

FILLER_WORDS = frozenset({"the", "a", "an", "our", "fresh", "premium", "special", "house"})

FRAGMENT_SEPARATOR_PATTERN = r',|\s+and\s+|\bwith\b|\+'


class ModifierClassifier:
    """
    Keyword classifier for menu item descriptions.

    Classification is a pure function of the description text and the
    keyword table, so one instance can be shared freely.
    """

    def __init__(
        self,
        keyword_table: Optional[Sequence[CategoryKeywords]] = None,
        filler_words: Optional[frozenset] = None
    ):
        self.keyword_table = tuple(keyword_table or CATEGORY_KEYWORDS)
        self.filler_words = filler_words or FILLER_WORDS
        self.separator = re.compile(FRAGMENT_SEPARATOR_PATTERN, re.IGNORECASE)

    def split_fragments(self, description: str) -> List[str]:
        """
        Split a description into non-filler ingredient fragments.

        Trailing periods and "(optional)" markers of the whole description are
        removed first; fragments otherwise keep their original casing.
        """
        fragments = []
        for fragment in self.separator.split(strip_trailing_markers(description)):
            fragment = " ".join(fragment.split())
            if not fragment or normalize(fragment) in self.filler_words:
                continue
            fragments.append(fragment)
        return fragments

    def categorize(self, fragment: str) -> Optional[str]:
        """Return the category of a single fragment, or None if nothing matches."""
        canonical = normalize(fragment)
        for row in self.keyword_table:
            if row.matches(canonical):
                return row.category.value
        return None

    def classify(self, description: str) -> Dict[str, List[str]]:
        """
        Bucket the ingredient phrases of a description by category.

        Phrases that normalize to the same canonical form are merged,
        keeping the longest original; ties keep the first seen.

        Args:
            description: Full accumulated item description

        Returns:
            Ordered mapping of category -> phrases, empty categories omitted
        """
        buckets: Dict[str, Dict[str, str]] = {}

        for fragment in self.split_fragments(description):
            category = self.categorize(fragment)
            if category is None:
                continue

            bucket = buckets.setdefault(category, {})
            key = normalize(fragment)
            current = bucket.get(key)
            if current is None or len(fragment) > len(current):
                bucket[key] = fragment

        # Emit in table order regardless of discovery order
        result = {}
        for row in self.keyword_table:
            bucket = buckets.get(row.category.value)
            if bucket:
                result[row.category.value] = list(bucket.values())
        return result

    def build_modifier_groups(self, description: str) -> List[ModifierGroup]:
        """Classify a description into the ModifierGroup list a MenuItem carries."""
        return [
            ModifierGroup(category=category, items=items)
            for category, items in self.classify(description).items()
        ]

    def category_order(self) -> List[str]:
        return [row.category.value for row in self.keyword_table]


default_classifier = ModifierClassifier()


def classify(description: str) -> Dict[str, List[str]]:
    """Classify a description with the default keyword table."""
    return default_classifier.classify(description)
