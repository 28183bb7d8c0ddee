"""
Menu Segmenter for grouping OCR text lines into menu items.

Handles heading detection, price/noise line filtering and description
accumulation. Modifiers are recomputed from the full description each
time it grows.
"""

import re
import logging
from typing import List, Optional

from app.models import MenuItem
from .modifier_classifier import ModifierClassifier, default_classifier
from .text_normalizer import normalize

logger = logging.getLogger(__name__)


# Header and noise lines, matched against the normalized line
NOISE_PATTERNS = [
    r"^((our|the|lunch|dinner|daily|weekly|chef'?s|house)\s+)?"
    r"(menu|specials?|pizzas?|starters?|appetizers?|entrees?|mains?|"
    r"desserts?|drinks?|beverages?|sides?|salads?|pastas?)"
    r"(\s+menu)?$",
]

# Standalone prices without a currency marker, e.g. "18" or "18.50"
PRICE_ONLY_PATTERN = r'^\d{1,4}(?:[.,]\d{1,2})?$'

CURRENCY_MARKER = "$"
MIN_LINE_LENGTH = 2
DESCRIPTION_JOINER = ", "


class MenuSegmenter:
    """
    Parser for converting raw OCR text into structured menu items.

    A line opens a new item when it is entirely upper-case or when the
    line after it contains a comma (an ingredient list follows a title).
    Other lines extend the description of the open item; lines seen
    before the first heading are dropped.
    """

    def __init__(
        self,
        classifier: Optional[ModifierClassifier] = None,
        noise_patterns: Optional[List[str]] = None
    ):
        self.classifier = classifier or default_classifier
        self.noise_patterns = [
            re.compile(p, re.IGNORECASE)
            for p in (noise_patterns or NOISE_PATTERNS)
        ]
        self.price_pattern = re.compile(PRICE_ONLY_PATTERN)

    def is_noise(self, line: str) -> bool:
        """Check whether a line carries a price, a header label or too little text."""
        stripped = line.strip()
        if len(stripped) < MIN_LINE_LENGTH:
            return True
        if CURRENCY_MARKER in stripped:
            return True

        canonical = normalize(stripped)
        if self.price_pattern.match(canonical):
            return True
        return any(pattern.match(canonical) for pattern in self.noise_patterns)

    @staticmethod
    def is_heading(line: str, next_line: Optional[str]) -> bool:
        if line.strip().isupper():
            return True
        return next_line is not None and "," in next_line

    def segment(self, raw_text: str) -> List[MenuItem]:
        """
        Split raw OCR text into menu items.

        Args:
            raw_text: Full-page text for one image

        Returns:
            Menu items in input order
        """
        lines = [line.strip() for line in raw_text.splitlines() if line.strip()]

        items: List[MenuItem] = []
        current: Optional[MenuItem] = None
        skipped = 0

        for index, line in enumerate(lines):
            if self.is_noise(line):
                skipped += 1
                continue

            next_line = lines[index + 1] if index + 1 < len(lines) else None

            if self.is_heading(line, next_line):
                if current is not None:
                    items.append(current)
                current = MenuItem(name=line, description="", modifiers=[])
                continue

            if current is None:
                skipped += 1
                continue

            if current.description:
                current.description = f"{current.description}{DESCRIPTION_JOINER}{line}"
            else:
                current.description = line
            current.modifiers = self.classifier.build_modifier_groups(current.description)

        if current is not None:
            items.append(current)

        logger.debug(
            f"Segmented {len(lines)} lines into {len(items)} menu items "
            f"({skipped} lines skipped)"
        )
        return items


default_segmenter = MenuSegmenter()


def segment(raw_text: str) -> List[MenuItem]:
    """Segment raw OCR text with the default classifier."""
    return default_segmenter.segment(raw_text)
