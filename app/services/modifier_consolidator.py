"""
Consolidation of modifier phrases across menu items and images.
"""

import logging
from typing import Dict, Iterable, List, Optional

from app.models import ConsolidatedModifiers, MenuItem, ModifierOption
from .text_normalizer import normalize

logger = logging.getLogger(__name__)


def consolidate(
    items: Iterable[MenuItem],
    category_order: Optional[List[str]] = None
) -> ConsolidatedModifiers:
    """
    Merge every item's modifier groups into one per-category option list.

    Phrases are compared by their canonical form, so case, spacing and
    trailing markers are ignored, and the first original seen is kept. Unlike per-item classification this is first-write-wins, not
    longest-wins. Each category is then sorted case-insensitively.

    Args:
        items: Menu items from one or more images, in processing order
        category_order: Optional category key order for the result;
            categories not listed keep first-seen order after the listed ones

    Returns:
        ConsolidatedModifiers with every option unselected
    """
    merged: Dict[str, List[ModifierOption]] = {}
    seen: Dict[str, set] = {}
    item_count = 0

    for item in items:
        item_count += 1
        for group in item.modifiers:
            options = merged.setdefault(group.category, [])
            recorded = seen.setdefault(group.category, set())
            for phrase in group.items:
                key = normalize(phrase)
                if key in recorded:
                    continue
                recorded.add(key)
                options.append(ModifierOption(text=phrase, selected=False))

    for options in merged.values():
        options.sort(key=lambda option: option.text.lower())

    if category_order:
        ordered = {category: merged[category] for category in category_order if category in merged}
        ordered.update({k: v for k, v in merged.items() if k not in ordered})
        merged = ordered

    logger.debug(
        f"Consolidated {item_count} menu items into "
        f"{sum(len(v) for v in merged.values())} options across {len(merged)} categories"
    )
    return ConsolidatedModifiers(modifiers=merged)
