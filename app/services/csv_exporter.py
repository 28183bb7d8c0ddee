"""
CSV export of a curated modifier selection.

Every selected option produces a pair of rows: the ingredient itself and
a "HOLD " variant a point-of-sale system offers as "remove ingredient".
Fields are written verbatim; text containing a comma is not quoted.
"""

import logging
from typing import List

from app.models import ConsolidatedModifiers

logger = logging.getLogger(__name__)

CSV_HEADER = ("Category", "Item")
CSV_DELIMITER = ","
HOLD_PREFIX = "HOLD "
EXPORT_FILENAME = "modifiers.csv"
EXPORT_MEDIA_TYPE = "text/csv"


def _row(*fields: str) -> str:
    return CSV_DELIMITER.join(fields)


def export_csv(modifiers: ConsolidatedModifiers) -> str:
    """
    Serialize the selected options to CSV text.

    Unselected options produce no rows. No quoting or escaping is applied,
    so a category or item containing a comma yields extra columns.

    Args:
        modifiers: Consolidated options carrying the caller's selection

    Returns:
        CSV text with a ``Category,Item`` header and ``\\n`` line endings
    """
    lines: List[str] = [_row(*CSV_HEADER)]

    for category, options in modifiers.modifiers.items():
        for option in options:
            if not option.selected:
                continue
            lines.append(_row(category, option.text))
            lines.append(_row(category, f"{HOLD_PREFIX}{option.text}"))

    logger.info(f"Exported {len(lines) - 1} modifier rows to CSV")
    return "\n".join(lines) + "\n"


def export_csv_bytes(modifiers: ConsolidatedModifiers) -> bytes:
    """UTF-8 encoded CSV for download responses."""
    return export_csv(modifiers).encode("utf-8")
