"""
Text normalization for OCR menu fragments.

Produces the canonical form used whenever two phrases are compared for
equality: case-folded, whitespace-collapsed, with trailing periods and
"(optional)" markers removed.
"""

import re

_WHITESPACE_RE = re.compile(r'\s+')
_OPTIONAL_MARKER_RE = re.compile(r'\s*\(optional\)$', re.IGNORECASE)


def strip_trailing_markers(text: str) -> str:
    """
    Remove trailing periods and "(optional)" markers, keeping the casing.

    Markers are stripped until the string is stable, so ``"Ham (optional)."``
    becomes ``"Ham"``.
    """
    current = text.strip()

    while True:
        stripped = _OPTIONAL_MARKER_RE.sub('', current)
        if stripped.endswith('.'):
            stripped = stripped[:-1]
        stripped = stripped.strip()

        if stripped == current:
            return current
        current = stripped


def normalize(text: str) -> str:
    """
    Canonicalize a menu text fragment for comparison.

    Trailing markers are stripped until the string is stable so that
    ``normalize(normalize(s)) == normalize(s)`` holds for inputs such as
    ``"Ham (optional)."``.

    Args:
        text: Raw OCR or menu text

    Returns:
        Canonical comparison string
    """
    return strip_trailing_markers(_WHITESPACE_RE.sub(' ', text.lower()))
