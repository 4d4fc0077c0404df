"""
Strips markup noise from rendered HTML before it is shown to the LLM.
"""

import re
from typing import Optional


_NOISE_PATTERNS = [
    re.compile(r"<script[^>]*>.*?</script>", re.IGNORECASE | re.DOTALL),
    re.compile(r"<style[^>]*>.*?</style>", re.IGNORECASE | re.DOTALL),
    re.compile(r"<head[^>]*>.*?</head>", re.IGNORECASE | re.DOTALL),
    re.compile(r"<svg[^>]*>.*?</svg>", re.IGNORECASE | re.DOTALL),
    re.compile(r"<!--.*?-->", re.DOTALL),
]
_WHITESPACE = re.compile(r"\s+")


def clean_html(html: str, max_chars: Optional[int] = None) -> str:
    """
    Remove scripts, styles, head, svg blocks and comments, then collapse whitespace.

    Args:
        html: Raw page HTML
        max_chars: Optional cap on the cleaned length (no cap by default)

    Returns:
        Cleaned HTML on a single line
    """
    if not html:
        return ""

    cleaned = html
    for pattern in _NOISE_PATTERNS:
        cleaned = pattern.sub("", cleaned)

    cleaned = _WHITESPACE.sub(" ", cleaned).strip()

    if max_chars is not None and len(cleaned) > max_chars:
        cleaned = cleaned[:max_chars]

    return cleaned
