# hackathons/sanitizers.py
"""
Input sanitization for user-generated hackathon content
(team names, descriptions, invite messages, submission notes).
"""
import html
import re
from typing import Optional

import bleach

# Entity-encoded markup is decoded one level per pass
MAX_DECODE_PASSES = 5


def _strip_tags(text: str) -> str:
    return bleach.clean(text, tags=[], attributes={}, strip=True)


def sanitize_text(text: Optional[str], max_length: Optional[int] = None, strip: bool = True) -> Optional[str]:
    """
    Sanitize plain text input.

    - Strips leading/trailing whitespace
    - Removes HTML tags, including tags smuggled in as entities
    - Removes control characters
    - Enforces maximum length
    - Passes None through so "clear this field" survives sanitizing
    """
    if text is None:
        return None

    # Strip and decode until nothing changes, so "&lt;b&gt;" cannot
    # come back as "<b>"
    for _ in range(MAX_DECODE_PASSES):
        decoded = html.unescape(_strip_tags(text))
        if decoded == text:
            break
        text = decoded
    else:
        # Still decoding after the last pass: keep the escaped form
        text = _strip_tags(text)

    if strip:
        text = text.strip()

    # Remove control characters except newlines and tabs
    text = re.sub(r'[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]', '', text)

    if max_length and len(text) > max_length:
        text = text[:max_length]

    return text


def sanitize_name(name: Optional[str], max_length: int = 100) -> Optional[str]:
    """
    Single-line names (teams).

    - No HTML
    - No newlines, whitespace collapsed
    """
    text = sanitize_text(name, max_length=max_length)
    if text is None:
        return None
    text = re.sub(r'\s+', ' ', text)
    return text
