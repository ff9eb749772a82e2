"""Slug generation for heading anchors and export file names"""

import re


def heading_id(text: str) -> str:
    """Anchor id for a heading: lowercase, punctuation dropped, whitespace runs -> '-'."""
    text = re.sub(r'[^\w\s]', '', text.lower())
    return re.sub(r'\s+', '-', text)


def slugify(text: str) -> str:
    """Convert text to a lowercase, hyphen-separated URL-safe slug."""
    text = text.lower()
    text = re.sub(r'[^\w\s-]', '', text)
    text = re.sub(r'[\s_]+', '-', text)
    return re.sub(r'-+', '-', text).strip('-')


def safe_filename(text: str, limit: int = 50) -> str:
    """Lowercase text with every character outside [a-z0-9] replaced by '_'."""
    return re.sub(r'[^a-z0-9]', '_', text.lower())[:limit]
