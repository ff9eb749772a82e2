"""Inline span formatting: code, bold, italic, links, escaped line breaks"""

import re


# Applied in order; each stage sees the previous stage's output.
INLINE_STAGES: tuple[tuple[re.Pattern, str], ...] = (
    (re.compile(r'`([^`]+)`'),               r'<code>\1</code>'),
    (re.compile(r'\*\*([^*]+)\*\*'),         r'<strong>\1</strong>'),
    (re.compile(r'__([^_]+)__'),             r'<strong>\1</strong>'),
    (re.compile(r'\*([^*]+)\*'),             r'<em>\1</em>'),
    (re.compile(r'_([^_]+)_'),               r'<em>\1</em>'),
    (re.compile(r'\[([^\]]+)\]\(([^)]+)\)'), r'<a href="\2" target="_blank">\1</a>'),
    (re.compile(r'\\n'),                     '<br>'),
)


def format_inline(text: str) -> str:
    """Resolve inline spans in text. Unmatched markers are left as-is."""
    for pattern, replacement in INLINE_STAGES:
        text = pattern.sub(replacement, text)
    return text
