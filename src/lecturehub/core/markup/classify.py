"""Line classification for the block scanner"""

import re
from dataclasses import dataclass
from enum import Enum


HEADING_RE = re.compile(r'^(#{1,4}) ')
ORDINAL_RE = re.compile(r'^\d+\.')
BULLET_MARKER_RE = re.compile(r'^[*-]\s+')
ORDINAL_MARKER_RE = re.compile(r'^\d+\.\s+')
THEMATIC_BREAKS = {'---', '***', '___'}
FENCE = '```'


class LineKind(str, Enum):
    """Every line falls into exactly one of these."""
    blank = "blank"
    fence = "fence"
    code = "code"
    heading = "heading"
    rule = "rule"
    table_row = "table_row"
    list_item = "list_item"
    quote = "quote"
    paragraph = "paragraph"


class ListKind(str, Enum):
    ordered = "ol"
    unordered = "ul"


@dataclass(frozen=True)
class LineClassification:
    """A classified line and the payload the scanner needs to emit it."""
    kind:      LineKind
    text:      str = ""
    level:     int | None = None           # heading level
    list_kind: ListKind | None = None
    cells:     tuple[str, ...] = ()


def split_cells(line: str) -> tuple[str, ...]:
    """Split a table row on pipes, trimming cells and dropping empty ones."""
    return tuple(c for c in (part.strip() for part in line.split('|')) if c)


def is_table_row(line: str) -> bool:
    return '|' in line and len(line.split('|')) > 2


def classify_line(raw: str, in_code: bool = False) -> LineClassification:
    """Map a source line to its classification.

    Lines are matched with surrounding whitespace removed. Inside a code
    block only the fence is recognised; everything else, blank lines
    included, is literal code and keeps its original text.
    """
    line = raw.strip()
    if line.startswith(FENCE):
        return LineClassification(LineKind.fence, text=line[len(FENCE):].strip())
    if in_code:
        return LineClassification(LineKind.code, text=raw)
    if line == '':
        return LineClassification(LineKind.blank)

    m = HEADING_RE.match(line)
    if m:
        level = len(m.group(1))
        return LineClassification(LineKind.heading, text=line[level + 1:], level=level)
    if line in THEMATIC_BREAKS:
        return LineClassification(LineKind.rule)
    if is_table_row(line):
        return LineClassification(LineKind.table_row, cells=split_cells(line))
    if line.startswith(('- ', '* ')) or ORDINAL_RE.match(line):
        kind = ListKind.ordered if ORDINAL_RE.match(line) else ListKind.unordered
        text = ORDINAL_MARKER_RE.sub('', BULLET_MARKER_RE.sub('', line))
        return LineClassification(LineKind.list_item, text=text, list_kind=kind)
    if line.startswith('> '):
        return LineClassification(LineKind.quote, text=line[2:])
    return LineClassification(LineKind.paragraph, text=line)
