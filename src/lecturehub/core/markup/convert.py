"""Line-oriented markup to HTML conversion with heading collection"""

from enum import Enum

from lecturehub.core.markup.classify import LineClassification, LineKind, ListKind, classify_line
from lecturehub.core.markup.inline import format_inline
from lecturehub.core.models import ConvertResult, Heading
from lecturehub.core.utils.slug import heading_id


class BlockState(str, Enum):
    """The open multi-line context; at most one at any line boundary."""
    none = "none"
    code = "code"
    list = "list"
    table = "table"


def _is_separator(row: list[str]) -> bool:
    return all(set(cell) <= {'-'} or '---' in cell for cell in row)


def _row_html(row: list[str], tag: str) -> str:
    return '<tr>\n' + ''.join(f'<{tag}>{cell}</{tag}>\n' for cell in row) + '</tr>\n'


def table_html(rows: list[list[str]]) -> str:
    """Render buffered table rows; fewer than two rows render nothing.

    Row 1 is treated as the header separator when every cell is hyphens
    (or contains '---'); row 0 then becomes the header and row 1 is dropped.
    """
    if len(rows) < 2:
        return ''
    html = '<div class="table-container"><table>\n'
    if _is_separator(rows[1]):
        html += '<thead>' + _row_html(rows[0], 'th').rstrip('\n') + '</thead>\n<tbody>\n'
        body = rows[2:]
    else:
        html += '<tbody>\n'
        body = rows
    html += ''.join(_row_html(row, 'td') for row in body)
    return html + '</tbody>\n</table></div>\n'


class _Scan:
    """Mutable state for a single conversion; discarded afterwards."""

    def __init__(self) -> None:
        self.parts: list[str] = []
        self.state = BlockState.none
        self.list_kind: ListKind | None = None
        self.table_rows: list[list[str]] = []
        self.headings: list[Heading] = []

    def emit(self, fragment: str) -> None:
        self.parts.append(fragment)

    def close_list(self) -> None:
        if self.state == BlockState.list:
            self.emit(f'</{self.list_kind.value}>\n')
            self.state, self.list_kind = BlockState.none, None

    def close_table(self) -> None:
        if self.state == BlockState.table:
            self.emit(table_html(self.table_rows))
            self.table_rows = []
            self.state = BlockState.none

    def close_open_block(self) -> None:
        self.close_list()
        self.close_table()

    # --- transitions, one per LineKind ---

    def on_blank(self, line: LineClassification) -> None:
        self.close_open_block()
        self.emit('\n')

    def on_fence(self, line: LineClassification) -> None:
        if self.state == BlockState.code:
            self.emit('</code></pre>\n')
            self.state = BlockState.none
        else:
            self.close_open_block()
            self.emit(f'<pre><code class="language-{line.text}">')
            self.state = BlockState.code

    def on_code(self, line: LineClassification) -> None:
        self.emit(line.text + '\n')

    def on_heading(self, line: LineClassification) -> None:
        self.close_table()
        heading = Heading(text=line.text, level=line.level, id=heading_id(line.text))
        self.headings.append(heading)
        self.emit(f'<h{heading.level} id="{heading.id}">{heading.text}</h{heading.level}>\n')

    def on_rule(self, line: LineClassification) -> None:
        self.close_table()
        self.emit('<hr>\n')

    def on_table_row(self, line: LineClassification) -> None:
        if self.state != BlockState.table:
            self.close_list()
            self.state = BlockState.table
        self.table_rows.append(list(line.cells))

    def on_list_item(self, line: LineClassification) -> None:
        # The opening line picks the tag; later items of another kind join it.
        if self.state != BlockState.list:
            self.close_table()
            self.list_kind = line.list_kind
            self.state = BlockState.list
            self.emit(f'<{self.list_kind.value}>\n')
        self.emit(f'<li>{format_inline(line.text)}</li>\n')

    def on_quote(self, line: LineClassification) -> None:
        self.close_table()
        self.emit(f'<blockquote>{format_inline(line.text)}</blockquote>\n')

    def on_paragraph(self, line: LineClassification) -> None:
        self.close_open_block()
        self.emit(f'<p>{format_inline(line.text)}</p>\n')

    def finish(self) -> ConvertResult:
        self.close_open_block()
        return ConvertResult(html=''.join(self.parts), headings=self.headings)


TRANSITIONS = {
    LineKind.blank:      _Scan.on_blank,
    LineKind.fence:      _Scan.on_fence,
    LineKind.code:       _Scan.on_code,
    LineKind.heading:    _Scan.on_heading,
    LineKind.rule:       _Scan.on_rule,
    LineKind.table_row:  _Scan.on_table_row,
    LineKind.list_item:  _Scan.on_list_item,
    LineKind.quote:      _Scan.on_quote,
    LineKind.paragraph:  _Scan.on_paragraph,
}


class MarkupConverter:
    """Converts lecture markup to an HTML fragment.

    Holds no state between calls: every ``convert`` returns its own
    headings in the result, so one instance can be reused freely.
    """

    def convert(self, text: str) -> ConvertResult:
        scan = _Scan()
        for raw in text.split('\n'):
            line = classify_line(raw, in_code=scan.state == BlockState.code)
            TRANSITIONS[line.kind](scan, line)
        return scan.finish()


def convert(text: str) -> ConvertResult:
    """Convert markup text with a fresh MarkupConverter."""
    return MarkupConverter().convert(text)
