"""Table-of-contents HTML from a converted document's headings"""

from lecturehub.core.models import Heading


INDENT_PX = 20


def generate_table_of_contents(headings: list[Heading]) -> str:
    """Render a flat TOC list; h1 is the document title and is skipped.

    Indentation is cosmetic (a left margin per level below 2), not nesting.
    """
    if not headings:
        return ''
    items = [
        f'<li style="margin-left: {(h.level - 2) * INDENT_PX}px;">\n'
        f'<a href="#{h.id}">{h.text}</a>\n'
        '</li>\n'
        for h in headings
        if h.level != 1
    ]
    return (
        '<div class="table-of-contents">\n'
        '<h3>Table of Contents</h3>\n'
        '<ul>\n' + ''.join(items) + '</ul>\n</div>\n'
    )
