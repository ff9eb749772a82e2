"""Unit tests for core/markup/convert.py"""

import pytest

from lecturehub.core.markup.convert import MarkupConverter, convert, table_html
from lecturehub.core.models import Heading


def test_plain_lines_become_paragraphs(converter):
    """Every non-blank line without markers is its own paragraph, in order."""
    html = converter.convert("first line\nsecond line\n\nthird").html
    assert html == "<p>first line</p>\n<p>second line</p>\n\n<p>third</p>\n"


@pytest.mark.parametrize("marker,level", [("#", 1), ("##", 2), ("###", 3), ("####", 4)])
def test_heading_levels(converter, marker, level):
    """Heading marker count maps to the heading tag level."""
    result = converter.convert(f"{marker} Section Name")
    assert result.html == f'<h{level} id="section-name">Section Name</h{level}>\n'
    assert result.headings == [Heading(text="Section Name", level=level, id="section-name")]


def test_headings_in_source_order(sample_result):
    """Each heading appends exactly one entry, in source order."""
    assert [(h.text, h.level) for h in sample_result.headings] == [("Heading 1", 1), ("Heading 2", 2)]


def test_end_to_end_title_and_emphasis(converter):
    """A title heading plus an emphasised paragraph."""
    result = converter.convert("# Title\n\nSome *text* here.\n")
    assert result.headings == [Heading(text="Title", level=1, id="title")]
    assert '<h1 id="title">Title</h1>' in result.html
    assert "<p>Some <em>text</em> here.</p>" in result.html


def test_heading_ids_not_deduplicated(converter):
    """Identical heading text yields identical ids."""
    result = converter.convert("## Summary\n## Summary")
    assert [h.id for h in result.headings] == ["summary", "summary"]


def test_heading_text_not_inline_formatted(converter):
    """Heading text is emitted as written."""
    assert '<h2 id="the-bold-part">The **bold** part</h2>' in converter.convert("## The **bold** part").html


def test_code_block_verbatim_with_language(converter):
    """Fenced code keeps interior lines byte-for-byte and tags the language."""
    md = "```python\ndef f(x):\n    return x ** 2  # *not italic*\n\n# not a heading\n```"
    html = converter.convert(md).html
    assert html == (
        '<pre><code class="language-python">'
        "def f(x):\n"
        "    return x ** 2  # *not italic*\n"
        "\n"
        "# not a heading\n"
        "</code></pre>\n"
    )


def test_code_block_headings_not_collected(converter):
    """Heading-like lines inside code do not reach the heading list."""
    assert converter.convert("```\n# inside\n```").headings == []


def test_code_block_without_language(converter):
    """A bare fence gets an empty language class."""
    assert converter.convert("```\nx\n```").html.startswith('<pre><code class="language-">')


def test_unordered_list_closed_before_blank(converter):
    """Consecutive '- ' lines form one list, closed before the blank separator."""
    html = converter.convert("- one\n- two\n\nafter").html
    assert html == "<ul>\n<li>one</li>\n<li>two</li>\n</ul>\n\n<p>after</p>\n"


def test_ordered_list_closes_with_matching_tag(converter):
    """An ordinal-opened list is an <ol> and closes with </ol>."""
    html = converter.convert("1. first\n2. second").html
    assert html == "<ol>\n<li>first</li>\n<li>second</li>\n</ol>\n"


def test_list_kind_switch_joins_open_list(converter):
    """Items of the other marker kind append to the list already open."""
    html = converter.convert("- bullet\n1. numbered\n* star").html
    assert html.count("<ul>") == 1
    assert "<ol>" not in html
    assert html.count("<li>") == 3


def test_paragraph_closes_list(converter):
    """A paragraph line closes an open list before it is emitted."""
    html = converter.convert("- item\ntext").html
    assert html == "<ul>\n<li>item</li>\n</ul>\n<p>text</p>\n"


def test_list_items_inline_formatted(converter):
    """List item text goes through the inline formatter."""
    assert "<li><strong>bold</strong> item</li>" in converter.convert("- **bold** item").html


def test_table_with_header(converter):
    """Row 0 is the header when row 1 is a hyphen separator; row 1 is dropped."""
    html = converter.convert("| A | B |\n|---|---|\n| 1 | 2 |").html
    assert html == (
        '<div class="table-container"><table>\n'
        "<thead><tr>\n<th>A</th>\n<th>B</th>\n</tr></thead>\n"
        "<tbody>\n<tr>\n<td>1</td>\n<td>2</td>\n</tr>\n"
        "</tbody>\n</table></div>\n"
    )


def test_two_row_table_header_only(converter):
    """A header plus separator renders header cells and zero body rows."""
    html = converter.convert("| A | B |\n| --- | --- |").html
    assert "<th>A</th>" in html
    assert "<td>" not in html


def test_single_row_table_renders_nothing(converter):
    """A table with fewer than two rows is silently dropped."""
    assert converter.convert("| A | B |").html == ""


def test_table_without_separator_all_body(converter):
    """Without a separator row, every row is a body row."""
    html = converter.convert("| a | b |\n| c | d |").html
    assert "<thead>" not in html
    assert html.count("<tr>") == 2


def test_table_flushed_by_paragraph(converter):
    """A paragraph closes the table before its own output."""
    html = converter.convert("| a | b |\n| c | d |\ntext").html
    assert html.index("</table></div>") < html.index("<p>text</p>")


def test_table_flushed_at_end_of_input(converter):
    """An open table is rendered at end of input."""
    assert "</table></div>" in converter.convert("| a | b |\n| c | d |").html


def test_table_closed_by_heading(converter):
    """A heading line closes the table so output keeps source order."""
    html = converter.convert("| a | b |\n| c | d |\n## After").html
    assert html.index("</table></div>") < html.index("<h2")


def test_rule_and_blockquote(converter):
    """Thematic breaks emit <hr>; each quoted line is its own blockquote."""
    html = converter.convert("---\n> one\n> *two*").html
    assert html == "<hr>\n<blockquote>one</blockquote>\n<blockquote><em>two</em></blockquote>\n"


def test_code_fence_closes_open_list(converter):
    """A fence ends the list; items after the code start a new one."""
    html = converter.convert("- a\n```\nx\n```\n- b").html
    assert html == (
        "<ul>\n<li>a</li>\n</ul>\n"
        '<pre><code class="language-">x\n</code></pre>\n'
        "<ul>\n<li>b</li>\n</ul>\n"
    )


@pytest.mark.parametrize("line,expected", [
    ("## H", '<h2 id="h">H</h2>\n'),
    ("---", "<hr>\n"),
    ("> q", "<blockquote>q</blockquote>\n"),
])
def test_heading_rule_and_quote_leave_list_open(converter, line, expected):
    """These lines are emitted inside the open list, which stays one list."""
    html = converter.convert(f"- a\n{line}\n- b").html
    assert html == f"<ul>\n<li>a</li>\n{expected}<li>b</li>\n</ul>\n"


def test_table_row_closes_open_list(converter):
    html = converter.convert("- a\n| x | y |\n| 1 | 2 |").html
    assert html.startswith('<ul>\n<li>a</li>\n</ul>\n<div class="table-container"><table>\n')
    assert html.count("<ul>") == 1


def test_unterminated_code_block_left_open(converter):
    """Without a closing fence no closing tags are added."""
    assert converter.convert("```py\nx").html == '<pre><code class="language-py">x\n'


def test_lines_are_trimmed(converter):
    """Leading whitespace does not hide block markers."""
    assert converter.convert("   ## Indented").headings[0].text == "Indented"


def test_convert_resets_between_calls(converter):
    """Each call returns its own heading list."""
    first = converter.convert("# One")
    second = converter.convert("## Two")
    assert [h.text for h in first.headings] == ["One"]
    assert [h.text for h in second.headings] == ["Two"]


def test_empty_input(converter):
    """Empty input gives a single blank separator and no headings."""
    result = converter.convert("")
    assert result.html == "\n"
    assert result.headings == []


def test_module_level_convert():
    """convert() is a shortcut for a fresh MarkupConverter."""
    assert convert("x").html == MarkupConverter().convert("x").html


def test_table_html_needs_two_rows():
    """table_html returns '' for fewer than two rows."""
    assert table_html([]) == ""
    assert table_html([["a"]]) == ""
