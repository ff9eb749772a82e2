"""Unit tests for core/pdf.py"""

import pytest

from lecturehub.core.export import FOOTER_TEXT, estimate_toc
from lecturehub.core.models import ConvertResult, Heading, LectureMetadata
from lecturehub.core.pdf import LecturePdf, build_pdf, text_blocks


@pytest.fixture(name="drawn")
def drawn_fixture(monkeypatch):
    """Make LecturePdf record every string it draws, in order."""
    strings = []

    def recording(pdf):
        for name in ("drawString", "drawCentredString", "drawRightString"):
            original = getattr(pdf.canvas, name)

            def record(x, y, text, *args, _original=original, **kwargs):
                strings.append(text)
                return _original(x, y, text, *args, **kwargs)
            monkeypatch.setattr(pdf.canvas, name, record)
        return pdf

    return strings, recording


def test_text_blocks_levels_tables_and_entities():
    fragment = (
        '<h2 id="part">Part &amp; Whole</h2>\n'
        '<p>Plain <strong>text</strong></p>\n'
        '<div class="table-container"><table>\n'
        '<tr><th>Term</th><th>Meaning</th></tr>\n'
        '</table></div>\n'
    )
    assert text_blocks(fragment) == [
        ("Part & Whole", 2),
        ("Plain text", 0),
        ("Term | Meaning", 0),
    ]


def test_build_pdf_returns_pdf_bytes():
    meta = LectureMetadata(title="Intro", course="Analytics 101", date="2026-01-10")
    result = ConvertResult(html='<h2 id="a">A</h2>\n<p>Body</p>\n', headings=[Heading("A", 2, "a")])
    data = build_pdf(meta, result, estimate_toc(result.headings), course_code="BA-101")
    assert data.startswith(b"%PDF")


def test_long_body_breaks_pages_and_numbers_footers(drawn):
    """Every page gets the footer and 'Page i of N' once the total is known."""
    strings, recording = drawn
    pdf = recording(LecturePdf())
    pdf.header(LectureMetadata(title="Long"))
    pdf.body("\n".join(f"<p>Line {i}</p>" for i in range(150)))
    assert pdf.render().startswith(b"%PDF")
    assert pdf.pages >= 2
    assert [s for s in strings if s.endswith(f" of {pdf.pages}")] == [
        f"Page {i} of {pdf.pages}" for i in range(1, pdf.pages + 1)
    ]
    assert strings.count(FOOTER_TEXT) == pdf.pages


def test_header_rows_skip_empty_values(drawn):
    strings, recording = drawn
    pdf = recording(LecturePdf(hub_name="Test Hub"))
    pdf.header(LectureMetadata(title="Intro", course="Analytics 101", instructor="Dr. Ada Byron"), "BA-101")
    assert strings[:3] == ["Test Hub", "Analytics 101", "Intro"]
    assert "Instructor:" in strings and "BA-101" in strings
    assert "Date:" not in strings


def test_running_header_on_later_pages(drawn):
    strings, recording = drawn
    pdf = recording(LecturePdf(hub_name="Test Hub"))
    pdf.new_page()
    pdf.render()
    assert pdf.pages == 2
    assert "Test Hub - Lecture Notes" in strings
    assert "Page 2" in strings


def test_toc_entries_with_dots_and_page_numbers(drawn):
    strings, recording = drawn
    pdf = recording(LecturePdf())
    pdf.table_of_contents(estimate_toc([Heading("Overview", 2, "overview")]))
    assert strings[:2] == ["Table of Contents", "Overview"]
    assert strings.count(".") > 10
    assert strings[strings.index("Overview") + strings.count(".") + 1] == "2"


def test_empty_toc_draws_nothing(drawn):
    strings, recording = drawn
    pdf = recording(LecturePdf())
    pdf.table_of_contents([])
    assert strings == []
