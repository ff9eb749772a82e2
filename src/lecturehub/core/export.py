"""Export pipeline: paginated lecture document, sidecar JSON, and output files"""

import hashlib
import json
from datetime import date, datetime
from pathlib import Path
from typing import NamedTuple

from jinja2 import Template

from lecturehub.core.models import ConvertResult, Heading, LectureMetadata, TocEntry
from lecturehub.core.utils.slug import safe_filename


HUB_NAME = "Business Analytics Hub"
FOOTER_TEXT = "Generated by Business Analytics Course Hub"

DOCUMENT_TEMPLATE = Template("""\
<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<title>{{ meta.title }}</title>
<style>
@page { size: A4; margin: 20mm; @bottom-center { content: "{{ footer }}"; } @bottom-left { content: "Page " counter(page) " of " counter(pages); } }
.lecture-header { text-align: center; }
.lecture-meta td.label { color: #646464; padding-right: 1em; }
.toc-page { page-break-after: always; }
.toc-entry { display: flex; }
.toc-entry .dots { flex: 1; border-bottom: 1px dotted #999; margin: 0 0.3em 0.3em; }
</style>
</head>
<body>
<header class="lecture-header">
<p class="hub-name">{{ hub_name }}</p>
{%- if meta.course %}
<p class="course-name">{{ meta.course }}</p>
{%- endif %}
<h1>{{ meta.title }}</h1>
</header>
<table class="lecture-meta">
{%- for label, value in rows if value %}
<tr><td class="label">{{ label }}</td><td>{{ value }}</td></tr>
{%- endfor %}
</table>
<hr>
{%- if toc %}
<section class="toc-page">
<h2>Table of Contents</h2>
{%- for entry in toc %}
<div class="toc-entry" style="margin-left: {{ (entry.level - 1) * 5 }}mm;"><span>{{ entry.text }}</span><span class="dots"></span><span>{{ entry.page }}</span></div>
{%- endfor %}
</section>
{%- endif %}
<main class="lecture-content">
{{ body | safe }}
</main>
</body>
</html>
""", autoescape=True)


def estimate_toc(headings: list[Heading], per_page: int = 5) -> list[TocEntry]:
    """TOC entries for h2-h4 with page numbers estimated from heading order.

    Page 1 holds the header, so the first ``per_page`` headings land on page 2.
    """
    sections = [h for h in headings if 2 <= h.level <= 4]
    return [
        TocEntry(text=h.text, level=h.level, page=i // per_page + 2)
        for i, h in enumerate(sections)
    ]


def export_filename(title: str, on: date | None = None) -> str:
    """Return 'lecture_<safe title>_<YYYY-MM-DD>' (no extension)."""
    on = on or date.today()
    return f"lecture_{safe_filename(title)}_{on.isoformat()}"


def build_document(
    meta: LectureMetadata,
    result: ConvertResult,
    toc: list[TocEntry],
    course_code: str = '',
    hub_name: str = HUB_NAME,
    ) -> str:
    """Render a standalone, print-paginated HTML document for one lecture."""
    rows = [
        ("Date:", meta.date),
        ("Duration:", meta.duration),
        ("Instructor:", meta.instructor),
        ("Course Code:", course_code),
    ]
    return DOCUMENT_TEMPLATE.render(
        meta=meta, rows=rows, toc=toc, body=result.html,
        hub_name=hub_name, footer=FOOTER_TEXT,
    )


def build_sidecar(
    meta: LectureMetadata,
    toc: list[TocEntry],
    markup: str,
    course_code: str = '',
    ) -> dict:
    """Build the sidecar JSON dict describing an exported lecture."""
    return {
        "title": meta.title,
        "course": meta.course,
        "course_code": course_code,
        "metadata": meta.model_dump(),
        "toc": [entry.model_dump() for entry in toc],
        "hash": hashlib.sha256(markup.encode("utf-8")).hexdigest(),
        "exported_at": datetime.now().isoformat(),
    }


class ExportPaths(NamedTuple):
    html: Path
    json: Path
    pdf:  Path | None = None


def write_lecture(output_dir: Path, stem: str, document: str, sidecar: dict, pdf: bytes | None = None) -> ExportPaths:
    """Write <stem>.html, <stem>.json and, when pdf bytes are given, <stem>.pdf into output_dir."""
    output_dir.mkdir(parents=True, exist_ok=True)
    html_path = output_dir / f"{stem}.html"
    json_path = output_dir / f"{stem}.json"
    html_path.write_text(document, encoding='utf-8')
    json_path.write_text(json.dumps(sidecar, indent=2, ensure_ascii=False), encoding='utf-8')
    if pdf is None:
        return ExportPaths(html_path, json_path)
    pdf_path = output_dir / f"{stem}.pdf"
    pdf_path.write_bytes(pdf)
    return ExportPaths(html_path, json_path, pdf_path)
