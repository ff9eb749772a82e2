"""Pipeline step functions: markup conversion, lecture export, and progress backup"""

import json
import logging
from datetime import date, datetime
from pathlib import Path

from sqlmodel import Session

from lecturehub.catalog.store import DatasetStore
from lecturehub.core.export import (
    HUB_NAME, ExportPaths, build_document, build_sidecar, estimate_toc, export_filename, write_lecture,
)
from lecturehub.core.markup.convert import MarkupConverter
from lecturehub.core.metadata import extract_metadata
from lecturehub.core.models import LectureMetadata
from lecturehub.core.pdf import build_pdf
from lecturehub.core.stats import statistics
from lecturehub.core.utils.slug import slugify
from lecturehub.crud import progress


logger = logging.getLogger(__name__)

MARKUP_EXTENSIONS = {'.md', '.markdown', '.txt'}


def discover_files(path: Path) -> list[Path]:
    """Return sorted markup files under path, or [path] if a single markup file."""
    if path.is_file():
        return [path] if path.suffix in MARKUP_EXTENSIONS else []
    return sorted(p for p in path.rglob('*') if p.suffix in MARKUP_EXTENSIONS)


def output_path(source: Path, root: Path, output_dir: Path) -> Path:
    """HTML path for source, mirroring its subdirectory under root."""
    rel_dir = source.parent.relative_to(root) if root.is_dir() else Path()
    return output_dir / rel_dir / f"{slugify(source.stem) or 'lecture'}.html"


def run_convert(path: str, output_dir: Path, with_toc: bool = False) -> list[tuple[Path, Path]]:
    """Convert every markup file under path to an HTML fragment in output_dir.

    Returns (source_path, html_path) pairs. Subdirectories of path are
    mirrored in output_dir; two sources that would still write the same file
    (e.g. 'Intro.md' and 'intro.md') raise RuntimeError before anything is
    written. With ``with_toc`` the table of contents is written ahead of the
    converted body.
    """
    root = Path(path)
    targets: dict[Path, Path] = {}
    for p in discover_files(root):
        out_file = output_path(p, root, output_dir)
        if out_file in targets:
            raise RuntimeError(f"{targets[out_file]} and {p} both convert to {out_file}")
        targets[out_file] = p

    converter = MarkupConverter()
    results = []
    for out_file, p in targets.items():
        try:
            result = converter.convert(p.read_text(encoding='utf-8'))
            html = result.table_of_contents() + result.html if with_toc else result.html
            out_file.parent.mkdir(parents=True, exist_ok=True)
            out_file.write_text(html, encoding='utf-8')
            results.append((p, out_file))
        except Exception as e:
            raise RuntimeError(f"Failed to convert {p}: {e}") from e
        logger.info("Converted %s -> %s (%d headings)", p, out_file, len(result.headings))
    return results


def lecture_metadata(store: DatasetStore, course_id: str, lecture_id: int, markup: str) -> LectureMetadata:
    """Metadata from the notes, with blanks filled from the lecture and course records."""
    meta = extract_metadata(markup)
    lecture = store.get_lecture(course_id, lecture_id)
    course = store.get_course(course_id)
    fallback = {
        "title":      lecture.title if lecture else '',
        "date":       lecture.date if lecture else '',
        "duration":   lecture.duration if lecture else '',
        "instructor": course.teacher if course else '',
        "course":     course.name if course else course_id,
    }
    return meta.model_copy(update={k: v for k, v in fallback.items() if not getattr(meta, k)})


def run_export(
    store: DatasetStore,
    course_id: str,
    lecture_id: int,
    output_dir: Path,
    per_page: int = 5,
    hub_name: str = HUB_NAME,
    on: date | None = None,
    ) -> ExportPaths:
    """Convert a lecture's notes and write the HTML document, the A4 PDF, and the sidecar JSON.

    Raises ValueError for an unknown lecture and RuntimeError when writing fails.
    """
    lecture = store.get_lecture(course_id, lecture_id)
    if lecture is None:
        raise ValueError(f"Unknown lecture: {course_id}-{lecture_id}")

    markup = store.read_notes(course_id, lecture_id)
    if not markup:
        logger.warning("Lecture %s-%s has no notes; exporting header only", course_id, lecture_id)
    result = MarkupConverter().convert(markup)
    meta = lecture_metadata(store, course_id, lecture_id, markup)
    toc = estimate_toc(result.headings, per_page)
    course = store.get_course(course_id)
    course_code = course.code if course else ''

    try:
        return write_lecture(
            output_dir,
            export_filename(meta.title, on),
            build_document(meta, result, toc, course_code, hub_name),
            build_sidecar(meta, toc, markup, course_code),
            build_pdf(meta, result, toc, course_code, hub_name),
        )
    except OSError as e:
        raise RuntimeError(f"Failed to export {course_id}-{lecture_id}: {e}") from e


def run_backup(store: DatasetStore, session: Session, path: Path, now: datetime | None = None) -> dict:
    """Write datasets, learner progress, and statistics to a JSON backup file.

    Returns the written payload. Raises RuntimeError when the file cannot be written.
    """
    payload = {
        **store.export_data(),
        "user_progress": progress.export_progress(session),
        "statistics": statistics(store, progress.status_map(session)).model_dump(),
        "exported_at": (now or datetime.now()).isoformat(timespec='seconds'),
    }
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding='utf-8')
    except OSError as e:
        raise RuntimeError(f"Failed to write backup {path}: {e}") from e
    logger.info("Backup written to %s", path)
    return payload


def run_restore(store: DatasetStore, session: Session, path: Path, datasets: bool = False) -> dict[str, int]:
    """Replace learner progress (and with ``datasets`` the dataset files) from a backup.

    The session is flushed, not committed, so a caller that commits only on
    success keeps the old progress when the datasets fail to validate. Raises
    ValueError for an unreadable or malformed backup.
    """
    try:
        data = json.loads(path.read_text(encoding='utf-8'))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ValueError(f"Cannot read backup {path}: {e}") from e
    if not isinstance(data, dict) or not isinstance(data.get("user_progress"), dict):
        raise ValueError(f"{path} is not a lecturehub backup (missing user_progress)")

    counts = progress.import_progress(session, data["user_progress"])
    if datasets:
        try:
            store.import_data(data)
        except OSError as e:
            raise RuntimeError(f"Failed to restore datasets to {store.data_dir}: {e}") from e
    return counts
