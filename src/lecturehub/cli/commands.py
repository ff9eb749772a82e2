"""CLI command implementations"""

import json
import logging
from pathlib import Path
from typing import Annotated, Optional

import typer
from sqlmodel import Session, SQLModel

from lecturehub.catalog.models import Lecture, LectureStatus
from lecturehub.catalog.store import DatasetStore
from lecturehub.config import Settings, load_config
from lecturehub.core.lectures import LectureNavigator, lecture_progress
from lecturehub.core.markup.convert import MarkupConverter
from lecturehub.core.metadata import extract_metadata
from lecturehub.core.pipeline import run_backup, run_convert, run_export, run_restore
from lecturehub.core.search import SearchIndex
from lecturehub.core.stats import course_progress, effective_status, semester_progress, statistics
from lecturehub.crud import progress
from lecturehub.crud.database import init_db, make_engine


def _fail(msg: str, cause: Exception = None) -> None:
    """Print a user-friendly error to stderr and exit 1."""
    typer.echo(f"Error: {msg}", err=True)
    if cause:
        typer.echo(f"  {cause}", err=True)
    raise typer.Exit(1)


def _settings(overrides: dict = None) -> Settings:
    """Load config with standard CLI error handling and apply the log level."""
    try:
        settings = load_config(overrides=overrides)
    except ValueError as e:
        _fail(str(e))
    logging.basicConfig(level=settings.log_level, format="%(levelname)s %(name)s: %(message)s")
    return settings


def _store(settings: Settings) -> DatasetStore:
    store = DatasetStore(settings.data_dir, settings.cache_ttl)
    if not store.load():
        typer.echo(f"Warning: some datasets in {settings.data_dir}/ could not be loaded", err=True)
    return store


def _engine(settings: Settings):
    engine = make_engine(settings.db_url)
    init_db(engine)
    return engine


def _lecture(store: DatasetStore, course: str, lecture_id: int) -> Lecture:
    lecture = store.get_lecture(course, lecture_id)
    if lecture is None:
        _fail(f"No lecture {lecture_id} in course '{course}'")
    return lecture


def init_cmd(
    reset: Annotated[bool, typer.Option("--reset", help="Drop and recreate all progress tables")] = False,
    ):
    """Initialize the progress database. Use --reset to clear existing progress."""
    settings = _settings()
    engine = make_engine(settings.db_url)
    if reset:
        SQLModel.metadata.drop_all(engine)
        typer.echo("Existing progress cleared.")
    init_db(engine)
    typer.echo(f"Database initialized at: {settings.db_url}")


def convert_cmd(
    path: Annotated[str, typer.Argument(help="Markup file or directory to convert")],
    out: Annotated[Optional[str], typer.Option("--out-dir", help="Output directory")] = None,
    toc: Annotated[bool, typer.Option("--toc", help="Prepend a table of contents")] = False,
    ):
    """Convert lecture markup files to HTML fragments."""
    settings = _settings(overrides={"output_dir": out})
    output_dir = Path(settings.output_dir)
    try:
        results = run_convert(path, output_dir, with_toc=toc)
    except RuntimeError as e:
        _fail(str(e))
    for src, out_file in results:
        typer.echo(f"  {src} -> {out_file}")
    typer.echo(f"Converted {len(results)} file(s) to {output_dir}/")


def meta_cmd(
    path: Annotated[Path, typer.Argument(help="Markup file to read metadata from")],
    ):
    """Print lecture metadata (title, date, duration, instructor, course, objectives) as JSON."""
    _settings()
    try:
        text = path.read_text(encoding='utf-8')
    except OSError as e:
        _fail(f"Cannot read {path}", e)
    typer.echo(json.dumps(extract_metadata(text).model_dump(), indent=2, ensure_ascii=False))


def courses_cmd():
    """List semesters and their courses with completion progress."""
    settings = _settings()
    store = _store(settings)
    with Session(_engine(settings)) as session:
        statuses = progress.status_map(session)
    if not store.semesters():
        typer.echo("No courses found.")
        raise typer.Exit(1)
    for semester in store.semesters():
        sp = semester_progress(store, statuses, semester.id)
        typer.echo(f"{semester.name} ({sp.completed}/{sp.total}, {sp.percentage}%)")
        for course in semester.courses:
            cp = course_progress(store, statuses, course.id)
            typer.echo(f"  {course.id}  {course.name}  {cp.percentage}%")


def lectures_cmd(
    course: Annotated[str, typer.Argument(help="Course id")],
    html: Annotated[bool, typer.Option("--html", help="Print the rendered lecture list HTML")] = False,
    ):
    """List a course's lectures with status and progress."""
    settings = _settings()
    store = _store(settings)
    if store.get_course(course) is None and not store.get_lectures(course):
        _fail(f"Unknown course '{course}'")
    nav = LectureNavigator(store, course)
    with Session(_engine(settings)) as session:
        statuses = progress.status_map(session)
        visited = progress.visited_keys(session)
    if html:
        typer.echo(nav.render_list(statuses, visited))
        return
    completed = set()
    for lecture in nav.lectures:
        status = effective_status(course, lecture, statuses)
        if status == LectureStatus.completed:
            completed.add((course, lecture.id))
        score = lecture_progress(lecture, status == LectureStatus.completed, (course, lecture.id) in visited)
        typer.echo(f"  {lecture.id:>3}. {lecture.title}  [{status.value}] {score}%")
    stats = nav.completion_stats(completed)
    typer.echo(f"{stats['completed']}/{stats['total']} completed ({stats['percentage']}%)")


def search_cmd(
    query: Annotated[str, typer.Argument(help="Search text")],
    ):
    """Search courses, lectures, and teachers."""
    settings = _settings()
    index = SearchIndex.build(_store(settings), settings.min_search_length, settings.max_keywords)
    results = index.search(query)
    if results is None:
        _fail(f"Query must be at least {settings.min_search_length} characters")
    if results.total == 0:
        typer.echo(f'No results found for "{query}"')
        raise typer.Exit(1)
    for c in results.courses:
        typer.echo(f"course   {c.id}  {c.name} ({c.semester})")
    for l in results.lectures:
        typer.echo(f"lecture  {l.course_id}-{l.id}  {l.title}")
    for t in results.teachers:
        typer.echo(f"teacher  {t.id}  {t.name} - {t.department}")
    if results.keywords:
        typer.echo(f"keywords: {', '.join(results.keywords)}")


def read_cmd(
    course: Annotated[str, typer.Argument(help="Course id")],
    lecture: Annotated[int, typer.Argument(help="Lecture id")],
    toc: Annotated[bool, typer.Option("--toc/--no-toc", help="Include the table of contents")] = True,
    ):
    """Print a lecture's notes as HTML with navigation, and mark it visited."""
    settings = _settings()
    store = _store(settings)
    _lecture(store, course, lecture)
    result = MarkupConverter().convert(store.read_notes(course, lecture))
    if toc:
        typer.echo(result.table_of_contents(), nl=False)
    typer.echo(result.html, nl=False)
    typer.echo(LectureNavigator(store, course).render_navigation(lecture))
    with Session(_engine(settings)) as session:
        progress.mark_visited(session, course, lecture)
        session.commit()


def _set_status(course: str, lecture_id: int, status: LectureStatus) -> None:
    settings = _settings()
    store = _store(settings)
    lecture = _lecture(store, course, lecture_id)
    try:
        with Session(_engine(settings)) as session:
            progress.set_status(session, course, lecture_id, status)
            session.commit()
    except Exception as e:
        _fail("Could not save progress", e)
    typer.echo(f"{course}-{lecture_id} {lecture.title}: {status.value}")


def complete_cmd(
    course: Annotated[str, typer.Argument(help="Course id")],
    lecture: Annotated[int, typer.Argument(help="Lecture id")],
    ):
    """Mark a lecture as completed."""
    _set_status(course, lecture, LectureStatus.completed)


def start_cmd(
    course: Annotated[str, typer.Argument(help="Course id")],
    lecture: Annotated[int, typer.Argument(help="Lecture id")],
    ):
    """Mark a lecture as in progress."""
    _set_status(course, lecture, LectureStatus.in_progress)


def note_cmd(
    course: Annotated[str, typer.Argument(help="Course id")],
    lecture: Annotated[int, typer.Argument(help="Lecture id")],
    text: Annotated[Optional[str], typer.Argument(help="Note text; omit to show the saved note, '' to delete")] = None,
    ):
    """Show or save a personal note for a lecture."""
    settings = _settings()
    _lecture(_store(settings), course, lecture)
    with Session(_engine(settings)) as session:
        if text is None:
            typer.echo(progress.get_note(session, course, lecture) or "(no note)")
            return
        progress.save_note(session, course, lecture, text)
        session.commit()
    typer.echo("Note saved." if text else "Note deleted.")


def bookmark_cmd(
    course: Annotated[Optional[str], typer.Argument(help="Course id; omit to list bookmarks")] = None,
    lecture: Annotated[Optional[int], typer.Argument(help="Lecture id")] = None,
    note: Annotated[str, typer.Option("--note", help="Bookmark note")] = "",
    remove: Annotated[Optional[str], typer.Option("--remove", help="Remove the bookmark with this id")] = None,
    ):
    """Add, remove, or list lecture bookmarks."""
    settings = _settings()
    with Session(_engine(settings)) as session:
        if remove:
            if not progress.remove_bookmark(session, remove):
                _fail(f"No bookmark '{remove}'")
            session.commit()
            typer.echo(f"Removed {remove}")
            return
        if course is None or lecture is None:
            for b in progress.list_bookmarks(session):
                typer.echo(f"{b.id}  {b.course_id}-{b.lecture_id}  {b.note}")
            return
        _lecture(_store(settings), course, lecture)
        bookmark = progress.add_bookmark(session, course, lecture, note)
        session.commit()
        typer.echo(f"Bookmarked: {bookmark.id}")


def stats_cmd():
    """Print hub-wide course, lecture, and completion statistics."""
    settings = _settings()
    store = _store(settings)
    with Session(_engine(settings)) as session:
        stats = statistics(store, progress.status_map(session))
        last = progress.last_accessed(session)
    typer.echo(json.dumps(stats.model_dump(), indent=2))
    if last:
        typer.echo(f"Last accessed: {last[0]}-{last[1]}")


def export_cmd(
    course: Annotated[str, typer.Argument(help="Course id")],
    lecture: Annotated[int, typer.Argument(help="Lecture id")],
    out: Annotated[Optional[str], typer.Option("--out-dir", help="Output directory")] = None,
    ):
    """Export a lecture's notes as an A4 PDF, a paginated HTML document, and sidecar JSON."""
    settings = _settings(overrides={"output_dir": out})
    store = _store(settings)
    _lecture(store, course, lecture)
    try:
        paths = run_export(
            store, course, lecture, Path(settings.output_dir),
            settings.headings_per_page, settings.hub_name,
        )
    except (ValueError, RuntimeError) as e:
        _fail(str(e))
    typer.echo(f"  {course}-{lecture} -> {paths.pdf}")
    typer.echo(f"  html -> {paths.html}")
    typer.echo(f"  sidecar -> {paths.json}")


def backup_cmd(
    path: Annotated[Path, typer.Argument(help="Backup JSON file to write")] = Path("lecturehub-backup.json"),
    ):
    """Save datasets, progress, notes, bookmarks, and statistics to a JSON file."""
    settings = _settings()
    store = _store(settings)
    try:
        with Session(_engine(settings)) as session:
            payload = run_backup(store, session, path)
    except RuntimeError as e:
        _fail(str(e))
    counts = ", ".join(f"{len(rows)} {key}" for key, rows in payload["user_progress"].items())
    typer.echo(f"Backup written to {path} ({counts})")


def restore_cmd(
    path: Annotated[Path, typer.Argument(help="Backup JSON file to read")],
    datasets: Annotated[bool, typer.Option("--datasets", help="Also overwrite the dataset files in the data dir")] = False,
    ):
    """Replace saved progress, notes, and bookmarks with the contents of a backup."""
    settings = _settings()
    store = DatasetStore(settings.data_dir, settings.cache_ttl)
    try:
        with Session(_engine(settings)) as session:
            counts = run_restore(store, session, path, datasets=datasets)
            session.commit()
    except (ValueError, RuntimeError) as e:
        _fail("Could not restore backup", e)
    typer.echo("Restored " + ", ".join(f"{n} {key}" for key, n in counts.items()))
    if datasets:
        typer.echo(f"Datasets restored to {settings.data_dir}/")
