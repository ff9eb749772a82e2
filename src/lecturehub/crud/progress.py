"""Learner progress persistence: lecture status, visits, notes, and bookmarks"""

import logging
from datetime import datetime
from uuid import uuid4

from sqlalchemy import delete
from sqlmodel import Session, col, select

from lecturehub.catalog.models import LectureStatus
from lecturehub.crud.models import Bookmark, LectureNote, LectureProgress


logger = logging.getLogger(__name__)

LectureKey = tuple[str, int]

# Statuses that imply the learner has opened the lecture.
VISITING_STATUSES = {LectureStatus.completed, LectureStatus.in_progress}


def get_progress(session: Session, course_id: str, lecture_id: int) -> LectureProgress | None:
    """Return the stored progress row for a lecture, or None."""
    return session.get(LectureProgress, (course_id, lecture_id))


def _get_or_create(session: Session, course_id: str, lecture_id: int) -> LectureProgress:
    row = get_progress(session, course_id, lecture_id)
    if row is None:
        row = LectureProgress(course_id=course_id, lecture_id=lecture_id)
    return row


def set_status(session: Session, course_id: str, lecture_id: int, status: LectureStatus) -> LectureProgress:
    """Record a lecture's status; completing or starting a lecture also marks it visited."""
    row = _get_or_create(session, course_id, lecture_id)
    row.status = status
    if status in VISITING_STATUSES:
        row.visited = True
    row.updated_at = datetime.now()
    session.add(row)
    session.flush()
    logger.info("Lecture %s-%s marked %s", course_id, lecture_id, status.value)
    return row


def mark_visited(session: Session, course_id: str, lecture_id: int) -> LectureProgress:
    """Flag a lecture as opened and make it the last accessed lecture."""
    row = _get_or_create(session, course_id, lecture_id)
    row.visited = True
    row.updated_at = datetime.now()
    session.add(row)
    session.flush()
    return row


def status_map(session: Session) -> dict[LectureKey, LectureStatus]:
    """Return stored statuses keyed by (course_id, lecture_id); rows without a status are skipped."""
    rows = session.exec(select(LectureProgress).where(col(LectureProgress.status).is_not(None))).all()
    return {(r.course_id, r.lecture_id): r.status for r in rows}


def visited_keys(session: Session) -> set[LectureKey]:
    rows = session.exec(select(LectureProgress).where(LectureProgress.visited == True)).all()  # noqa: E712
    return {(r.course_id, r.lecture_id) for r in rows}


def completed_keys(session: Session) -> set[LectureKey]:
    return {k for k, s in status_map(session).items() if s == LectureStatus.completed}


def is_completed(session: Session, course_id: str, lecture_id: int) -> bool:
    row = get_progress(session, course_id, lecture_id)
    return row is not None and row.status == LectureStatus.completed


def last_accessed(session: Session) -> LectureKey | None:
    """Return (course_id, lecture_id) of the most recently visited lecture, or None."""
    row = session.exec(
        select(LectureProgress)
        .where(LectureProgress.visited == True)  # noqa: E712
        .order_by(col(LectureProgress.updated_at).desc())
    ).first()
    return (row.course_id, row.lecture_id) if row else None


# --- notes ---

def get_note(session: Session, course_id: str, lecture_id: int) -> str:
    row = session.get(LectureNote, (course_id, lecture_id))
    return row.content if row else ''


def save_note(session: Session, course_id: str, lecture_id: int, content: str) -> None:
    """Store a lecture note; empty content removes it."""
    row = session.get(LectureNote, (course_id, lecture_id))
    if not content:
        if row is not None:
            session.delete(row)
            session.flush()
        return
    if row is None:
        row = LectureNote(course_id=course_id, lecture_id=lecture_id, content=content)
    else:
        row.content = content
        row.updated_at = datetime.now()
    session.add(row)
    session.flush()


# --- bookmarks ---

def add_bookmark(session: Session, course_id: str, lecture_id: int, note: str = '') -> Bookmark:
    bookmark = Bookmark(
        id=f"{course_id}-{lecture_id}-{uuid4().hex[:12]}",
        course_id=course_id,
        lecture_id=lecture_id,
        note=note,
    )
    session.add(bookmark)
    session.flush()
    return bookmark


def remove_bookmark(session: Session, bookmark_id: str) -> bool:
    """Delete a bookmark by id. Returns False if it did not exist."""
    bookmark = session.get(Bookmark, bookmark_id)
    if bookmark is None:
        return False
    session.delete(bookmark)
    session.flush()
    return True


def list_bookmarks(session: Session, course_id: str | None = None) -> list[Bookmark]:
    """Return bookmarks oldest first, optionally limited to one course."""
    query = select(Bookmark)
    if course_id is not None:
        query = query.where(Bookmark.course_id == course_id)
    return list(session.exec(query.order_by(col(Bookmark.created_at))).all())


# --- backup ---

BACKUP_TABLES = {
    'progress': LectureProgress,
    'notes': LectureNote,
    'bookmarks': Bookmark,
}


def export_progress(session: Session) -> dict[str, list[dict]]:
    """Every progress, note, and bookmark row as JSON-compatible dicts."""
    return {
        key: [row.model_dump(mode='json') for row in session.exec(select(model)).all()]
        for key, model in BACKUP_TABLES.items()
    }


def import_progress(session: Session, data: dict) -> dict[str, int]:
    """Replace all stored progress, notes, and bookmarks with the rows in data.

    Missing keys restore as empty tables. Every row is validated before any
    existing row is deleted; a malformed row raises ValueError and leaves the
    session untouched. Returns the number of rows restored per table.
    """
    rows = {}
    for key, model in BACKUP_TABLES.items():
        items = data.get(key) or []
        if not isinstance(items, list):
            raise ValueError(f"Backup field '{key}' must be a list")
        try:
            rows[key] = [model.model_validate(item) for item in items]
        except (TypeError, ValueError) as e:
            raise ValueError(f"Invalid {key} entry in backup: {e}") from e

    for model in BACKUP_TABLES.values():
        session.execute(delete(model))
    for restored in rows.values():
        session.add_all(restored)
    session.flush()
    counts = {key: len(restored) for key, restored in rows.items()}
    logger.info("Restored progress backup: %s", counts)
    return counts
