"""Course, semester, and hub-wide completion statistics"""

import math

from pydantic import BaseModel

from lecturehub.catalog.models import Lecture, LectureStatus
from lecturehub.catalog.store import DatasetStore


Statuses = dict[tuple[str, int], LectureStatus]


class ProgressSummary(BaseModel):
    completed:  int = 0
    total:      int = 0
    percentage: int = 0


class HubStatistics(BaseModel):
    total_courses:      int
    total_lectures:     int
    completed_lectures: int
    total_teachers:     int
    completion_rate:    int


def percent(part: int, total: int) -> int:
    """Whole percentage rounded half up; 0 when total is 0."""
    return math.floor(part * 100 / total + 0.5) if total else 0


def effective_status(course_id: str, lecture: Lecture, statuses: Statuses) -> LectureStatus:
    """Stored learner status if any, else the dataset's status."""
    return statuses.get((course_id, lecture.id), lecture.status)


def course_progress(store: DatasetStore, statuses: Statuses, course_id: str) -> ProgressSummary:
    lectures = store.get_lectures(course_id)
    completed = sum(
        1 for l in lectures if effective_status(course_id, l, statuses) == LectureStatus.completed
    )
    return ProgressSummary(completed=completed, total=len(lectures), percentage=percent(completed, len(lectures)))


def semester_progress(store: DatasetStore, statuses: Statuses, semester_id: int | str) -> ProgressSummary:
    semester = store.get_semester(semester_id)
    if semester is None:
        return ProgressSummary()
    parts = [course_progress(store, statuses, c.id) for c in semester.courses]
    completed = sum(p.completed for p in parts)
    total = sum(p.total for p in parts)
    return ProgressSummary(completed=completed, total=total, percentage=percent(completed, total))


def statistics(store: DatasetStore, statuses: Statuses) -> HubStatistics:
    """Totals across every course listed in the semesters dataset."""
    courses = store.courses()
    teacher_ids = set()
    total = completed = 0
    for course in courses:
        teacher = store.get_teacher(course.id)
        if teacher:
            teacher_ids.add(teacher.id)
        progress = course_progress(store, statuses, course.id)
        total += progress.total
        completed += progress.completed
    return HubStatistics(
        total_courses=len(courses),
        total_lectures=total,
        completed_lectures=completed,
        total_teachers=len(teacher_ids),
        completion_rate=percent(completed, total),
    )
