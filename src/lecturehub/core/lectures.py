"""Lecture navigation, per-lecture progress scoring, and lecture list rendering"""

from datetime import datetime

from jinja2 import Template

from lecturehub.catalog.models import Lecture, LectureStatus
from lecturehub.catalog.store import DatasetStore
from lecturehub.core.stats import Statuses, effective_status, percent


COMPLETION_WEIGHT = 70
RESOURCES_WEIGHT = 30

STATUS_LABELS = {
    LectureStatus.completed:   "✓ Completed",
    LectureStatus.in_progress: "● In Progress",
    LectureStatus.upcoming:    "↑ Upcoming",
}

LIST_TEMPLATE = Template("""\
{%- if not items -%}
<div class="empty-lectures">No lectures available yet.</div>
{%- else -%}
<div class="lecture-list">
{%- for item in items %}
<div class="lecture-list-item" data-lecture-id="{{ item.lecture.id }}">
<div class="lecture-list-header">
<span class="lecture-number">Lecture {{ item.lecture.id }}</span>
<span class="lecture-status {{ item.status.value }}">{{ item.label }}</span>
</div>
<h4>{{ item.lecture.title }}</h4>
<div class="lecture-list-meta">
<span class="lecture-date">{{ item.lecture.date }}</span>
<span class="lecture-duration">{{ item.lecture.duration }}</span>
<span class="progress-indicator">{{ item.progress }}%</span>
</div>
<div class="lecture-progress-bar"><div class="progress-fill" style="width: {{ item.progress }}%"></div></div>
<div class="lecture-list-actions">
<a href="lecture.html?course={{ course_id }}&lecture={{ item.lecture.id }}" class="btn-read-lecture">Read Notes</a>
<button class="btn-mark-complete{{ ' completed' if item.completed }}" data-lecture-id="{{ item.lecture.id }}">{{ 'Completed' if item.completed else 'Mark Complete' }}</button>
</div>
</div>
{%- endfor %}
</div>
{%- endif -%}
""", autoescape=True)

NAVIGATION_TEMPLATE = Template("""\
<div class="lecture-navigation">
{%- if prev %}
<a href="lecture.html?course={{ course_id }}&lecture={{ prev.id }}" class="nav-link prev-link"><span>Previous</span> <strong>{{ prev.title }}</strong></a>
{%- else %}
<div class="nav-placeholder"></div>
{%- endif %}
{%- if next %}
<a href="lecture.html?course={{ course_id }}&lecture={{ next.id }}" class="nav-link next-link"><span>Next</span> <strong>{{ next.title }}</strong></a>
{%- else %}
<div class="nav-placeholder"></div>
{%- endif %}
</div>""", autoescape=True)


def lecture_progress(lecture: Lecture, completed: bool, visited: bool) -> int:
    """Score 0-100: completion is worth 70, resources 30.

    A lecture without resources always earns the resources share; one with
    resources earns it once the learner has visited it.
    """
    score = 0
    if completed:
        score += COMPLETION_WEIGHT
    if not lecture.resources or visited:
        score += RESOURCES_WEIGHT
    return min(score, 100)


class LectureNavigator:
    """Ordered view over one course's lectures."""

    def __init__(self, store: DatasetStore, course_id: str):
        self.store = store
        self.course_id = course_id
        self.lectures = store.get_lectures(course_id)

    def _index(self, lecture_id: int) -> int | None:
        return next((i for i, l in enumerate(self.lectures) if l.id == lecture_id), None)

    def get_lecture(self, lecture_id: int | str) -> Lecture | None:
        return self.store.get_lecture(self.course_id, lecture_id)

    def get_previous(self, lecture_id: int) -> Lecture | None:
        i = self._index(lecture_id)
        return self.lectures[i - 1] if i else None

    def get_next(self, lecture_id: int) -> Lecture | None:
        i = self._index(lecture_id)
        if i is None or i + 1 >= len(self.lectures):
            return None
        return self.lectures[i + 1]

    def completion_stats(self, completed: set[tuple[str, int]]) -> dict[str, int]:
        total = len(self.lectures)
        done = sum(1 for l in self.lectures if (self.course_id, l.id) in completed)
        return {"total": total, "completed": done, "percentage": percent(done, total), "remaining": total - done}

    def render_list(self, statuses: Statuses, visited: set[tuple[str, int]]) -> str:
        """Render the course's lecture list as an HTML fragment."""
        items = []
        for lecture in self.lectures:
            status = effective_status(self.course_id, lecture, statuses)
            completed = status == LectureStatus.completed
            items.append({
                "lecture": lecture,
                "status": status,
                "label": STATUS_LABELS[status],
                "completed": completed,
                "progress": lecture_progress(lecture, completed, (self.course_id, lecture.id) in visited),
            })
        return LIST_TEMPLATE.render(items=items, course_id=self.course_id)

    def render_navigation(self, lecture_id: int) -> str:
        return NAVIGATION_TEMPLATE.render(
            course_id=self.course_id,
            prev=self.get_previous(lecture_id),
            next=self.get_next(lecture_id),
        )

    def export_payload(
        self,
        lecture_id: int,
        completed: bool = False,
        visited: bool = False,
        note: str = '',
        last_accessed: tuple[str, int] | None = None,
        ) -> dict | None:
        """Lecture record plus the learner's data for it; None for an unknown lecture."""
        lecture = self.get_lecture(lecture_id)
        if lecture is None:
            return None
        course = self.store.get_course(self.course_id)
        return {
            "lecture": {
                **lecture.model_dump(mode='json'),
                "course": course.name if course else self.course_id,
                "teacher": course.teacher if course and course.teacher else "Unknown",
            },
            "user_data": {
                "completed": completed,
                "note": note,
                "last_accessed": list(last_accessed) if last_accessed else None,
                "progress": lecture_progress(lecture, completed, visited),
            },
            "exported_at": datetime.now().isoformat(),
        }
