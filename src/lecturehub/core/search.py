"""Free-text search over courses, lectures, and teachers"""

import logging
import re
from dataclasses import dataclass, field

from pydantic import BaseModel

from lecturehub.catalog.models import LectureStatus, Teacher
from lecturehub.catalog.store import DatasetStore


logger = logging.getLogger(__name__)

MIN_KEYWORD_LENGTH = 4


def extract_keywords(text: str) -> list[str]:
    """Lowercase words longer than three characters, first occurrence order, no repeats."""
    if not text:
        return []
    words = re.sub(r'[^\w\s]', ' ', text.lower()).split()
    return list(dict.fromkeys(w for w in words if len(w) >= MIN_KEYWORD_LENGTH))


class CourseHit(BaseModel):
    id: str
    name: str
    code: str
    description: str
    teacher: str
    semester: str


class LectureHit(BaseModel):
    id: int
    course_id: str
    title: str
    keywords: list[str]
    date: str
    status: LectureStatus


class SearchResults(BaseModel):
    courses:  list[CourseHit] = []
    lectures: list[LectureHit] = []
    teachers: list[Teacher] = []
    keywords: list[str] = []

    @property
    def total(self) -> int:
        return len(self.courses) + len(self.lectures) + len(self.teachers)


@dataclass
class SearchIndex:
    """In-memory index built from a loaded DatasetStore."""
    min_length:   int = 2
    max_keywords: int = 10
    courses:  list[CourseHit] = field(default_factory=list)
    lectures: list[LectureHit] = field(default_factory=list)
    teachers: list[Teacher] = field(default_factory=list)
    keywords: dict[str, None] = field(default_factory=dict)      # ordered set

    def _add_keywords(self, words) -> None:
        self.keywords.update(dict.fromkeys(words))

    @classmethod
    def build(cls, store: DatasetStore, min_length: int = 2, max_keywords: int = 10) -> "SearchIndex":
        index = cls(min_length=min_length, max_keywords=max_keywords)

        for semester in store.semesters():
            for course in semester.courses:
                index.courses.append(CourseHit(
                    id=course.id, name=course.name, code=course.code,
                    description=course.description, teacher=course.teacher,
                    semester=semester.name,
                ))
                index._add_keywords(extract_keywords(course.name))
                index._add_keywords(extract_keywords(course.description))

        for course_id, entry in store.lectures_data.courses.items():
            for lecture in entry.lectures:
                index.lectures.append(LectureHit(
                    id=lecture.id, course_id=course_id, title=lecture.title,
                    keywords=lecture.keywords, date=lecture.date, status=lecture.status,
                ))
                index._add_keywords(extract_keywords(lecture.title))
                index._add_keywords(kw.lower() for kw in lecture.keywords)

        for teacher in store.teachers():
            index.teachers.append(teacher)
            index._add_keywords(extract_keywords(teacher.name))
            index._add_keywords(extract_keywords(teacher.department))

        logger.debug(
            "Search index built: %d courses, %d lectures, %d teachers, %d keywords",
            len(index.courses), len(index.lectures), len(index.teachers), len(index.keywords),
        )
        return index

    def search(self, query: str) -> SearchResults | None:
        """Case-insensitive substring search; None for queries shorter than min_length."""
        term = (query or '').strip().lower()
        if len(term) < self.min_length:
            return None

        def hit(*fields: str) -> bool:
            return any(term in f.lower() for f in fields)

        return SearchResults(
            courses=[c for c in self.courses if hit(c.name, c.code, c.description, c.teacher)],
            lectures=[l for l in self.lectures if hit(l.title, *l.keywords)],
            teachers=[t for t in self.teachers if hit(t.name, t.department, t.qualification)],
            keywords=[kw for kw in self.keywords if term in kw][:self.max_keywords],
        )
