"""Dataset loading with timestamp caching and empty-data fallback"""

import logging
import time
from pathlib import Path
from typing import Callable

from pydantic import BaseModel

from lecturehub.catalog.models import (
    Course, CoursesData, Lecture, LecturesData, Semester, Teacher, TeachersData,
)


logger = logging.getLogger(__name__)

DATASETS: dict[str, tuple[str, type[BaseModel]]] = {
    'courses':  ('courses.json',  CoursesData),
    'teachers': ('teachers.json', TeachersData),
    'lectures': ('lectures.json', LecturesData),
}


def _as_int(value) -> int | None:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


class DatasetStore:
    """Access to the course, teacher, and lecture datasets.

    Each dataset is cached for ``cache_ttl`` seconds after a successful load.
    A missing or malformed file is logged and replaced by an empty dataset,
    so lookups never fail because of bad input files.
    """

    def __init__(self, data_dir: Path | str, cache_ttl: int = 300, clock: Callable[[], float] = time.monotonic):
        self.data_dir = Path(data_dir)
        self.cache_ttl = cache_ttl
        self._clock = clock
        self._cache: dict[str, tuple[BaseModel, float]] = {}
        self.courses_data = CoursesData()
        self.teachers_data = TeachersData()
        self.lectures_data = LecturesData()

    # --- loading ---

    def _cache_valid(self, key: str) -> bool:
        entry = self._cache.get(key)
        return entry is not None and self._clock() - entry[1] < self.cache_ttl

    def _load(self, key: str) -> tuple[BaseModel, bool]:
        if self._cache_valid(key):
            return self._cache[key][0], True

        filename, model = DATASETS[key]
        path = self.data_dir / filename
        try:
            data = model.model_validate_json(path.read_text(encoding='utf-8'))
        except (OSError, ValueError) as e:
            logger.error("Error loading %s: %s", path, e)
            return model(), False

        self._cache[key] = (data, self._clock())
        logger.debug("Loaded %s", path)
        return data, True

    def load(self) -> bool:
        """(Re)load all datasets; True when every file loaded without falling back."""
        self.courses_data, courses_ok = self._load('courses')
        self.teachers_data, teachers_ok = self._load('teachers')
        self.lectures_data, lectures_ok = self._load('lectures')
        return courses_ok and teachers_ok and lectures_ok

    def clear_cache(self) -> None:
        self._cache = {}

    # --- lookups ---

    def semesters(self) -> list[Semester]:
        return self.courses_data.semesters

    def get_semester(self, semester_id: int | str) -> Semester | None:
        sid = _as_int(semester_id)
        return next((s for s in self.semesters() if s.id == sid), None)

    def courses(self) -> list[Course]:
        return [c for s in self.semesters() for c in s.courses]

    def get_course(self, course_id: str) -> Course | None:
        return next((c for c in self.courses() if c.id == course_id), None)

    def semester_of(self, course_id: str) -> Semester | None:
        """Return the semester that lists course_id, or None."""
        return next((s for s in self.semesters() if any(c.id == course_id for c in s.courses)), None)

    def teachers(self) -> list[Teacher]:
        return self.teachers_data.teachers

    def get_teacher(self, identifier: str) -> Teacher | None:
        """Find a teacher by course id, teacher id, or case-insensitive name fragment."""
        if self.get_course(identifier) is not None:
            return next((t for t in self.teachers() if identifier in t.courses), None)
        needle = identifier.lower()
        return next((t for t in self.teachers() if needle in t.name.lower() or t.id == identifier), None)

    def get_lectures(self, course_id: str) -> list[Lecture]:
        entry = self.lectures_data.courses.get(course_id)
        return entry.lectures if entry else []

    def get_lecture(self, course_id: str, lecture_id: int | str) -> Lecture | None:
        lid = _as_int(lecture_id)
        return next((l for l in self.get_lectures(course_id) if l.id == lid), None)

    def read_notes(self, course_id: str, lecture_id: int | str) -> str:
        """Return the lecture's markup notes, or '' when it has none or they cannot be read."""
        lecture = self.get_lecture(course_id, lecture_id)
        if lecture is None or not lecture.notes:
            return ''
        path = self.data_dir / lecture.notes
        try:
            return path.read_text(encoding='utf-8')
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Could not read notes for %s-%s at %s: %s", course_id, lecture_id, path, e)
            return ''

    def export_data(self) -> dict:
        """Raw datasets as JSON-compatible dicts."""
        return {
            "courses": self.courses_data.model_dump(mode='json'),
            "lectures": self.lectures_data.model_dump(mode='json'),
            "teachers": self.teachers_data.model_dump(mode='json'),
        }

    def import_data(self, data: dict) -> list[str]:
        """Validate and write the datasets present in data, then reload.

        Keys are the same as ``export_data``; absent keys leave that file alone.
        Nothing is written unless every given dataset validates (ValueError
        otherwise). Returns the replaced file names, sorted.
        """
        validated = {}
        for key, (filename, model) in DATASETS.items():
            if data.get(key) is None:
                continue
            try:
                validated[filename] = model.model_validate(data[key])
            except ValueError as e:
                raise ValueError(f"Invalid {key} dataset: {e}") from e

        self.data_dir.mkdir(parents=True, exist_ok=True)
        for filename, dataset in validated.items():
            (self.data_dir / filename).write_text(dataset.model_dump_json(indent=2), encoding='utf-8')
            logger.info("Restored %s", self.data_dir / filename)
        self.clear_cache()
        self.load()
        return sorted(validated)
