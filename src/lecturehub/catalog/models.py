"""Dataset schemas for courses, teachers, and lectures"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel


class LectureStatus(str, Enum):
    """Restrict lecture status to the values the datasets and progress store use"""
    completed = "completed"
    in_progress = "in-progress"
    upcoming = "upcoming"


class Course(BaseModel):
    id: str
    code: str
    name: str
    description: str = ""
    teacher: str = ""
    credits: Optional[int] = None


class Semester(BaseModel):
    id: int
    name: str
    courses: list[Course] = []


class CoursesData(BaseModel):
    """Root of courses.json"""
    semesters: list[Semester] = []


class Teacher(BaseModel):
    id: str
    name: str
    department: str = ""
    qualification: str = ""
    email: str = ""
    courses: list[str] = []


class TeachersData(BaseModel):
    """Root of teachers.json"""
    teachers: list[Teacher] = []


class Lecture(BaseModel):
    id: int
    title: str
    date: str = ""
    duration: str = ""
    status: LectureStatus = LectureStatus.upcoming
    keywords: list[str] = []
    resources: list[str] = []
    notes: Optional[str] = None     # notes file, relative to the data directory


class CourseLectures(BaseModel):
    lectures: list[Lecture] = []


class LecturesData(BaseModel):
    """Root of lectures.json, keyed by course id"""
    courses: dict[str, CourseLectures] = {}
