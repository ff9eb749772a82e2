"""Root test configuration: shared dataset fixture and session-level cleanup"""

import json
from pathlib import Path

import pytest


_PROJECT_ROOT = Path(__file__).parent.parent

_CLEANUP_FILES = ["lecturehub.db", "test.db"]


COURSES = {
    "semesters": [
        {
            "id": 1,
            "name": "Semester 1",
            "courses": [
                {"id": "BA101", "code": "BA-101", "name": "Intro to Business Analytics",
                 "description": "Foundations of data-driven decision making", "teacher": "Dr. Ada Byron"},
                {"id": "BA102", "code": "BA-102", "name": "Statistics for Managers",
                 "description": "Descriptive and inferential statistics", "teacher": "Prof. Alan Turing"},
            ],
        },
        {
            "id": 2,
            "name": "Semester 2",
            "courses": [
                {"id": "BA201", "code": "BA-201", "name": "Data Visualization",
                 "description": "Charts, dashboards, and storytelling", "teacher": "Dr. Ada Byron"},
            ],
        },
    ]
}

TEACHERS = {
    "teachers": [
        {"id": "T1", "name": "Dr. Ada Byron", "department": "Analytics",
         "qualification": "PhD Mathematics", "courses": ["BA101", "BA201"]},
        {"id": "T2", "name": "Prof. Alan Turing", "department": "Statistics",
         "qualification": "PhD Computing", "courses": ["BA102"]},
    ]
}

LECTURES = {
    "courses": {
        "BA101": {
            "lectures": [
                {"id": 1, "title": "What is Analytics?", "date": "2026-01-10", "duration": "1.5 hours",
                 "status": "completed", "keywords": ["Descriptive", "Overview"], "notes": "notes/ba101-1.md"},
                {"id": 2, "title": "Data Collection", "date": "2026-01-17", "duration": "1.5 hours",
                 "status": "in-progress", "keywords": ["Sampling"], "resources": ["slides.pdf"]},
                {"id": 3, "title": "Regression Basics", "date": "2026-01-24", "duration": "2 hours",
                 "keywords": ["Regression"]},
            ]
        },
        "BA102": {
            "lectures": [
                {"id": 1, "title": "Probability Refresher", "date": "2026-01-11", "duration": "1 hour",
                 "status": "upcoming", "keywords": ["Probability"]},
            ]
        },
    }
}

LECTURE_NOTES = """\
# What is Analytics?

**Date:** January 10, 2026
**Duration:** 90 minutes
**Instructor:** Dr. Ada Byron
**Course:** Intro to Business Analytics

## Learning Objectives
- Define analytics
- Distinguish descriptive from predictive work

## Overview

Analytics turns **data** into *decisions*.

### Key Terms

| Term | Meaning |
|------|---------|
| KPI | Key performance indicator |
"""


@pytest.fixture(name="data_dir")
def data_dir_fixture(tmp_path):
    """A data directory holding the three datasets and one lecture notes file."""
    d = tmp_path / "data"
    (d / "notes").mkdir(parents=True)
    (d / "courses.json").write_text(json.dumps(COURSES))
    (d / "teachers.json").write_text(json.dumps(TEACHERS))
    (d / "lectures.json").write_text(json.dumps(LECTURES))
    (d / "notes" / "ba101-1.md").write_text(LECTURE_NOTES)
    return d


@pytest.fixture(name="store")
def store_fixture(data_dir):
    """A DatasetStore with every dataset loaded."""
    from lecturehub.catalog.store import DatasetStore
    store = DatasetStore(data_dir)
    assert store.load()
    return store


@pytest.fixture(scope="session", autouse=True)
def cleanup_artifacts():
    """Remove DB files created during the test session."""
    yield
    for name in _CLEANUP_FILES:
        p = _PROJECT_ROOT / name
        if p.exists():
            p.unlink()
