"""Lecture metadata extraction from marker lines in the notes"""

from lecturehub.core.models import LectureMetadata


FIELD_MARKERS = {
    'date':       '**Date:**',
    'duration':   '**Duration:**',
    'instructor': '**Instructor:**',
    'course':     '**Course:**',
}
OBJECTIVES_MARKER = '## Learning Objectives'
OBJECTIVES_WINDOW = 9


def _objectives(lines: list[str], start: int) -> list[str]:
    """Collect '-' bullets from the lines after start, up to the window or the next '##'."""
    found = []
    for line in lines[start + 1:start + 1 + OBJECTIVES_WINDOW]:
        item = line.strip()
        if item.startswith('-'):
            found.append(item[2:])
        elif item.startswith('##'):
            break
    return found


def extract_metadata(text: str) -> LectureMetadata:
    """Scan text for the title, the bold-label fields, and learning objectives.

    The first occurrence of each field wins; missing fields stay empty.
    """
    lines = text.split('\n')
    values: dict = {}

    for i, line in enumerate(lines):
        if line.startswith('# '):
            values.setdefault('title', line[2:])
            continue
        for name, marker in FIELD_MARKERS.items():
            if line.startswith(marker):
                values.setdefault(name, line[len(marker):].strip())
                break
        else:
            if OBJECTIVES_MARKER in line and 'objectives' not in values:
                values['objectives'] = _objectives(lines, i)

    return LectureMetadata(**values)
