"""Result models shared by the converter, metadata extraction, and export"""

from dataclasses import dataclass, field

from pydantic import BaseModel


@dataclass(frozen=True)
class Heading:
    """A heading found during conversion; id is an anchor slug, not unique."""
    text:  str
    level: int          # 1-4
    id:    str


@dataclass
class ConvertResult:
    """HTML fragment plus the headings found while producing it."""
    html:     str
    headings: list[Heading] = field(default_factory=list)

    def table_of_contents(self) -> str:
        from lecturehub.core.toc import generate_table_of_contents
        return generate_table_of_contents(self.headings)


class LectureMetadata(BaseModel):
    """Fields read from the marker lines of a lecture's notes."""
    title:      str = ""
    date:       str = ""
    duration:   str = ""
    instructor: str = ""
    course:     str = ""
    objectives: list[str] = []


class TocEntry(BaseModel):
    """Exported table-of-contents row with an estimated page number."""
    text:  str
    level: int
    page:  int
