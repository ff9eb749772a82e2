"""Database table definitions for learner progress, notes, and bookmarks"""

from datetime import datetime
from typing import Optional

from sqlalchemy import Column, DateTime, Text
from sqlmodel import Field, SQLModel

from lecturehub.catalog.models import LectureStatus


class LectureProgress(SQLModel, table=True):
    """A learner's status for one lecture; absent rows fall back to the dataset status"""
    __tablename__ = "lecture_progress"
    course_id: str = Field(primary_key=True)
    lecture_id: int = Field(primary_key=True)
    status: Optional[LectureStatus] = Field(default=None, nullable=True, description="None defers to the dataset status")
    visited: bool = Field(default=False, nullable=False, description="Whether the learner opened the lecture")
    updated_at: datetime = Field(default_factory=datetime.now, sa_column=Column(DateTime(timezone=False), nullable=False))


class LectureNote(SQLModel, table=True):
    """Free-text note a learner keeps for a lecture"""
    __tablename__ = "lecture_notes"
    course_id: str = Field(primary_key=True)
    lecture_id: int = Field(primary_key=True)
    content: str = Field(..., sa_column=Column(Text, nullable=False))
    updated_at: datetime = Field(default_factory=datetime.now, sa_column=Column(DateTime(timezone=False), nullable=False))


class Bookmark(SQLModel, table=True):
    """A saved pointer to a lecture with an optional note"""
    __tablename__ = "bookmarks"
    id: str = Field(primary_key=True)
    course_id: str = Field(..., index=True, nullable=False)
    lecture_id: int = Field(..., nullable=False)
    note: str = Field(default="", sa_column=Column(Text, nullable=False))
    created_at: datetime = Field(default_factory=datetime.now, sa_column=Column(DateTime(timezone=False), nullable=False))
