"""
Bug Data Models

Defines the bug record and its status/priority vocabularies.
"""

import sqlite3
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Any, Optional, Union

from .errors import ValidationError


class _CaseInsensitiveEnum(Enum):

    @classmethod
    def parse(cls, text: str):
        """Return the member whose value matches text, ignoring case."""
        member = cls.lookup(text)
        if member is None:
            allowed = ", ".join(m.value for m in cls)
            raise ValidationError(f"Invalid {cls.__name__} {text!r}; expected one of: {allowed}")
        return member

    @classmethod
    def lookup(cls, text: Optional[str]):
        """Like parse, but returns None for unknown or missing text."""
        if not isinstance(text, str):
            return None
        lowered = text.lower()
        for member in cls:
            if member.value.lower() == lowered:
                return member
        return None


class BugStatus(_CaseInsensitiveEnum):
    """Bug lifecycle status."""
    OPEN = "Open"
    IN_PROGRESS = "In Progress"
    RESOLVED = "Resolved"


class BugPriority(_CaseInsensitiveEnum):
    """Bug priority levels."""
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


def _label(value) -> str:
    if isinstance(value, Enum):
        return value.value
    return "" if value is None else str(value)


@dataclass
class Bug:
    """
    A bug record as persisted in the bugs table.

    Rows written by other clients may hold a status or priority outside the
    known vocabulary; those are kept as the raw stored text (or None).

    Attributes:
        id: Auto-assigned row ID
        title: Short summary (1-100 chars)
        description: Details (1-1000 chars)
        status: Current status
        priority: Priority level
        date: Creation date (YYYY-MM-DD), set by the database
    """

    id: int
    title: str
    description: str
    priority: Union[BugPriority, str, None]
    status: Union[BugStatus, str, None] = BugStatus.OPEN
    date: str = ""

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary of display strings."""
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "status": _label(self.status),
            "priority": _label(self.priority),
            "date": self.date,
        }

    @classmethod
    def from_row(cls, row: sqlite3.Row) -> "Bug":
        """Create Bug from a bugs table row."""
        return cls(
            id=row["ID"],
            title=row["Title"],
            description=row["Description"] or "",
            status=BugStatus.lookup(row["Status"]) or row["Status"],
            priority=BugPriority.lookup(row["Priority"]) or row["Priority"],
            date=row["Date"] or "",
        )
