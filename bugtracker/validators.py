"""
Input Validators

Pure predicates gating user input before it reaches the store.
"""

import re
from dataclasses import dataclass
from typing import Callable

from .config import TITLE_MAX_LENGTH, DESCRIPTION_MAX_LENGTH

PRIORITIES = {"low", "medium", "high"}
STATUSES = {"open", "in progress", "resolved"}

BUG_ID_PATTERN = re.compile(r"[1-9][0-9]*")


def is_valid_title(title: str) -> bool:
    return 0 < len(title) <= TITLE_MAX_LENGTH


def is_valid_description(description: str) -> bool:
    return 0 < len(description) <= DESCRIPTION_MAX_LENGTH


def is_valid_priority(priority: str) -> bool:
    return priority.lower() in PRIORITIES


def is_valid_status(status: str) -> bool:
    return status.lower() in STATUSES


def is_valid_bug_id(bug_id: str) -> bool:
    """Positive integer without a leading zero."""
    return BUG_ID_PATTERN.fullmatch(bug_id) is not None


@dataclass(frozen=True)
class Validator:
    """
    A named predicate plus the message shown when it rejects input.

    Example:
        if not TITLE.validate(text):
            console.print(TITLE.error_message)
    """

    name: str
    check: Callable[[str], bool]
    error_message: str

    def validate(self, value: str) -> bool:
        return self.check(value)

    def __call__(self, value: str) -> bool:
        return self.check(value)


TITLE = Validator(
    "title",
    is_valid_title,
    f"Invalid title. Title must not be empty and must be less than {TITLE_MAX_LENGTH} characters.",
)
DESCRIPTION = Validator(
    "description",
    is_valid_description,
    "Invalid description. Description must not be empty and must be less than "
    f"{DESCRIPTION_MAX_LENGTH} characters.",
)
PRIORITY = Validator(
    "priority",
    is_valid_priority,
    "Invalid priority. Please enter Low, Medium, or High.",
)
STATUS = Validator(
    "status",
    is_valid_status,
    "Invalid status. Please enter Open, In Progress, or Resolved.",
)
BUG_ID = Validator(
    "bug_id",
    is_valid_bug_id,
    "Invalid ID. Please enter a positive number.",
)
