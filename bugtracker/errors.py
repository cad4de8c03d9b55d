"""
Bug Tracker Errors

Every failure the CLI reports derives from BugTrackerError.
"""


class BugTrackerError(Exception):
    """Base class for bug tracker failures."""


class SchemaError(BugTrackerError):
    """The database could not be opened or its schema created. Fatal at startup."""


class ValidationError(BugTrackerError):
    """Input rejected by a validator."""


class NotFoundError(BugTrackerError):
    def __init__(self, bug_id):
        self.bug_id = bug_id
        super().__init__(f"Bug with ID {bug_id} does not exist.")


class StorageOperationError(BugTrackerError):
    """A statement failed to prepare or execute."""
