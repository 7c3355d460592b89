"""Error taxonomy for the board core.

API failures are converted to one of these at the client boundary and then
caught by the board operations, which turn them into notifications.
"""

from typing import Dict, Optional


class BoardError(Exception):
    """Base class for every board error."""


class TaskValidationError(BoardError):
    """Local form validation failed; nothing was sent to the API."""

    def __init__(self, field_errors: Dict[str, str]):
        self.field_errors = field_errors
        fields = ", ".join(sorted(field_errors))
        super().__init__(f"Invalid fields: {fields}")


class FetchError(BoardError):
    """Listing tasks failed."""


class WriteError(BoardError):
    """A create, update, delete or reorder call failed."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


class PartialBatchError(WriteError):
    # reorder reported fewer applied rows than submitted
    def __init__(self, submitted: int, applied: int):
        self.submitted = submitted
        self.applied = applied
        super().__init__(f"Reorder applied {applied} of {submitted} updates")
