"""
Error taxonomy for the task/scoring core.

Routes don't catch these: the handler registered in app.main turns them into
JSON responses with the matching status code.
"""


class TaskTrackerError(Exception):
    status_code = 500

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class InvalidInput(TaskTrackerError):
    """A required field is missing or malformed."""
    status_code = 400


class NotFound(TaskTrackerError):
    """Daily record, task or user does not exist."""
    status_code = 404


class Forbidden(TaskTrackerError):
    """Operation not allowed on a locked date."""
    status_code = 403


class StorageFailure(TaskTrackerError):
    """The database rejected a write."""
    status_code = 500
