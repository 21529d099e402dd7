"""TaskGate engine errors."""


class TaskGateError(Exception):
    """Base error for TaskGate operations."""

    def __init__(self, message: str, code: str = "TASKGATE_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)


class TaskNotFound(TaskGateError):
    """Task does not exist."""

    def __init__(self, task_id: str):
        super().__init__(f"Task with ID {task_id} not found", "TASK_NOT_FOUND")
        self.task_id = task_id


class PermissionDenied(TaskGateError):
    """Policy refused the operation. Terminal for the request, never retried."""

    def __init__(self, reason: str):
        super().__init__(reason, "PERMISSION_DENIED")
        self.reason = reason


class UnauthorizedError(TaskGateError):
    """Request could not be authenticated."""

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message, "UNAUTHORIZED")


class AuditWriteFailure(TaskGateError):
    """The audit store rejected a write.

    Raised inside the recorder only; the business operation that triggered
    the write never sees it.
    """

    def __init__(self, message: str):
        super().__init__(message, "AUDIT_WRITE_FAILURE")
