"""Error taxonomy shared by services and routers.

NotFoundError   -> 404 at the HTTP boundary
ValidationError -> 400
StoreError      -> 500, wraps the underlying database / cancellation error
"""

from typing import Optional


class TaskerError(Exception):
    status_code = 500

    def __init__(self, message: str, code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.code = code


class NotFoundError(TaskerError):
    status_code = 404


class ValidationError(TaskerError):
    status_code = 400


class StoreError(TaskerError):
    status_code = 500

    def __init__(self, operation: str, user_id: str, entity_id=None, cause: Optional[BaseException] = None):
        message = f"failed to {operation} for user_id={user_id}"
        if entity_id is not None:
            message += f" id={entity_id}"
        if cause is not None:
            message += f": {cause}"
        super().__init__(message, code="STORE_ERROR")
        self.operation = operation
        self.user_id = user_id
        self.entity_id = entity_id


class OperationCancelledError(Exception):
    """Raised when the caller's context was cancelled or its deadline passed."""
