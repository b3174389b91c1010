# todoserver/core/errors.py


class TodoAppError(Exception):
    """
    Base class for failures that map onto an HTTP response.
    The message is returned to the client verbatim as {"error": message}.
    """
    status_code = 500

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(TodoAppError):
    status_code = 400


class ConflictError(TodoAppError):
    status_code = 400


class NotFoundError(TodoAppError):
    status_code = 400


class InvalidCredentialsError(TodoAppError):
    status_code = 401


class Unauthorized(TodoAppError):
    status_code = 401


class Forbidden(TodoAppError):
    status_code = 403


class StoreError(TodoAppError):
    status_code = 500
