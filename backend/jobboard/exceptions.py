"""Error taxonomy shared by the validation rules, services and policy.

Every error carries a stable ``error_code`` so callers can tell failure classes
apart without parsing messages. Translation to HTTP responses happens only in
``jobboard.main``.
"""

from typing import Any

# Parameter format error codes
FORMAT_ERROR_CODE = "PFE0001"
SIZE_ERROR_CODE = "PFE0002"
MINIMUM_VALUE_ERROR_CODE = "PFE0003"
MAXIMUM_VALUE_ERROR_CODE = "PFE0004"

# Request error codes
NO_LOGGED_IN_ERROR_CODE = "PHE0001"
METHOD_NOT_ALLOWED_ERROR_CODE = "PHE0002"
METHOD_NOT_IMPLEMENTED_ERROR_CODE = "PHE0003"


class JobBoardError(Exception):
    """Base class for every error raised by the job board core."""

    def __init__(self, message: str, error_code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.error_code = error_code

    @property
    def name(self) -> str:
        return type(self).__name__

    def as_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {"message": self.message, "name": self.name}
        if self.error_code is not None:
            body["errorCode"] = self.error_code
        return body


class ParameterFormatError(JobBoardError):
    """A caller-supplied value has the wrong shape, size or magnitude."""

    def __init__(self, message: str, error_code: str = FORMAT_ERROR_CODE) -> None:
        super().__init__(message, error_code)


class UnauthenticatedError(JobBoardError):
    def __init__(self, message: str = "Not logged in") -> None:
        super().__init__(message, NO_LOGGED_IN_ERROR_CODE)


class NotPermittedError(JobBoardError):
    def __init__(self, message: str = "Method not allowed") -> None:
        super().__init__(message, METHOD_NOT_ALLOWED_ERROR_CODE)


class NotImplementedOperationError(JobBoardError):
    def __init__(self, message: str = "Method not implemented") -> None:
        super().__init__(message, METHOD_NOT_IMPLEMENTED_ERROR_CODE)


class NotFoundError(JobBoardError):
    def __init__(self, resource: str, resource_id: Any) -> None:
        super().__init__(f"{resource} {resource_id} not found")
        self.resource = resource
        self.resource_id = resource_id


class ConflictError(JobBoardError):
    """A write would violate a uniqueness rule (email, one application per job)."""
