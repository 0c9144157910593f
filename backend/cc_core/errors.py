from typing import List, Optional


class CloudControllerError(Exception):
    code = "CF-Error"
    status = 500

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.__class__.__doc__ or self.code)
        self.message = message or ""


class NotFound(CloudControllerError):
    """Resource not found."""

    code = "CF-ResourceNotFound"
    status = 404


class AppNotFound(NotFound):
    """App not found."""


class PackageNotFound(NotFound):
    """Package not found."""


class DropletNotFound(NotFound):
    """Droplet not found."""


class Unauthorized(CloudControllerError):
    """You are not authorized to perform the requested action."""

    code = "CF-NotAuthorized"
    status = 403


class ValidationFailed(CloudControllerError):
    code = "CF-UnprocessableEntity"
    status = 422

    def __init__(self, errors: List[str]):
        super().__init__("; ".join(errors) or "invalid request")
        self.errors = errors


class InvalidPackageType(CloudControllerError):
    code = "CF-InvalidPackageType"
    status = 422


class InvalidPackage(CloudControllerError):
    code = "CF-InvalidPackage"
    status = 422


class JobEnqueueError(Exception):
    """Deferred job could not be handed to the queue."""

    def __init__(self, queue: str, message: str):
        super().__init__(f"enqueue to {queue} failed: {message}")
        self.queue = queue
