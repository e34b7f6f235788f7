"""Domain exception types.

Routers never translate these by hand; ``app.main`` registers one handler per
type and maps it to an HTTP status:

- ``NotFoundError`` -> 404
- ``ValidationError`` -> 400
- ``SyncInProgressError`` -> 409
- ``ProviderError`` -> upstream status when it is an error status, else 502
- ``StoreError`` -> 500 with a generic detail
"""


class FignityError(Exception):
    """Base exception for application errors."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class NotFoundError(FignityError):
    """Referenced project or block does not exist (or is archived)."""

    def __init__(self, resource: str, identifier: str):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} not found: {identifier}")


class ValidationError(FignityError):
    """Malformed input rejected before any store mutation."""

    pass


class ProviderError(FignityError):
    """Remote design-file provider request failed."""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


class StoreError(FignityError):
    """Persistence failure; fatal for the current operation."""

    pass


class SyncInProgressError(FignityError):
    """A sync for the same project is already running."""

    def __init__(self, project_id: str):
        self.project_id = project_id
        super().__init__(f"Sync already in progress for project {project_id}")


class InvalidTransitionError(FignityError):
    """Illegal change-status transition."""

    def __init__(self, current: str, target: str):
        self.current = current
        self.target = target
        super().__init__(f"Cannot transition text block from '{current}' to '{target}'")
