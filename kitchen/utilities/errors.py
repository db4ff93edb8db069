"""Error taxonomy shared by the domain, repositories and API layer.

The API registers one exception handler per class (see kitchen.api.api_run):
  NotFoundError     -> 404
  ValidationFailure -> 400
  UpstreamFailure   -> 502
"""


class KitchenError(Exception):
    """Base class for recoverable, caller-facing errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(KitchenError):
    """Entity is missing or belongs to another owner."""

    def __init__(self, entity: str, entity_id: str | None = None):
        super().__init__(f"{entity} not found")
        self.entity = entity
        self.entity_id = entity_id


class ValidationFailure(KitchenError, ValueError):
    """Input rejected before any write."""


class UpstreamFailure(KitchenError):
    """The AI provider failed or returned output we could not use."""


__all__ = ['KitchenError', 'NotFoundError', 'ValidationFailure', 'UpstreamFailure']
