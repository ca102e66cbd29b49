"""Error taxonomy for the Ask AI pipeline."""


class AskError(Exception):
    """Base error for the Ask AI pipeline.

    ``stage`` records the pipeline stage that failed (validate, load, generate, ...).
    """

    kind = "ask_error"

    def __init__(self, message: str, stage: str | None = None):
        super().__init__(message)
        self.message = message
        self.stage = stage


class ValidationError(AskError):
    """Request is missing company_id or question."""

    kind = "validation"


class NotFoundError(AskError):
    """Company (or media asset) does not exist."""

    kind = "not_found"


class ConfigurationError(AskError):
    """Generation credential is absent or rejected by the provider."""

    kind = "configuration"


class GenerationError(AskError):
    """Model call failed: timeout, quota, provider error or empty response."""

    kind = "generation"


class StorageError(AskError):
    """Record store, history store or binary store failure."""

    kind = "storage"
