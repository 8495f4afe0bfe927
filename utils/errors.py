"""Custom exceptions for the Workshop Hub."""


class WorkshopHubError(Exception):
    """Base exception for Workshop Hub application."""

    pass


class ConfigError(WorkshopHubError):
    """Configuration-related errors."""

    pass


class ValidationError(WorkshopHubError):
    """Data validation errors."""

    pass


class RecordNotFoundError(WorkshopHubError):
    """Raised when no workshop record matches the requested id."""

    def __init__(self, record_id: str):
        super().__init__(f"Workshop record '{record_id}' not found.")
        self.record_id = record_id


class ToolExecutionError(WorkshopHubError):
    """Errors raised by external collaborators."""

    pass


class SupabaseError(ToolExecutionError):
    """Errors related to Supabase operations."""

    pass


class StorageError(SupabaseError):
    """Errors related to Supabase storage buckets."""

    def __init__(self, message: str, remediation: str = ""):
        super().__init__(message)
        self.remediation = remediation


class BucketNotFoundError(StorageError):
    """The attachments bucket does not exist."""

    pass


class StoragePolicyError(StorageError):
    """The bucket exists but its policies reject the request."""

    pass


class PersistenceError(WorkshopHubError):
    """A remote write failed and the local change was rolled back."""

    def __init__(self, operation: str, record_id: str | None, cause: Exception):
        super().__init__(f"Failed to {operation} workshop [{record_id}]: {cause}")
        self.operation = operation
        self.record_id = record_id
        self.cause = cause


class LLMError(WorkshopHubError):
    """Errors related to LLM API calls."""

    pass


class ExtractionError(LLMError):
    """The LLM reply could not be turned into a workshop record."""

    pass
