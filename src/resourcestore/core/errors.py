class ResourceStoreError(Exception):
    """Base error for all user-facing resource store exceptions."""


class ConfigurationError(ResourceStoreError):
    """Raised when configuration is invalid or incomplete."""


class ProjectNotInitializedError(ResourceStoreError):
    """Raised when the data directory or database is missing."""


class ValidationError(ResourceStoreError):
    """Raised when a request cannot be turned into a valid statement."""


class ResourceConsistencyError(ResourceStoreError):
    """Raised when a read-back after a write does not yield exactly one resource."""


class ResourceUploadError(ResourceStoreError):
    """Raised when a file cannot be uploaded as a resource."""
