"""Exceptions raised by resource loading"""  # noqa: D415


class ResourceLoaderError(Exception):
    """Base exception for resource loading errors"""  # noqa: D415


class ValidationError(ResourceLoaderError, ValueError):
    """Raised when a loader, filter or resource is built with invalid arguments"""  # noqa: D415


class ResourceIOError(ResourceLoaderError, OSError):
    """Raised when a backing store cannot be listed, opened or resolved"""  # noqa: D415


class EnumerationStateError(ResourceLoaderError, RuntimeError):
    """Raised when a candidate cannot be addressed during lazy enumeration.

    This means a root that was already resolved produced a name or location
    that cannot be built. Enumeration cannot continue without under-reporting.
    """


class PatternError(ResourceLoaderError, ValueError):
    """Raised when a path pattern cannot be compiled"""  # noqa: D415


class NoSuchResourceError(ResourceLoaderError, LookupError):
    """Raised when taking the next resource from an exhausted enumerator"""  # noqa: D415


class ConfigFileError(ResourceLoaderError):
    """Raised when configuration file loading fails."""

    def __init__(self, file_path, message: str, cause: Exception | None = None) -> None:  # noqa: ANN001
        """Initialize with file path, message, and optional cause.

        Args:
            file_path: The file that failed to load
            message: Human-readable error message
            cause: The underlying exception that caused the failure
        """
        self.file_path = file_path
        self.message = message
        self.cause = cause
        super().__init__(f"Config file error in {file_path}: {message}")
