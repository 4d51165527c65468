"""Errors raised while uploading a file and resolving its download link."""

from typing import Optional


class TeledropError(Exception):
    """Base class for every failure the CLI reports to the user."""

    # Process exit status used by the CLI after printing the message.
    exit_code = 0


class ConfigError(TeledropError):
    """The configuration file exists but could not be read."""


class ConfigMissing(ConfigError):
    """A required configuration parameter is empty or absent."""

    def __init__(self, missing: list, path=None):
        self.missing = list(missing)
        self.path = path
        super().__init__(
            "Missing config params: " + ", ".join(self.missing)
        )


class FileNotFound(TeledropError):
    """The file to upload does not exist or cannot be read."""

    def __init__(self, path):
        self.path = path
        super().__init__(f"File not found or not readable: {path}")


class FileTooLarge(TeledropError):
    exit_code = 1

    def __init__(self, path, size: int, limit: int):
        self.path = path
        self.size = size
        self.limit = limit
        super().__init__(
            f"Filesize is too big. Max size is {limit // 1_000_000} MB"
        )


class UploadRejected(TeledropError):
    """The API answered the upload but declined to store the document."""

    def __init__(self, description: Optional[str] = None, error_code: Optional[int] = None):
        self.description = description
        self.error_code = error_code
        message = "Uploading error"
        if description:
            message += f": {description}"
        if error_code is not None:
            message += f" (code {error_code})"
        super().__init__(message)


class UploadResponseMalformed(TeledropError):
    """The upload response was not the JSON envelope we expect."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Error deserializing response: {reason}")


class ResolveFailed(TeledropError):
    exit_code = 1

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"File path API error: {reason}")


class NetworkError(TeledropError):
    """Transport-level failure during either API call."""

    def __init__(self, operation: str, cause: BaseException, detail: Optional[str] = None):
        self.operation = operation
        self.cause = cause
        # aiohttp errors may embed the request URL, callers pass a redacted detail
        super().__init__(f"Network error during {operation}: {detail or cause}")
