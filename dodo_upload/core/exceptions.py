"""
Custom error types for the upload flow
"""

from typing import Optional


class UploadToolError(Exception):
    """Base exception for every failure surfaced by an upload run.

    ``step`` names the pipeline step that was running when the error was
    raised; it is filled in by the pipeline if the raiser did not set it.
    """

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        step: Optional[str] = None,
    ):
        self.message = message
        self.error_code = error_code
        self.step = step
        super().__init__(self.message)


class InvalidInputError(UploadToolError):
    """Exception raised when caller input is rejected before any network call"""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message, "INVALID_INPUT")
        self.field = field


class FileAccessError(UploadToolError, OSError):
    """Exception raised when the source file cannot be read or stat'ed

    Subclasses OSError so callers handling plain IOError still catch it.
    """

    def __init__(self, message: str, file_path: Optional[str] = None):
        super().__init__(message, "FILE_ACCESS_ERROR")
        self.file_path = file_path


class RemoteError(UploadToolError):
    """Exception raised when the service answers with a non-zero status

    Args:
        message (str): Server-provided message
        status (Optional[int]): Application status code from the response
        endpoint (Optional[str]): URL that produced the error
    Example:
        raise RemoteError("bad token", status=7, endpoint=url)
    """

    def __init__(
        self,
        message: str,
        status: Optional[int] = None,
        endpoint: Optional[str] = None,
    ):
        super().__init__(message, "REMOTE_ERROR")
        self.status = status
        self.endpoint = endpoint


class NetworkError(UploadToolError):
    """Exception raised when an HTTP call fails at the transport level"""

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        error_code: Optional[str] = None,
    ):
        super().__init__(message, error_code or "NETWORK_ERROR")
        self.url = url


class UploadError(NetworkError):
    """Exception raised when streaming the file to object storage fails"""

    def __init__(self, message: str, url: Optional[str] = None):
        super().__init__(message, url, "UPLOAD_ERROR")


class RecordError(NetworkError):
    """Exception raised when the finalize (record) call fails"""

    def __init__(self, message: str, url: Optional[str] = None):
        super().__init__(message, url, "RECORD_ERROR")


class ConfigurationError(UploadToolError):
    """Exception raised when configuration is invalid"""

    def __init__(self, message: str, config_key: Optional[str] = None):
        super().__init__(message, "CONFIGURATION_ERROR")
        self.config_key = config_key
