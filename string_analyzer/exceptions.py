from typing import Optional


class StringAnalyzerError(Exception):
    """Base error for caller-observable failures"""

    status_code = 500
    message = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.message
        super().__init__(self.message)


class InvalidValueError(StringAnalyzerError):
    status_code = 400
    message = "String cannot be empty"


class ConflictError(StringAnalyzerError):
    status_code = 409
    message = "String already exists in the system"


class NotFoundError(StringAnalyzerError):
    status_code = 404
    message = "String does not exist in the system"


class StorageUnavailableError(StringAnalyzerError):
    status_code = 503
    message = "Storage backend is unavailable"


class ExtractionFailedError(StringAnalyzerError):
    status_code = 400
    message = "Unable to parse natural language query"
