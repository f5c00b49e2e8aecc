from typing import Optional

class RenamerError(Exception):
    """Base class for application-specific errors."""
    pass

class ConfigError(RenamerError):
    """Errors related to configuration loading or validation."""
    pass

class FileOperationError(RenamerError):
    """Errors during file system operations."""
    pass

class TargetExistsError(FileOperationError):
    """The destination already exists and the conflict mode says to leave it alone."""
    pass

class LLMError(RenamerError):
    """Base class for failures talking to the text-generation service."""
    pass

class TransportError(LLMError):
    """The service could not be reached or returned an error."""
    pass

class ParseError(LLMError):
    """The completion was not valid JSON."""
    def __init__(self, message: str, content: str = ""):
        super().__init__(message)
        self.content = content

class ValidationError(LLMError):
    """Well-formed JSON that is missing or has a malformed expected field."""
    pass

class RetryExhaustedError(LLMError):
    """Every attempt of a retried request failed."""
    def __init__(self, attempts: int, last_error: Optional[BaseException] = None):
        super().__init__(f"No valid response after {attempts} attempts: {last_error}")
        self.attempts = attempts
        self.last_error = last_error
