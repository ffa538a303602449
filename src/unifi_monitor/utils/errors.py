"""Error hierarchy for UniFi monitor operations.

Splits failures into configuration problems (not retryable, surfaced as a
setup prompt) and source failures (retryable, masked by stale cache data
whenever a previous snapshot exists).
"""


class ErrorCodes:
    """Standard error codes for UniFi monitor errors."""

    # Configuration errors
    NOT_CONFIGURED = 'NOT_CONFIGURED'

    # Controller/connection errors
    CONTROLLER_UNREACHABLE = 'CONTROLLER_UNREACHABLE'
    AUTHENTICATION_FAILED = 'AUTHENTICATION_FAILED'
    API_ERROR = 'API_ERROR'
    TIMEOUT = 'TIMEOUT'
    INVALID_RESPONSE = 'INVALID_RESPONSE'


class MonitorError(Exception):
    """Base exception with structured context."""

    retryable: bool = False

    def __init__(
        self,
        message: str,
        error_code: str,
        suggestion: str | None = None,
    ):
        """Initialize error with structured context.

        Args:
            message: Human-readable error description
            error_code: Structured error code (e.g., 'NOT_CONFIGURED')
            suggestion: Optional recovery suggestion for the user
        """
        self.message = message
        self.error_code = error_code
        self.suggestion = suggestion
        super().__init__(self._format())

    def _format(self) -> str:
        """Format error message with structured information."""
        parts = [f'[{self.error_code}] {self.message}']

        if self.suggestion:
            parts.append(f'Suggestion: {self.suggestion}')

        return '\n'.join(parts)

    def to_dict(self) -> dict[str, str | bool]:
        """Convert to dictionary for structured logging and JSON output."""
        return {
            'error_code': self.error_code,
            'message': self.message,
            'suggestion': self.suggestion or '',
            'retryable': self.retryable,
        }


class ConfigurationError(MonitorError):
    """Controller endpoint or credential is not set up."""

    retryable = False

    def __init__(self, message: str, suggestion: str | None = None):
        super().__init__(
            message=message,
            error_code=ErrorCodes.NOT_CONFIGURED,
            suggestion=suggestion
            or 'Set UNIFI_API_URL and UNIFI_API_KEY in the environment or a .env file',
        )


class SourceError(MonitorError):
    """Controller was addressable but the call failed."""

    retryable = True

    def __init__(
        self,
        message: str,
        error_code: str = ErrorCodes.API_ERROR,
        suggestion: str | None = None,
        status_code: int | None = None,
    ):
        """Initialize source error.

        Args:
            message: Error message
            error_code: One of the controller/connection error codes
            suggestion: Optional recovery suggestion
            status_code: HTTP status code when the controller answered
        """
        self.status_code = status_code
        super().__init__(message=message, error_code=error_code, suggestion=suggestion)
