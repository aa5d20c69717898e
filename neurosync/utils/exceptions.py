"""
Exception hierarchy for NeuroSync.

Only ValidationError and TransportFault are ever visible to callers of the
engine. GatewayDegraded and LLMError are raised inside the remote-call
boundaries and absorbed there.
"""


class NeuroSyncError(Exception):
    """
    Base exception for all NeuroSync errors.
    """

    def __init__(self, message: str, context: dict | None = None):
        """
        Initialize NeuroSync error.
        Args:
            message: Error message
            context: Optional context dictionary with additional error details
        """
        super().__init__(message)
        self.message = message
        self.context = context or {}


class ValidationError(NeuroSyncError):
    """
    Input validation errors.
    Raised when an artifact kind or mime type is rejected before it enters the pipeline.
    """

    pass


class NotFoundError(NeuroSyncError):
    """
    Resource not found errors.
    Raised when a node or source artifact id does not exist.
    """

    pass


class ConfigurationError(NeuroSyncError):
    """
    Configuration errors.
    Raised when configuration is invalid or missing required values.
    """

    pass


class LLMError(NeuroSyncError):
    """
    LLM operation errors.
    Raised by providers when a remote call fails (API errors, timeouts, empty output).
    """

    pass


class GatewayDegraded(NeuroSyncError):
    """
    A remote extraction, transcription or analysis call failed.
    Never leaves the gateway that raised it; the gateway substitutes a degraded result.
    """

    pass


class TransportFault(NeuroSyncError):
    """
    Live voice channel failure.
    Reported to callers only through the bridge's status callback.
    """

    pass
