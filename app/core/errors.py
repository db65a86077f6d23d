"""Error taxonomy for the generation pipeline."""

from typing import Optional


class GenerationError(Exception):
    """Base class for pipeline errors that map to an HTTP error response."""

    status_code = 500
    public_message = "Generation failed"

    def __init__(self, message: str, detail: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.detail = detail


class ConfigurationError(GenerationError):
    """Required configuration (the gateway credential) is missing."""

    public_message = "Server misconfigured"


class ValidationError(GenerationError):
    """Required request fields are missing."""

    status_code = 400
    public_message = "Missing fields"


class UpstreamError(GenerationError):
    """Gateway call failed: transport error, timeout, non-2xx status or unparseable body."""

    public_message = "Upstream generation failed"

    def __init__(self, message: str, detail: Optional[str] = None, upstream_status: Optional[int] = None):
        super().__init__(message, detail)
        self.upstream_status = upstream_status


class MetadataFetchError(GenerationError):
    """Product page could not be fetched. Always recovered by the orchestrator."""


class ExtractionError(GenerationError):
    """Gateway image response held no usable payload. Recovered as an absent image."""
