"""
Exception hierarchy for sitesketch.

Messages on these exceptions are safe to show to users; the relay forwards
them verbatim as in-band error events.
"""


class SiteSketchError(Exception):
    """Base class for all sitesketch errors."""


class UploadRejectedError(SiteSketchError):
    """Image attachments violate the upload policy."""

    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.status_code = status_code


class ProviderError(SiteSketchError):
    """The AI provider failed while producing a generation."""


class UnknownProviderError(ProviderError):
    def __init__(self, provider: str):
        super().__init__(f"Invalid provider: {provider}")
        self.provider = provider


class ProviderConfigurationError(ProviderError):
    """A provider is selected but not usable (missing key or SDK)."""


class GenerationInProgressError(SiteSketchError):
    """A session was asked to start a generation while one is running."""

    def __init__(self):
        super().__init__("A generation is already in progress")
