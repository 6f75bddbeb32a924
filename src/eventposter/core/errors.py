"""Exception hierarchy for Event Poster Studio.

Every error raised by the core layer derives from :class:`PosterError` and
carries a message that is safe to show to the user as-is. The UI handlers
and API routes catch ``PosterError`` and surface ``str(error)``.
"""


class PosterError(Exception):
    """Base class for all user-facing poster errors."""


class AttachmentReadError(PosterError):
    """An uploaded file could not be read into an attachment."""


class MissingApiKeyError(PosterError):
    """No Gemini API key is configured for the current session."""


class GenerationError(PosterError):
    """Poster generation failed (network, upstream error, or no image returned)."""


class GenerationInProgressError(PosterError):
    """A poster generation is already running for this session."""


class ExtractionError(PosterError):
    """Event details could not be extracted from the uploaded document."""


class BackgroundCleanError(PosterError):
    """The uploaded background could not be cleaned."""
