"""Typed PDF generation failures so callers can decide what is retryable."""


class PDFGenerationError(Exception):
    """Base class for every rendering failure."""

    retryable: bool = False

    def __init__(self, message: str, cause: Exception | None = None):
        super().__init__(message)
        self.cause = cause


class PDFTimeoutError(PDFGenerationError):
    """Content load or PDF export exceeded the configured timeout."""

    retryable = True


class PDFRenderError(PDFGenerationError):
    """The browser accepted the page but failed to produce a PDF."""


class BrowserLaunchError(PDFGenerationError):
    """Chromium could not be started."""


class BrowserDisconnectedError(PDFGenerationError):
    """The browser went away mid-render; the pool relaunches on next use."""

    retryable = True
