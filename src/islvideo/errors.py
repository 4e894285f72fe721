"""islvideo.errors — failure taxonomy for sentence-to-video generation.

Every failure surfaced to a caller carries a `kind` (the taxonomy name)
and a human-readable message, so callers can tell "fix your input"
(user_error=True) apart from "system unavailable".
"""


class GenerationError(Exception):
    """Base class for all generation failures."""

    kind = "GenerationError"
    user_error = False

    def __init__(self, message: str, details: str | None = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict:
        """Structured error body: {error, type, details}."""
        return {
            "error": self.message,
            "type": self.kind,
            "details": self.details or self.message,
        }


class CatalogUnavailable(GenerationError):
    kind = "CatalogUnavailable"


class EmptyInput(GenerationError):
    kind = "EmptyInput"
    user_error = True


class NoClipsResolved(GenerationError):
    kind = "NoClipsResolved"
    user_error = True


class ClipUnavailable(GenerationError):
    kind = "ClipUnavailable"

    def __init__(self, path: str):
        super().__init__(f"Clip not readable: {path}")
        self.path = path


class CompositionFailed(GenerationError):
    """The media backend failed; `details` holds its diagnostic verbatim."""

    kind = "CompositionFailed"

    def __init__(self, message: str, diagnostic: str = ""):
        super().__init__(message, details=diagnostic or None)
        self.diagnostic = diagnostic


class CompositionTimeout(GenerationError):
    kind = "CompositionTimeout"

    def __init__(self, timeout: float):
        super().__init__(f"Composition exceeded {timeout:g}s timeout")
        self.timeout = timeout


class OutputVerificationFailed(GenerationError):
    kind = "OutputVerificationFailed"

    def __init__(self, path: str):
        super().__init__(f"Output video missing or empty: {path}")
        self.path = path


class OutputDirectoryUnavailable(GenerationError):
    kind = "OutputDirectoryUnavailable"
