"""Custom exception hierarchy for the Kakuro engine."""


class KakuroError(Exception):
    """Base exception for engine failures."""


class TemplateError(KakuroError):
    """Raised when a template is malformed (empty, ragged, bad markers)."""


class ValidationError(KakuroError):
    """Raised when a structural integrity check fails."""


class OutOfRangeDigitError(KakuroError, ValueError):
    """Raised when a digit outside 1..9 reaches the session boundary."""


class PuzzleGenerationError(KakuroError):
    """Raised when no puzzle could be built within the retry budget."""


class SessionDecodeError(KakuroError):
    """Raised when a persisted session blob cannot be decoded."""
