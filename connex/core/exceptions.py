"""Custom exception hierarchy for layout generation."""


class ConnexError(Exception):
    """Base exception for generator failures."""


class InvalidConfigError(ConnexError):
    """Raised when a generation request cannot be satisfied by construction."""


class TemplateGenerationError(ConnexError):
    """Raised when a path template fails to cover the whole grid."""


class LayoutValidationError(ConnexError):
    """Raised when a candidate path or layout breaks a structural invariant."""


class GenerationExhausted(ConnexError):
    """Raised when every attempt was used up without a confirmed layout."""
