"""Domain exceptions shared by services and translated by the API layer.

Each exception carries a stable ``code`` that ends up in the JSON error
body next to ``detail``.
"""


class FitcoachError(Exception):
    """Base class for expected, user-facing failures."""

    code = "ERROR"


class AuthenticationFailed(FitcoachError):
    code = "AUTHENTICATION_FAILED"


class PermissionDenied(FitcoachError):
    code = "PERMISSION_DENIED"


class NotFound(FitcoachError):
    code = "NOT_FOUND"


class Conflict(FitcoachError):
    code = "CONFLICT"


class InvalidInput(FitcoachError):
    code = "INVALID_INPUT"


class LLMNotConfigured(FitcoachError):
    """API key or model missing from both admin settings and static config."""

    code = "LLM_NOT_CONFIGURED"


class GenerationFailed(FitcoachError):
    """The model answered, but with nothing usable."""

    code = "GENERATION_FAILED"


class PdfRenderError(FitcoachError):
    code = "PDF_RENDER_ERROR"
