"""Custom exceptions for reality-setup."""


class RealitySetupError(Exception):
    """Base exception for all reality-setup errors."""
    pass


class InvalidOverrideError(RealitySetupError):
    """Raised when a user-supplied override is malformed or only half of a pair."""
    pass


class GenerationFailedError(RealitySetupError):
    """Raised when an identity generator returns empty or malformed material."""
    pass


class TemplateError(RealitySetupError):
    """Base exception for template problems."""
    pass


class TemplateNotFoundError(TemplateError):
    """Raised when a template file does not exist."""
    pass


class TemplateMalformedError(TemplateError):
    """Raised when a template is not a well-formed JSON object."""
    pass


class TemplatePathNotFoundError(TemplateError):
    """Raised when a synthesis target is missing from the template."""

    def __init__(self, path: str, reason: str | None = None) -> None:
        self.path = path
        message = f"Template path not found: {path}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class LinkFormatError(RealitySetupError):
    """Raised when a connection URI cannot be parsed."""
    pass


class OutputWriteFailedError(RealitySetupError):
    """Raised when a configuration document cannot be written."""
    pass
