"""Common utilities and shared functionality."""

from .exceptions import (
    GenerationFailedError,
    InvalidOverrideError,
    LinkFormatError,
    OutputWriteFailedError,
    RealitySetupError,
    TemplateError,
    TemplateMalformedError,
    TemplateNotFoundError,
    TemplatePathNotFoundError,
)
from .logging import get_logger, setup_logging
from .query import Match, find_node_by_field, format_path, get_node, remove_key, set_value
from .utils import (
    mask_sensitive_data,
    sanitize_log_data,
    validate_non_empty_string,
    validate_server_address,
    validate_short_id,
    validate_uuid_string,
)

__all__ = [
    # Exceptions
    "RealitySetupError",
    "InvalidOverrideError",
    "GenerationFailedError",
    "TemplateError",
    "TemplateNotFoundError",
    "TemplateMalformedError",
    "TemplatePathNotFoundError",
    "LinkFormatError",
    "OutputWriteFailedError",
    # Logging
    "get_logger",
    "setup_logging",
    # Document queries
    "Match",
    "find_node_by_field",
    "format_path",
    "get_node",
    "set_value",
    "remove_key",
    # Utils
    "validate_non_empty_string",
    "validate_server_address",
    "validate_short_id",
    "validate_uuid_string",
    "mask_sensitive_data",
    "sanitize_log_data",
]
