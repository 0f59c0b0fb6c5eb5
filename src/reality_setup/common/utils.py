"""Utility functions for reality-setup."""

import re
import uuid
from typing import Any

HEX_PATTERN = re.compile(r"^[0-9a-fA-F]*$")
ADDRESS_FORBIDDEN = re.compile(r"[/?#@\s]")
MAX_SHORT_ID_LENGTH = 16


def validate_non_empty_string(value: str, field_name: str) -> str:
    """Validate that a string is not empty or only whitespace.

    Args:
        value: String value to validate
        field_name: Name of the field for error messages

    Returns:
        Stripped string value

    Raises:
        ValueError: If string is empty or only whitespace
    """
    if not value or not value.strip():
        raise ValueError(f"{field_name} cannot be empty")
    return value.strip()


def validate_server_address(value: str) -> str:
    """Validate a server address for the link authority and client document.

    Args:
        value: Public IP or domain of the server

    Returns:
        Stripped address

    Raises:
        ValueError: If the address is empty or contains URI delimiters or whitespace
    """
    value = validate_non_empty_string(value, "Server address")
    if ADDRESS_FORBIDDEN.search(value):
        raise ValueError(
            f"Server address must be a bare host name or IP address: {value!r}"
        )
    return value


def validate_short_id(value: str) -> str:
    """Validate a REALITY short id: non-empty, even-length hex, at most 16 chars."""
    if not value:
        raise ValueError("Short id cannot be empty")
    if not HEX_PATTERN.match(value):
        raise ValueError(f"Short id must be hex encoded: {value!r}")
    if len(value) % 2:
        raise ValueError("Short id must have an even number of hex characters")
    if len(value) > MAX_SHORT_ID_LENGTH:
        raise ValueError(
            f"Short id must be at most {MAX_SHORT_ID_LENGTH} hex characters"
        )
    return value


def validate_uuid_string(value: str) -> str:
    """Validate that value is shaped like an RFC 4122 UUID.

    Returns:
        The value unchanged (no case or format normalization)
    """
    try:
        uuid.UUID(value)
    except (ValueError, TypeError, AttributeError) as e:
        raise ValueError(f"Invalid UUID: {value!r}") from e
    return value


def mask_sensitive_data(
    value: str | None, mask_char: str = "*", show_chars: int = 4
) -> str:
    """Mask sensitive data for logging while preserving some characters for debugging.

    Args:
        value: Sensitive string to mask (e.g., private key, password)
        mask_char: Character to use for masking
        show_chars: Number of characters to show at the end

    Returns:
        Masked string safe for logging
    """
    if not value:
        return "<None>"

    if len(value) <= show_chars:
        return mask_char * len(value)

    masked_length = len(value) - show_chars
    return mask_char * masked_length + value[-show_chars:]


def sanitize_log_data(data: dict[str, Any]) -> dict[str, Any]:
    """Sanitize dictionary data for safe logging by masking sensitive fields.

    Public keys, short ids and client ids are shared with clients and are
    left readable.
    """
    sensitive_fields = {
        "private_key",
        "password",
        "pass",
        "secret",
        "token",
    }

    sanitized = {}
    for key, value in data.items():
        if any(sensitive_field in key.lower() for sensitive_field in sensitive_fields):
            sanitized[key] = mask_sensitive_data(str(value) if value else None)
        else:
            sanitized[key] = value

    return sanitized
