"""Client-side document synthesis."""

from .config import listener_path, outbound_path, synthesize_client

__all__ = [
    "synthesize_client",
    "outbound_path",
    "listener_path",
]
