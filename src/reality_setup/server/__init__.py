"""Server-side document synthesis and service control."""

from .config import inbound_path, synthesize_server
from .service import RestartReport, ServiceManager

__all__ = [
    "synthesize_server",
    "inbound_path",
    "ServiceManager",
    "RestartReport",
]
