"""Configuration templates and document models."""

from .document import ClientConfig, ConfigDocument, DocumentKind, ServerConfig
from .store import (
    CLIENT_TEMPLATE_NAME,
    SERVER_TEMPLATE_NAME,
    TemplateStore,
    parse_document,
)

__all__ = [
    "TemplateStore",
    "ConfigDocument",
    "ServerConfig",
    "ClientConfig",
    "DocumentKind",
    "parse_document",
    "SERVER_TEMPLATE_NAME",
    "CLIENT_TEMPLATE_NAME",
]
