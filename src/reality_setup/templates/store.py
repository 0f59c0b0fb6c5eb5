"""Template loading for server and client configuration documents."""

import json
from importlib import resources
from pathlib import Path
from typing import Any, TypeVar

from ..common.exceptions import TemplateMalformedError, TemplateNotFoundError
from ..common.logging import get_logger
from .document import ClientConfig, ConfigDocument, ServerConfig

logger = get_logger(__name__)

SERVER_TEMPLATE_NAME = "server_template.json"
CLIENT_TEMPLATE_NAME = "client_template.json"

DocumentT = TypeVar("DocumentT", bound=ConfigDocument)


def parse_document(text: str, source: str) -> dict[str, Any]:
    """Parse template text into a mapping.

    Raises:
        TemplateMalformedError: If the text is not JSON or not a JSON object
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise TemplateMalformedError(f"Template {source} is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise TemplateMalformedError(
            f"Template {source} must contain a JSON object, got {type(data).__name__}"
        )
    return data


class TemplateStore:
    """Loads and caches configuration templates.

    Loaded documents are shared between runs; callers must not mutate them.
    The synthesizer always works on a deep copy.
    """

    def __init__(self) -> None:
        self._cache: dict[tuple[str, str], ConfigDocument] = {}

    def load(self, path: str | Path) -> ConfigDocument:
        """Load a template from ``path``.

        Raises:
            TemplateNotFoundError: If the file does not exist
            TemplateMalformedError: If the content is not a JSON object
        """
        return self._load_file(Path(path), ConfigDocument)

    def load_server(self, path: str | Path | None = None) -> ServerConfig:
        """Load the server template, defaulting to the bundled one."""
        if path is None:
            return self._load_bundled(SERVER_TEMPLATE_NAME, ServerConfig)
        return self._load_file(Path(path), ServerConfig)

    def load_client(self, path: str | Path | None = None) -> ClientConfig:
        """Load the client template, defaulting to the bundled one."""
        if path is None:
            return self._load_bundled(CLIENT_TEMPLATE_NAME, ClientConfig)
        return self._load_file(Path(path), ClientConfig)

    def clear(self) -> None:
        """Drop cached templates so the next load rereads the files."""
        self._cache.clear()

    def _load_file(self, path: Path, document_type: type[DocumentT]) -> DocumentT:
        key = (str(path.resolve()), document_type.__name__)
        cached = self._cache.get(key)
        if cached is not None:
            return cached  # type: ignore[return-value]

        if not path.is_file():
            raise TemplateNotFoundError(f"Template not found: {path}")

        try:
            text = path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise TemplateMalformedError(f"Template {path} is not UTF-8: {e}") from e
        except FileNotFoundError as e:
            raise TemplateNotFoundError(f"Template not found: {path}") from e

        document = document_type(data=parse_document(text, str(path)), source=str(path))
        self._cache[key] = document
        logger.debug("Template loaded", path=str(path), kind=document.kind.value)
        return document

    def _load_bundled(self, name: str, document_type: type[DocumentT]) -> DocumentT:
        key = (f"bundled:{name}", document_type.__name__)
        cached = self._cache.get(key)
        if cached is not None:
            return cached  # type: ignore[return-value]

        resource = resources.files(__package__).joinpath(name)
        if not resource.is_file():
            raise TemplateNotFoundError(f"Bundled template missing: {name}")

        document = document_type(
            data=parse_document(resource.read_text(encoding="utf-8"), name),
            source=f"bundled:{name}",
        )
        self._cache[key] = document
        logger.debug("Bundled template loaded", name=name, kind=document.kind.value)
        return document
