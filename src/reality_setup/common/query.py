"""Document query primitives for JSON configuration templates.

Xray templates route by tag name, so configuration nodes are addressed by
path rather than by fixed position. A path is a tuple of segments:

- ``str``: key of a mapping
- ``int``: index into a list
- ``Match(field, value)``: first list element whose ``field`` equals ``value``

Every container along a path must exist. Lookups that miss raise
:class:`TemplatePathNotFoundError` instead of returning a default.
"""

from typing import Any, NamedTuple, Union

from .exceptions import TemplatePathNotFoundError


class Match(NamedTuple):
    """Select the first list element whose ``field`` equals ``value``."""

    field: str
    value: Any

    def __str__(self) -> str:
        return f"[{self.field}={self.value}]"


Segment = Union[str, int, Match]
Path = tuple[Segment, ...]


def format_path(path: Path) -> str:
    """Render a path as ``inbounds[tag=vless-in].settings.clients[0]``."""
    rendered = ""
    for segment in path:
        if isinstance(segment, Match):
            rendered += str(segment)
        elif isinstance(segment, int):
            rendered += f"[{segment}]"
        else:
            rendered += f".{segment}" if rendered else segment
    return rendered or "."


def _step(node: Any, segment: Segment, walked: Path) -> Any:
    if isinstance(segment, Match):
        if not isinstance(node, list):
            raise TemplatePathNotFoundError(
                format_path(walked + (segment,)), "expected a list"
            )
        for item in node:
            if isinstance(item, dict) and item.get(segment.field) == segment.value:
                return item
        raise TemplatePathNotFoundError(
            format_path(walked + (segment,)), "no matching entry"
        )

    if isinstance(segment, int):
        if not isinstance(node, list) or not -len(node) <= segment < len(node):
            raise TemplatePathNotFoundError(
                format_path(walked + (segment,)), "index out of range"
            )
        return node[segment]

    if not isinstance(node, dict) or segment not in node:
        raise TemplatePathNotFoundError(format_path(walked + (segment,)))
    return node[segment]


def get_node(document: dict[str, Any], path: Path, *, base: Path = ()) -> Any:
    """Return the node at ``path``.

    ``base`` is the location of ``document`` inside a larger document; it
    only prefixes the paths reported in errors.

    Raises:
        TemplatePathNotFoundError: If any segment of the path is missing
    """
    node: Any = document
    for position, segment in enumerate(path):
        node = _step(node, segment, base + path[:position])
    return node


def find_node_by_field(
    document: dict[str, Any], path: Path, field_name: str, field_value: Any
) -> dict[str, Any]:
    """Find the entry of the list at ``path`` whose ``field_name`` equals ``field_value``.

    The returned mapping is the live node inside ``document``; mutating it
    mutates the document.

    Args:
        document: Parsed JSON document
        path: Path to a list of mappings, e.g. ``("outbounds",)``
        field_name: Discriminator field, usually ``"tag"``
        field_value: Value the discriminator must equal

    Returns:
        The matching node

    Raises:
        TemplatePathNotFoundError: If the list or a matching entry is missing
    """
    node = get_node(document, path + (Match(field_name, field_value),))
    if not isinstance(node, dict):
        raise TemplatePathNotFoundError(
            format_path(path + (Match(field_name, field_value),)),
            "matched entry is not an object",
        )
    return node


def _parent(
    document: dict[str, Any], path: Path, base: Path
) -> tuple[Any, Segment]:
    if not path:
        raise ValueError("Path must contain at least one segment")
    return get_node(document, path[:-1], base=base), path[-1]


def set_value(
    document: dict[str, Any], path: Path, value: Any, *, base: Path = ()
) -> None:
    """Set the value at ``path``.

    The final mapping key is created when absent, keeping the position of
    existing keys. List indexes and matches must already exist.

    Raises:
        TemplatePathNotFoundError: If the parent node is missing
    """
    parent, leaf = _parent(document, path, base)

    if isinstance(leaf, str):
        if not isinstance(parent, dict):
            raise TemplatePathNotFoundError(format_path(base + path), "parent is not an object")
        parent[leaf] = value
        return

    if isinstance(leaf, Match):
        # replace the matched entry in place
        target = _step(parent, leaf, base + path[:-1])
        parent[parent.index(target)] = value
        return

    _step(parent, leaf, base + path[:-1])
    parent[leaf] = value


def remove_key(document: dict[str, Any], path: Path, *, base: Path = ()) -> bool:
    """Remove the mapping key at ``path``.

    Returns:
        True if a key was removed, False if it was already absent

    Raises:
        TemplatePathNotFoundError: If the parent node is missing
    """
    parent, leaf = _parent(document, path, base)
    if not isinstance(leaf, str):
        raise ValueError("Only mapping keys can be removed")
    if not isinstance(parent, dict):
        raise TemplatePathNotFoundError(format_path(base + path), "parent is not an object")
    if leaf not in parent:
        return False
    del parent[leaf]
    return True
