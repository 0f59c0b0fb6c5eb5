"""VLESS + REALITY protocol constants."""

from enum import Enum

REALITY_PORT = 443
VISION_FLOW = "xtls-rprx-vision"
DEFAULT_FINGERPRINT = "chrome"
LABEL_SUFFIX = "_REALITY"


class ProtocolVariant(str, Enum):
    """Protocol variant shared by synthesis and link encoding.

    ``NO_FLOW`` drops the flow directive from both documents and the link.
    ``VISION`` carries ``flow=xtls-rprx-vision`` everywhere.
    """

    NO_FLOW = "none"
    VISION = "vision"

    @property
    def flow(self) -> str | None:
        """Flow directive for this variant, or None when flow is omitted."""
        return VISION_FLOW if self is ProtocolVariant.VISION else None
