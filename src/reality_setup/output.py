"""Write synthesized documents to their destinations.

All documents of a run are written to temporary files beside their
destinations first and only then moved into place. Existing destinations
are copied aside before the first move; if any move fails, every
destination already replaced is restored (or removed when it did not
exist before), so a failed run leaves the previous files untouched.
"""

import os
import shutil
import tempfile
from collections.abc import Sequence
from pathlib import Path

from .common.exceptions import OutputWriteFailedError
from .common.logging import get_logger
from .templates.document import ConfigDocument

logger = get_logger(__name__)


def _discard(path: str | None) -> None:
    if path is None:
        return
    try:
        os.unlink(path)
    except OSError:
        pass


def _write_temp(path: Path, content: str) -> str:
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, temp_path = tempfile.mkstemp(
        suffix=".tmp", prefix=f".{path.name}.", dir=str(path.parent)
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
    except Exception:
        _discard(temp_path)
        raise
    return temp_path


def _backup(path: Path) -> str | None:
    """Copy an existing destination aside; None when there is nothing to keep."""
    if not path.is_file():
        return None
    fd, backup_path = tempfile.mkstemp(
        suffix=".bak", prefix=f".{path.name}.", dir=str(path.parent)
    )
    os.close(fd)
    try:
        shutil.copy2(path, backup_path)
    except Exception:
        _discard(backup_path)
        raise
    return backup_path


def _rollback(replaced: Sequence[tuple[Path, str | None]]) -> None:
    for path, backup_path in reversed(replaced):
        try:
            if backup_path is None:
                os.unlink(path)
            else:
                os.replace(backup_path, path)
        except OSError as e:
            logger.warning("Failed to restore destination", path=str(path), error=str(e))
        else:
            logger.debug("Destination restored", path=str(path))


def write_documents(outputs: Sequence[tuple[ConfigDocument, Path]]) -> list[Path]:
    """Write each document to its path, all or nothing.

    Args:
        outputs: Pairs of document and destination path

    Returns:
        Destination paths in the order given

    Raises:
        OutputWriteFailedError: If any destination cannot be written
    """
    staged: list[tuple[str, Path]] = []
    backups: list[str | None] = []
    replaced: list[tuple[Path, str | None]] = []
    try:
        for document, path in outputs:
            staged.append((_write_temp(path, document.to_json()), path))
        for _, path in staged:
            backups.append(_backup(path))
        for (temp_path, path), backup_path in zip(staged, backups):
            os.replace(temp_path, path)
            replaced.append((path, backup_path))
    except OSError as e:
        _rollback(replaced)
        for temp_path, _ in staged:
            _discard(temp_path)
        for backup_path in backups:
            _discard(backup_path)
        raise OutputWriteFailedError(f"Failed to write configuration: {e}") from e

    for backup_path in backups:
        _discard(backup_path)

    for document, path in outputs:
        logger.info("Configuration written", kind=document.kind.value, path=str(path))
    return [path for _, path in staged]
