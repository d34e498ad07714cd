"""Ignition configuration files written to local disk for upload to volumes.

The file name is derived from a checksum of the content, so creating the same
configuration twice reuses the file that already exists.
"""

from __future__ import annotations

import dataclasses
import hashlib
import logging
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

logger = logging.getLogger(__name__)

_DIRECTORY_NAME = "virtprov-ignition"
_ID_LENGTH = 16


class IgnitionError(Exception):
    """Raised when an ignition file cannot be created, inspected or removed."""

    def __init__(self, summary: str, detail: str) -> None:
        super().__init__(f"{summary}: {detail}")
        self.summary = summary
        self.detail = detail


@dataclass(frozen=True)
class IgnitionFile:
    """An ignition configuration stored as a file on the local host."""

    id: str
    name: str
    content: str
    path: str
    size: int


def ignition_directory() -> Path:
    """Return the directory where ignition files are written by default."""
    return Path(tempfile.gettempdir()) / _DIRECTORY_NAME


def _write_new_file(path: Path, data: bytes) -> None:
    fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o644)
    with os.fdopen(fd, "wb") as handle:
        handle.write(data)


def create_ignition(
    name: str,
    content: str,
    directory: Union[str, Path, None] = None,
) -> IgnitionFile:
    """Write ``content`` to an ignition file and describe it.

    The file lives in ``directory`` (by default :func:`ignition_directory`)
    and is named after the first 16 hex digits of the content's SHA-256.
    An existing file with that name is reused as it is.
    """
    logger.debug("Creating ignition file %s", name)
    data = content.encode("utf-8")
    checksum = hashlib.sha256(data).hexdigest()
    ident = checksum[:_ID_LENGTH]

    target_dir = Path(directory) if directory is not None else ignition_directory()
    try:
        target_dir.mkdir(mode=0o755, parents=True, exist_ok=True)
    except OSError as exc:
        raise IgnitionError(
            "Failed to Create Temp Directory",
            f"Could not create directory for ignition files: {exc}",
        ) from exc

    path = target_dir / f"ignition-{ident}.ign"
    if path.exists():
        logger.info("Ignition file already exists, reusing: %s", path)
    else:
        logger.debug("Writing ignition file %s", path)
        try:
            _write_new_file(path, data)
        except OSError as exc:
            raise IgnitionError(
                "Failed to Write File", f"Could not write ignition file: {exc}"
            ) from exc
        logger.info("Written ignition file %s", path)

    try:
        size = path.stat().st_size
    except OSError as exc:
        raise IgnitionError(
            "Failed to Stat File", f"Could not stat ignition file: {exc}"
        ) from exc

    return IgnitionFile(id=ident, name=name, content=content, path=str(path), size=size)


def refresh_ignition(ignition: IgnitionFile) -> Optional[IgnitionFile]:
    """Return ``ignition`` with its current size, or None if the file is gone."""
    try:
        info = os.stat(ignition.path)
    except FileNotFoundError:
        logger.warning(
            "Ignition file no longer exists, removing from state: %s", ignition.path
        )
        return None
    except OSError as exc:
        raise IgnitionError(
            "Failed to Stat File", f"Could not stat ignition file: {exc}"
        ) from exc
    return dataclasses.replace(ignition, size=info.st_size)


def update_ignition(ignition: IgnitionFile) -> IgnitionFile:
    """Always fail: an ignition file can only be replaced, never updated."""
    raise IgnitionError(
        "Update Not Supported",
        "Ignition file cannot be updated. All changes require replacement.",
    )


def delete_ignition(ignition: IgnitionFile) -> None:
    """Remove the ignition file; a file that is already gone is not an error."""
    logger.debug("Deleting ignition file %s", ignition.path)
    try:
        os.remove(ignition.path)
    except FileNotFoundError:
        pass
    except OSError as exc:
        raise IgnitionError(
            "Failed to Delete File", f"Could not delete ignition file: {exc}"
        ) from exc
    logger.info("Deleted ignition file %s", ignition.path)