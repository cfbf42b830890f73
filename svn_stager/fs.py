"""Filesystem helpers used while staging checked-out sources."""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import Union

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class FileSystem:
    """Directory removal and copy operations.

    Neither operation is atomic. A failure part way through leaves whatever
    was already removed or copied in place.
    """

    def remove_directory(self, path: PathLike) -> None:
        """Recursively remove path. A missing path is not an error."""
        path = Path(path)
        if not path.exists() and not path.is_symlink():
            logger.debug("Nothing to remove at %s", path)
            return
        logger.debug("Removing directory %s", path)
        if path.is_symlink() or not path.is_dir():
            path.unlink()
        else:
            shutil.rmtree(path)

    def copy_contents(self, src: PathLike, dest: PathLike) -> None:
        """Copy the contents of src into dest, creating dest when needed.

        Raises:
            FileNotFoundError: If src does not exist
            NotADirectoryError: If src is not a directory
        """
        src = Path(src)
        dest = Path(dest)
        if not src.exists():
            raise FileNotFoundError(f"Source directory not found: {src}")
        if not src.is_dir():
            raise NotADirectoryError(f"Source is not a directory: {src}")

        logger.debug("Copying contents of %s to %s", src, dest)
        shutil.copytree(src, dest, symlinks=True, dirs_exist_ok=True)
