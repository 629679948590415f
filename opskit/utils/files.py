"""
Filesystem helpers.

Query-style checks (file_exists, find_nonexistent_files) answer "not found"
with a value. copy_file raises a FileOperationError subclass when it cannot
do its job.
"""
from __future__ import annotations

import os
import shutil
from pathlib import Path
from typing import Iterable, Optional

from opskit.exceptions import DestinationUnavailableError, FileOperationError, SourceNotFoundError
from opskit.monitoring.logger import get_logger

logger = get_logger(__name__)


def file_exists(file_path: str) -> bool:
    """True only if *file_path* is an existing regular file (symlinks followed)."""
    try:
        return Path(file_path).is_file()
    except (OSError, ValueError):
        return False


def find_nonexistent_files(paths: Iterable[str]) -> list[str]:
    """
    Return the entries of *paths* that do not exist on disk.

    Order is preserved and every occurrence is checked on its own, so a
    duplicated missing path appears twice in the result. Directories count
    as existing.
    """
    return [path for path in paths if not os.path.exists(path)]


def copy_file(source: str, destination: str, create_dest_if_not_exists: Optional[bool] = None) -> None:
    """
    Copy the contents of *source* to *destination*, overwriting it.

    Args:
        source: File to read
        destination: File to create or overwrite
        create_dest_if_not_exists: Create missing parent directories of *destination*

    Raises:
        SourceNotFoundError: *source* is missing or not a regular file
        DestinationUnavailableError: parent directory of *destination* is missing
            and creation was not requested
        FileOperationError: any other I/O failure
    """
    src = Path(source)
    dst = Path(destination)

    if not file_exists(source):
        raise SourceNotFoundError(f"Failed to open {source}: source file not found", path=source)

    parent = dst.parent
    if not parent.is_dir():
        if not create_dest_if_not_exists:
            raise DestinationUnavailableError(
                f"Failed to create {destination}: directory {parent} does not exist",
                path=destination,
            )
        try:
            parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise DestinationUnavailableError(
                f"Failed to create directory {parent}: {e}", path=destination
            ) from e
        logger.debug("COPY_DEST_DIR_CREATED", directory=str(parent))

    try:
        shutil.copyfile(src, dst)
    except OSError as e:  # includes shutil.SameFileError
        raise FileOperationError(f"Failed to write to {destination}: {e}", path=destination) from e

    logger.debug("FILE_COPIED", source=source, destination=destination)
