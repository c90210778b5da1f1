"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/scanner.py
Lists the regular files directly inside one directory.
Features:
- Non-recursive: group folders and other subdirectories are never entered
- Optional extension allow-list
- Returns a snapshot list, so entries created during the scan are not revisited
"""

import os
import logging
from pathlib import Path
from typing import List, Optional

logger = logging.getLogger(__name__)


class DirectoryScannerImpl:
    """
    Enumerates the immediate entries of `root_dir` and keeps regular files.
    Order is whatever the filesystem returns; callers must not depend on it.

    Attributes:
        root_dir: Directory to list
        extensions: List of allowed file extensions (e.g., [".jpg", ".png"]); empty = all
    """

    def __init__(self, root_dir: str, extensions: Optional[List[str]] = None):
        self.root_dir = root_dir
        self.extensions = [ext.lower() for ext in extensions] if extensions else []

    def scan(self) -> List[Path]:
        root_path = Path(self.root_dir)

        if not root_path.exists():
            error_msg = f"Directory does not exist: {self.root_dir}"
            logger.error(error_msg)
            raise RuntimeError(error_msg)
        if not root_path.is_dir():
            error_msg = f"Not a directory: {self.root_dir}"
            logger.error(error_msg)
            raise RuntimeError(error_msg)

        found: List[Path] = []
        try:
            with os.scandir(root_path) as entries:
                for entry in entries:
                    path = Path(entry.path)
                    if not self._is_regular_file(entry):
                        logger.debug(f"Skipping non-regular entry: {path}")
                        continue
                    if not self._extension_passes(path):
                        logger.debug(f"Skipping {path} (extension not allowed)")
                        continue
                    found.append(path)
        except PermissionError as e:
            raise RuntimeError(f"Permission denied listing {self.root_dir}: {e}") from e
        except OSError as e:
            raise RuntimeError(f"Cannot list directory {self.root_dir}: {e}") from e

        logger.debug(f"Listed {len(found)} candidate files in {self.root_dir}")
        return found

    @staticmethod
    def _is_regular_file(entry: os.DirEntry) -> bool:
        # Follows symlinks: a link to a regular file counts as a file
        try:
            return entry.is_file()
        except OSError as e:
            logger.debug(f"Could not stat {entry.path}: {e}")
            return False

    def _extension_passes(self, path: Path) -> bool:
        if not self.extensions:
            return True
        return path.suffix.lower() in self.extensions
