"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

services/file_service.py
Filesystem operations used when collecting duplicates into group folders.
Originals are only ever copied, never moved or deleted.
"""
import shutil
from pathlib import Path
from typing import Union

from phashsort.exceptions import GroupCopyError

PathLike = Union[str, Path]


class FileService:
    """
    Fallible filesystem primitives with classified errors.
    """

    @staticmethod
    def create_group_dir(path: PathLike) -> None:
        """
        Creates a single group directory. The parent must already exist.

        Raises:
            FileExistsError: if the directory is already there (e.g. from an earlier run).
            OSError: on any other failure (permissions, missing parent).
        """
        Path(path).mkdir()

    @staticmethod
    def copy_file(source: PathLike, destination: PathLike) -> Path:
        """
        Copies a file with its metadata. The source stays in place.

        Raises:
            GroupCopyError: if the copy fails for any reason.
        """
        try:
            return Path(shutil.copy2(str(source), str(destination)))
        except (OSError, shutil.Error) as e:
            raise GroupCopyError(str(source), str(destination), str(e)) from e

    @staticmethod
    def remove_group_dir(path: PathLike) -> None:
        """Removes a group directory and everything copied into it."""
        try:
            shutil.rmtree(str(path))
        except OSError as e:
            raise RuntimeError(f"Failed to remove group directory {path}: {e}") from e

    @staticmethod
    def ensure_directory(path: PathLike) -> Path:
        """Creates a directory (and parents) if missing."""
        target = Path(path)
        try:
            target.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise RuntimeError(f"Cannot create directory {target}: {e}") from e
        if not target.is_dir():
            raise RuntimeError(f"Path is not a directory: {target}")
        return target
