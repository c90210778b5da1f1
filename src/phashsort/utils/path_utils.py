"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

Pure path builders for group folders. They never touch the filesystem.
"""
from pathlib import Path
from typing import Union

PathLike = Union[str, Path]


def group_dir(base: PathLike, ordinal: int) -> Path:
    """Directory for duplicate group `ordinal` under `base`, e.g. base/3."""
    if ordinal < 1:
        raise ValueError(f"Group ordinal must be positive, got {ordinal}")
    return Path(base) / str(ordinal)


def join(directory: PathLike, filename: str) -> Path:
    """Path of `filename` inside `directory`. `filename` must be a bare name."""
    name = Path(filename).name
    if not name or name != filename:
        raise ValueError(f"Expected a bare filename, got {filename!r}")
    return Path(directory) / name
