"""Small helpers with no I/O."""

from .path_utils import group_dir, join

__all__ = ["group_dir", "join"]
