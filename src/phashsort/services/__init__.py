"""Filesystem operations and the persistent fingerprint store."""

from .file_service import FileService
from .fingerprint_store import SqliteFingerprintStore

__all__ = ["FileService", "SqliteFingerprintStore"]
