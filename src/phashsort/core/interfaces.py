"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

interfaces.py

Defines core interfaces (Protocols) used by the scan orchestrator.
Concrete implementations live in core/ and services/; tests substitute their own.

Key Components:
---------------
- FingerprintStore: durable filename → fingerprint table with lookup by fingerprint.
- Fingerprinter: decodes image files and computes their fingerprints.
- DirectoryScanner: lists the candidate entries of one directory (non-recursive).
"""

from pathlib import Path
from typing import List, Optional, Protocol

from PIL import Image

from phashsort.core.models import Fingerprint


class FingerprintStore(Protocol):
    """
    Interface for the persistent filename → fingerprint table.

    Query methods raise StoreError on failure; the orchestrator decides how to reduce it.
    """

    def ensure_initialized(self) -> bool:
        """Create the backing schema if absent. Returns True if it had to be created."""
        ...

    def reset(self) -> None:
        """Drop all records (and the backing database)."""
        ...

    def exists(self, filename: str) -> bool:
        """True iff a record with this filename was previously stored."""
        ...

    def lookup_by_fingerprint(self, fingerprint: Fingerprint) -> Optional[str]:
        """Filename of the canonical record with this fingerprint, or None."""
        ...

    def insert(self, filename: str, fingerprint: Fingerprint) -> None:
        """Store a new record. Raises StoreError on key or uniqueness violation."""
        ...

    def hash_config(self) -> Optional[str]:
        """Hash configuration the stored fingerprints were made with, if recorded."""
        ...

    def set_hash_config(self, config: str) -> None:
        ...

    def __len__(self) -> int:
        ...

    def close(self) -> None:
        ...


class Fingerprinter(Protocol):
    """Interface for perceptual fingerprinting of decoded images."""

    def load(self, path: Path) -> Image.Image:
        """Decode an image file. Raises ImageDecodeError."""
        ...

    def compute(self, image: Image.Image) -> Fingerprint:
        """Deterministic fingerprint of decoded pixel data."""
        ...


class DirectoryScanner(Protocol):
    """Interface for listing the regular files directly inside a directory."""

    def scan(self) -> List[Path]:
        ...
