"""
phashsort — sort perceptually identical images into numbered review folders.

Core features:
- Perceptual fingerprints (dhash by default) via Pillow + imagehash
- Exact-fingerprint duplicate grouping: first sighting is the original,
  the second creates a numbered folder, later ones join it
- Copies only: originals are never moved or deleted
- Optional persistent SQLite fingerprint table so reruns skip known files
"""

# Get version
try:
    from importlib.metadata import version as _version
    __version__ = _version("phashsort")
except Exception:
    try:
        import tomllib  # Python 3.11+
    except ImportError:
        import tomli as tomllib  # Python < 3.11: pip install tomli

    with open("pyproject.toml", "rb") as f:
        __version__ = tomllib.load(f)["project"]["version"]

# Public API — only what users should import directly
from phashsort.commands import ScanCommand
from phashsort.core import (
    ScanParams, ScanStats, HashAlgorithm, Fingerprint, ImageRecord,
    ScanOrchestrator, DuplicateTracker, ImageHashFingerprinter, DirectoryScannerImpl)
from phashsort.services import FileService, SqliteFingerprintStore
from phashsort.exceptions import PhashSortError, StoreError, ImageDecodeError, GroupCopyError

__all__ = [
    "ScanCommand",
    "ScanParams",
    "ScanStats",
    "HashAlgorithm",
    "Fingerprint",
    "ImageRecord",
    "ScanOrchestrator",
    "DuplicateTracker",
    "ImageHashFingerprinter",
    "DirectoryScannerImpl",
    "FileService",
    "SqliteFingerprintStore",
    "PhashSortError",
    "StoreError",
    "ImageDecodeError",
    "GroupCopyError",
    "__version__",
]
