"""
Core duplicate-grouping engine — scanner, fingerprinter, tracker and orchestrator.

This package contains:
- DirectoryScannerImpl: non-recursive listing of regular files
- ImageHashFingerprinter: Pillow decoding + imagehash fingerprints
- DuplicateTracker: scan-local original → group ordinal registry
- ScanOrchestrator: per-entry skip / insert / group / copy sequencing
- Models: Fingerprint, ImageRecord, HashAlgorithm, ScanParams, ScanStats

No CLI dependencies — suitable for library usage.
"""

from .scanner import DirectoryScannerImpl
from .fingerprinter import ImageHashFingerprinter
from .tracker import DuplicateTracker
from .orchestrator import ScanOrchestrator
from .models import (
    Fingerprint, ImageRecord, HashAlgorithm, ScanParams, ScanStats)

__all__ = [
    "DirectoryScannerImpl",
    "ImageHashFingerprinter",
    "DuplicateTracker",
    "ScanOrchestrator",
    "Fingerprint",
    "ImageRecord",
    "HashAlgorithm",
    "ScanParams",
    "ScanStats",
]
