"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/models.py
Data models for fingerprinting, scan configuration and scan statistics.
"""

import os
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


# =============================
# Enums
# =============================

class HashAlgorithm(Enum):
    """
    Perceptual hash family used to fingerprint images.
    """
    AVERAGE = "ahash"
    PERCEPTUAL = "phash"
    DIFFERENCE = "dhash"
    WAVELET = "whash"

    @property
    def display_name(self) -> str:
        """Human-readable name for UI display."""
        mapping = {
            HashAlgorithm.AVERAGE: "Average hash",
            HashAlgorithm.PERCEPTUAL: "Perceptual hash (DCT)",
            HashAlgorithm.DIFFERENCE: "Difference (gradient) hash",
            HashAlgorithm.WAVELET: "Wavelet hash",
        }
        return mapping.get(self, self.value)

    @property
    def description(self) -> str:
        """Detailed description for help text."""
        mapping = {
            HashAlgorithm.AVERAGE:
                "Pixels above/below mean brightness (fastest, least robust)",
            HashAlgorithm.PERCEPTUAL:
                "Low-frequency DCT coefficients (robust to scaling and compression)",
            HashAlgorithm.DIFFERENCE:
                "Brightness gradient between neighbouring pixels (default)",
            HashAlgorithm.WAVELET:
                "Haar wavelet decomposition (hash size must be a power of 2)",
        }
        return mapping.get(self, self.value)

    def __repr__(self) -> str:
        return self.value


# ======================
#  Core Data Models
# ======================

@dataclass(frozen=True)
class Fingerprint:
    """
    Fixed-length perceptual summary of an image.
    Two fingerprints are the same iff their textual encodings are identical.
    """
    encoding: str

    def __post_init__(self):
        if not self.encoding:
            raise ValueError("Fingerprint encoding cannot be empty")

    def __str__(self) -> str:
        return self.encoding


@dataclass(frozen=True)
class ImageRecord:
    """A stored (filename, fingerprint) pair. The first file seen for a fingerprint."""
    filename: str
    fingerprint: Fingerprint


@dataclass
class ScanStats:
    """
    Counters collected during one scan.
    """
    images_processed: int = 0
    duplicate_groups: int = 0
    skipped_known: int = 0
    undecodable: int = 0
    files_copied: int = 0
    total_time: float = 0.0

    def summary_line(self) -> str:
        return (
            f"Complete. Checked {self.images_processed} images. "
            f"Found {self.duplicate_groups} duplicates."
        )

    def print_summary(self) -> str:
        lines = [
            "📊 Scan Statistics:",
            f"Total Execution Time: {self.total_time:.3f}s\n",
            f"🖼️  Images checked: {self.images_processed}",
            f"⏭️  Skipped (already known): {self.skipped_known}",
            f"🚫 Not decodable: {self.undecodable}",
            f"📁 Duplicate groups: {self.duplicate_groups}",
            f"📄 Files copied: {self.files_copied}",
        ]
        return "\n".join(lines)


"""
DTO for scan parameters with built-in validation.
Interface-agnostic, used by the CLI and by library callers.
"""

DEFAULT_DB_PATH = "phashsort.db"
DEFAULT_HASH_SIZE = 8


@dataclass
class ScanParams:
    """Parameters for one scan with validation."""
    input_dir: str
    output_dir: Optional[str] = None
    persist: bool = False
    db_path: str = DEFAULT_DB_PATH
    algorithm: HashAlgorithm = HashAlgorithm.DIFFERENCE
    hash_size: int = DEFAULT_HASH_SIZE
    extensions: List[str] = field(default_factory=list)

    def __post_init__(self):
        """Validate parameters immediately after creation."""
        if not self.input_dir:
            raise ValueError("Input directory cannot be empty")

        if not self.db_path:
            raise ValueError("Database path cannot be empty")

        if self.hash_size < 2:
            raise ValueError("Hash size must be at least 2")

        if not self.output_dir:
            self.output_dir = self.input_dir

        # Normalize extensions: ensure they start with dot and are lowercase
        normalized = []
        for ext in self.extensions:
            ext = ext.strip().lower()
            if ext and not ext.startswith('.'):
                ext = f".{ext}"
            if ext:
                normalized.append(ext)
        self.extensions = normalized

    @property
    def groups_base(self) -> str:
        """Directory under which numbered group folders are created."""
        return os.fspath(self.output_dir)

    @property
    def hash_config(self) -> str:
        """Hash algorithm and size, e.g. "dhash:8". Fingerprints are only comparable within one config."""
        return f"{self.algorithm.value}:{self.hash_size}"
