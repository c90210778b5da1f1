"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/fingerprinter.py
Perceptual fingerprinting of images using Pillow and imagehash.
"""

import logging
from pathlib import Path
from typing import Callable, Dict

import imagehash
from PIL import Image, UnidentifiedImageError

from phashsort.core.models import Fingerprint, HashAlgorithm, DEFAULT_HASH_SIZE
from phashsort.exceptions import ImageDecodeError

logger = logging.getLogger(__name__)

_HASH_FUNCTIONS: Dict[HashAlgorithm, Callable[..., imagehash.ImageHash]] = {
    HashAlgorithm.AVERAGE: imagehash.average_hash,
    HashAlgorithm.PERCEPTUAL: imagehash.phash,
    HashAlgorithm.DIFFERENCE: imagehash.dhash,
    HashAlgorithm.WAVELET: imagehash.whash,
}


class ImageHashFingerprinter:
    """
    Computes fingerprints with one of the imagehash algorithms.

    The textual encoding is the hex string of the hash, so equal images
    always produce equal encodings for a given algorithm and hash size.
    """

    def __init__(
            self,
            algorithm: HashAlgorithm = HashAlgorithm.DIFFERENCE,
            hash_size: int = DEFAULT_HASH_SIZE
    ):
        if algorithm == HashAlgorithm.WAVELET and hash_size & (hash_size - 1):
            raise ValueError("Wavelet hash size must be a power of 2")
        self.algorithm = algorithm
        self.hash_size = int(hash_size)
        self._hash_func = _HASH_FUNCTIONS[algorithm]

    def load(self, path: Path) -> Image.Image:
        """
        Open and fully decode an image file.

        Raises:
            ImageDecodeError: if the file is not a readable image.
        """
        try:
            with Image.open(path) as img:
                img.load()
                # Detach from the file handle so the caller owns a closed-file image
                return img.copy()
        except (UnidentifiedImageError, Image.DecompressionBombError) as e:
            raise ImageDecodeError(str(path), str(e)) from e
        except (OSError, ValueError, SyntaxError) as e:
            # Truncated or corrupt data surfaces as OSError/SyntaxError in Pillow plugins
            raise ImageDecodeError(str(path), str(e)) from e

    def compute(self, image: Image.Image) -> Fingerprint:
        """Compute the fingerprint of a decoded image."""
        image_hash = self._hash_func(image, hash_size=self.hash_size)
        return Fingerprint(str(image_hash))

    def fingerprint_file(self, path: Path) -> Fingerprint:
        """Decode and fingerprint a file in one step."""
        image = self.load(path)
        try:
            return self.compute(image)
        finally:
            image.close()

    def __repr__(self):
        return f"<ImageHashFingerprinter algorithm={self.algorithm.value}, hash_size={self.hash_size}>"
