"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

exceptions.py
Error taxonomy for scanning, fingerprint storage and group copying.
"""


class PhashSortError(RuntimeError):
    """Base class for all errors raised by phashsort."""


class StoreError(PhashSortError):
    """The fingerprint store could not be opened, initialized, reset or queried."""


class ImageDecodeError(PhashSortError):
    """A file could not be decoded as an image."""

    def __init__(self, path: str, reason: str = ""):
        self.path = path
        self.reason = reason
        message = f"Cannot decode image: {path}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class GroupCopyError(PhashSortError):
    """A file could not be copied into its duplicate group directory. Aborts the run."""

    def __init__(self, source: str, destination: str, reason: str = ""):
        self.source = source
        self.destination = destination
        super().__init__(f"Failed to copy {source} -> {destination}: {reason}")
