"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/tracker.py
Scan-local registry of duplicate groups, keyed by the canonical file of each group.
"""

from typing import Dict, Iterator, Optional, Tuple


class DuplicateTracker:
    """
    Maps the original filename of a duplicated fingerprint to its group ordinal.

    An entry is registered the moment a fingerprint is seen for the second time
    and lives until the scan ends. Ordinals must be unique.
    """

    def __init__(self):
        self._groups: Dict[str, int] = {}
        self._ordinals: set = set()

    def find(self, original_filename: str) -> Optional[int]:
        """Group ordinal for this original, or None if no group exists yet."""
        return self._groups.get(original_filename)

    def register(self, original_filename: str, group_ordinal: int) -> None:
        """
        Record the group created for an original file.

        Raises:
            ValueError: if the original already has a group or the ordinal is taken.
        """
        if original_filename in self._groups:
            raise ValueError(f"Group already registered for {original_filename}")
        if group_ordinal in self._ordinals:
            raise ValueError(f"Group ordinal {group_ordinal} is already in use")
        if group_ordinal < 1:
            raise ValueError("Group ordinals start at 1")
        self._groups[original_filename] = group_ordinal
        self._ordinals.add(group_ordinal)

    def items(self) -> Iterator[Tuple[str, int]]:
        """(original_filename, ordinal) pairs in registration order."""
        return iter(self._groups.items())

    def __len__(self) -> int:
        return len(self._groups)

    def __repr__(self):
        return f"<DuplicateTracker groups={len(self._groups)}>"
