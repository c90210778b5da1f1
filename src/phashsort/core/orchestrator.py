"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/orchestrator.py
Single-pass duplicate grouping over one directory.

Per entry:
    regular file? → already known (reuse mode)? → decode → fingerprint →
    new fingerprint: insert as canonical original
    second sighting: new group folder, copy original + this file
    later sightings: copy this file into the existing group folder

Group ordinals start at 1 and are assigned in first-seen order.
"""
import time
import logging
from pathlib import Path
from typing import Callable, Dict, Optional, Tuple

from phashsort.core.interfaces import DirectoryScanner, Fingerprinter, FingerprintStore
from phashsort.core.fingerprinter import ImageHashFingerprinter
from phashsort.core.models import Fingerprint, ScanStats
from phashsort.core.tracker import DuplicateTracker
from phashsort.exceptions import GroupCopyError, ImageDecodeError, StoreError
from phashsort.services.file_service import FileService
from phashsort.utils.path_utils import group_dir, join

logger = logging.getLogger(__name__)

MessageCallback = Callable[[str], None]
ProgressCallback = Callable[[str, int, Optional[int]], None]


class ScanOrchestrator:
    """
    Drives one scan. Store, fingerprinter and file operations are injected;
    counters and the duplicate tracker are created fresh for every run.
    """

    def __init__(
            self,
            store: FingerprintStore,
            fingerprinter: Optional[Fingerprinter] = None,
            file_service=None
    ):
        self.store = store
        self.fingerprinter = fingerprinter or ImageHashFingerprinter()
        self.file_service = file_service or FileService

    def run(
            self,
            scanner: DirectoryScanner,
            groups_base: Path,
            reuse: bool = False,
            message_callback: Optional[MessageCallback] = None,
            progress_callback: Optional[ProgressCallback] = None
    ) -> Tuple[Dict[int, str], ScanStats]:
        """
        Scan every entry the scanner returns, strictly one at a time.

        Args:
            scanner: Lists the candidate files of the input directory
            groups_base: Directory under which numbered group folders are created
            reuse: Skip files whose name is already in the store
            message_callback: Receives user-facing notices (group created, files copied)
            progress_callback: (stage, current, total) after each entry

        Returns:
            Tuple of ({ordinal: original filename}, statistics)

        Raises:
            GroupCopyError: if a file cannot be copied into its group. Aborts the scan.
            RuntimeError: if the input directory cannot be listed.
        """
        stats = ScanStats()
        tracker = DuplicateTracker()
        notify = message_callback or (lambda message: None)
        start_time = time.time()

        entries = scanner.scan()
        total = len(entries)
        logger.debug(f"Scanning {total} entries, groups under {groups_base}")

        for index, path in enumerate(entries, 1):
            self._process_entry(Path(path), Path(groups_base), reuse, stats, tracker, notify)
            if progress_callback:
                progress_callback("hashing", index, total)

        stats.total_time = time.time() - start_time
        groups = {ordinal: original for original, ordinal in tracker.items()}
        logger.info(
            f"Scan finished: {stats.images_processed} images, "
            f"{stats.duplicate_groups} duplicate groups in {stats.total_time:.2f}s"
        )
        return groups, stats

    # =============================
    # Per-entry state machine
    # =============================

    def _process_entry(
            self,
            path: Path,
            groups_base: Path,
            reuse: bool,
            stats: ScanStats,
            tracker: DuplicateTracker,
            notify: MessageCallback
    ) -> None:
        filename = path.name
        if not self._is_storable_name(filename):
            logger.warning(f"Skipping file with a name that is not valid UTF-8: {path!r}")
            return

        if reuse and self._is_known(filename):
            logger.debug(f"Already fingerprinted, skipping: {filename}")
            stats.skipped_known += 1
            stats.images_processed += 1
            return

        try:
            image = self.fingerprinter.load(path)
        except ImageDecodeError as e:
            logger.debug(f"Not an image, skipping: {e}")
            stats.undecodable += 1
            return

        try:
            fingerprint = self.fingerprinter.compute(image)
        finally:
            image.close()

        original = self._find_original(fingerprint)
        if original is None:
            self._insert(filename, fingerprint)
        elif original == filename:
            # Own record: only reachable when the existence check failed open
            logger.debug(f"{filename} matched its own stored record")
        else:
            self._collect_duplicate(path, original, groups_base, stats, tracker, notify)

        stats.images_processed += 1

    def _collect_duplicate(
            self,
            path: Path,
            original: str,
            groups_base: Path,
            stats: ScanStats,
            tracker: DuplicateTracker,
            notify: MessageCallback
    ) -> None:
        filename = path.name
        ordinal = tracker.find(original)

        if ordinal is not None:
            # Third or later member: the original is already in the folder
            target_dir = group_dir(groups_base, ordinal)
            self.file_service.copy_file(path, join(target_dir, filename))
            stats.files_copied += 1
            logger.info(f"Copied {filename} to existing group {target_dir}")
            return

        stats.duplicate_groups += 1
        ordinal = stats.duplicate_groups
        tracker.register(original, ordinal)
        target_dir = group_dir(groups_base, ordinal)

        notify(f"Duplicate found. Creating dir {target_dir}")
        try:
            self.file_service.create_group_dir(target_dir)
        except OSError as e:
            logger.warning(f"Could not create group directory {target_dir}: {e}")
            notify(str(e))
            return

        original_path = join(path.parent, original)
        self._seed_group(target_dir, [original_path, path])
        stats.files_copied += 2
        notify(f"Copied {original} and {filename} to {target_dir}")

    def _seed_group(self, target_dir: Path, members) -> None:
        """
        Copy the first two members into a freshly created group folder.
        All-or-nothing: on failure the folder is removed before the error propagates.
        """
        try:
            for member in members:
                self.file_service.copy_file(member, join(target_dir, member.name))
        except GroupCopyError as e:
            logger.error(f"{e}; removing incomplete group {target_dir}")
            try:
                self.file_service.remove_group_dir(target_dir)
            except RuntimeError as cleanup_error:
                logger.error(str(cleanup_error))
            raise

    # =============================
    # Store access (fail-open reads)
    # =============================

    def _is_known(self, filename: str) -> bool:
        try:
            return self.store.exists(filename)
        except StoreError as e:
            logger.warning(f"Existence check failed for {filename}, processing it again: {e}")
            return False

    def _find_original(self, fingerprint: Fingerprint) -> Optional[str]:
        try:
            return self.store.lookup_by_fingerprint(fingerprint)
        except StoreError as e:
            logger.warning(f"Fingerprint lookup failed, treating as no match: {e}")
            return None

    def _insert(self, filename: str, fingerprint: Fingerprint) -> None:
        try:
            self.store.insert(filename, fingerprint)
        except StoreError as e:
            logger.error(f"Could not store fingerprint for {filename}: {e}")

    @staticmethod
    def _is_storable_name(filename: str) -> bool:
        try:
            filename.encode("utf-8")
            return True
        except UnicodeEncodeError:
            return False
