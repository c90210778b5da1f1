"""
Unified command orchestrator for a scan run.
Owns the fingerprint store lifecycle around one ScanOrchestrator pass.
Used by the CLI and by library callers.
"""
import logging
from typing import Callable, Dict, Optional

from phashsort.core.fingerprinter import ImageHashFingerprinter
from phashsort.core.models import ScanParams, ScanStats
from phashsort.core.orchestrator import ScanOrchestrator
from phashsort.core.scanner import DirectoryScannerImpl
from phashsort.exceptions import StoreError
from phashsort.services.fingerprint_store import SqliteFingerprintStore

logger = logging.getLogger(__name__)


class ScanCommand:
    """
    Orchestrates the whole workflow:
    1. Reset the store when the run is not persistent
    2. Make sure the schema exists
    3. Scan the input directory and group duplicates
    4. Close the store, and reset it again when not persistent

    Usage:
        params = ScanParams(input_dir="~/Pictures/inbox", persist=True)
        command = ScanCommand()
        stats = command.execute(params, message_callback=print)
    """

    def __init__(self, store=None, fingerprinter=None, file_service=None):
        self._store = store
        self._fingerprinter = fingerprinter
        self._file_service = file_service
        self._groups: Dict[int, str] = {}

    def execute(
            self,
            params: ScanParams,
            message_callback: Optional[Callable[[str], None]] = None,
            progress_callback: Optional[Callable[[str, int, Optional[int]], None]] = None
    ) -> ScanStats:
        """
        Execute one scan with the given parameters.

        Returns:
            Scan statistics (images processed, duplicate groups, ...)

        Raises:
            StoreError: if the store cannot be reset or initialized
            GroupCopyError: if a copy fails after a group decision
            RuntimeError: if the input directory cannot be listed
        """
        store = self._store or SqliteFingerprintStore(params.db_path)
        fingerprinter = self._fingerprinter or ImageHashFingerprinter(
            algorithm=params.algorithm,
            hash_size=params.hash_size
        )

        if not params.persist:
            store.reset()

        try:
            if store.ensure_initialized() and message_callback:
                message_callback("Database created")
            self._check_hash_config(store, params, message_callback)

            scanner = DirectoryScannerImpl(params.input_dir, extensions=params.extensions)
            orchestrator = ScanOrchestrator(store, fingerprinter, self._file_service)
            self._groups, stats = orchestrator.run(
                scanner,
                params.groups_base,
                reuse=params.persist,
                message_callback=message_callback,
                progress_callback=progress_callback
            )
        except Exception:
            store.close()
            if not params.persist:
                self._discard(store)
            raise

        store.close()
        if not params.persist:
            store.reset()
        return stats

    def get_groups(self) -> Dict[int, str]:
        """Ordinal → original filename for the groups created by the last run."""
        return dict(self._groups)

    @staticmethod
    def _check_hash_config(store, params: ScanParams, message_callback) -> None:
        """
        Rebuild the store when its fingerprints come from another hash configuration.
        Records without a recorded configuration are treated the same way.
        """
        stored = store.hash_config()
        if stored == params.hash_config:
            return
        if stored is None and len(store) == 0:
            store.set_hash_config(params.hash_config)
            return

        notice = (
            f"Fingerprints in {params.db_path} were made with {stored or 'an unknown hash'}, "
            f"rebuilding them with {params.hash_config}"
        )
        logger.warning(notice)
        if message_callback:
            message_callback(notice)
        store.reset()
        store.ensure_initialized()
        store.set_hash_config(params.hash_config)

    @staticmethod
    def _discard(store) -> None:
        # Called while another error propagates; a reset failure must not replace it
        try:
            store.reset()
        except StoreError as e:
            logger.error(f"Could not drop fingerprint store after failed run: {e}")
