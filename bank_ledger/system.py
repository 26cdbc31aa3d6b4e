"""
Bank System Module

Ties a Ledger to the SnapshotStore it was loaded from for the lifetime of the
process. The ledger is saved exactly once when the system is closed, whichever
way the owning scope is left.
"""

from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional
import threading

from .ledger import Ledger
from .storage import LoadReport, SnapshotStore
from .logging_config import get_logger, log_action


logger = get_logger(__name__)


class BankSystem:
    """Ledger loaded from snapshots on open and saved back on close"""

    def __init__(self, store: Optional[SnapshotStore] = None):
        self.store = store or SnapshotStore.from_config()
        self.load_report: LoadReport = self.store.load_with_report()
        self.ledger = Ledger(self.load_report.accounts)
        self.saved_path: Optional[Path] = None
        self._closed = False
        self._close_lock = threading.Lock()

        log_action(logger, "info", "Bank system opened",
                   action="open", resource=str(self.store.directory),
                   extra={"accounts": len(self.ledger), "next_id": self.ledger.next_id})

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> Optional[Path]:
        """
        Persist the ledger; only the first call writes

        Filesystem errors from the save propagate to the caller.

        Returns:
            Path of the snapshot written, or None if already closed
        """
        with self._close_lock:
            if self._closed:
                return None
            self._closed = True

        self.saved_path = self.store.save(self.ledger.to_snapshot())
        log_action(logger, "info", "Bank system closed",
                   action="close", resource=str(self.saved_path))
        return self.saved_path

    def __enter__(self) -> 'BankSystem':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


@contextmanager
def open_bank_system(store: Optional[SnapshotStore] = None) -> Iterator[BankSystem]:
    """Open a bank system for the duration of a with block"""
    system = BankSystem(store)
    try:
        yield system
    finally:
        system.close()
