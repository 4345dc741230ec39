"""Last-write-wins reconciliation between local state and remote pushes."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Optional

from mediavault.models import Snapshot
from mediavault.util.time import normalize_dt, same_instant

logger = logging.getLogger(__name__)


def pick_newer(local: Snapshot, remote: Snapshot) -> Snapshot:
    """Whole-snapshot last-write-wins; a tie keeps the local copy."""
    if remote.last_updated > local.last_updated:
        return remote
    return local


class SyncReconciler:
    """
    Decide whether a pushed remote snapshot replaces local state.

    A push is applied when this client is not in the middle of a save and the
    remote timestamp differs from the one this client last wrote (i.e., the
    change did not originate here). The saving flag is the only guard:
    concurrent edits from two devices are not merged.
    """

    def __init__(self) -> None:
        self._last_written: Optional[datetime] = None
        self._saving = False

    @property
    def last_written(self) -> Optional[datetime]:
        return self._last_written

    @property
    def saving(self) -> bool:
        return self._saving

    def begin_save(self) -> None:
        self._saving = True

    def end_save(self, written_at: datetime) -> None:
        self._last_written = normalize_dt(written_at)
        self._saving = False

    def abort_save(self) -> None:
        self._saving = False

    def should_apply(self, remote: Snapshot) -> bool:
        if self._saving:
            return False
        if self._last_written is None:
            return True
        return not same_instant(remote.last_updated, self._last_written)

    def on_remote_change(self, remote: Snapshot, apply: Callable[[Snapshot], None]) -> bool:
        """Apply remote via callback when it should win; return whether it did."""
        if not self.should_apply(remote):
            logger.debug("Ignoring remote snapshot %s (own write or mid-save)", remote.last_updated)
            return False
        logger.info("Applying remote snapshot from %s", remote.last_updated)
        apply(remote)
        return True
