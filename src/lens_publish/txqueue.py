"""Optimistic transaction queue.

Newest-first list of submissions awaiting confirmation. The composer only
prepends; an external reconciler replaces or removes entries once the
transaction is confirmed or definitively fails.
"""

import logging
from collections.abc import Iterator

from .models import TransactionQueueEntry

logger = logging.getLogger(__name__)


class TransactionQueue:
    def __init__(self, entries: list[TransactionQueueEntry] | None = None):
        self._entries = list(entries or [])

    def prepend(self, entry: TransactionQueueEntry) -> None:
        self._entries = [entry, *self._entries]
        logger.debug("Queued %s %s (%d pending)", entry.kind.value, entry.id, len(self._entries))

    def replace(self, entry_id: str, entry: TransactionQueueEntry) -> bool:
        """Replace the entry with entry_id in place. Returns False if absent."""
        for index, existing in enumerate(self._entries):
            if existing.id == entry_id:
                self._entries[index] = entry
                return True
        return False

    def remove(self, entry_id: str) -> bool:
        """Remove the entry with entry_id. Returns False if absent."""
        remaining = [entry for entry in self._entries if entry.id != entry_id]
        removed = len(remaining) != len(self._entries)
        self._entries = remaining
        return removed

    @property
    def entries(self) -> tuple[TransactionQueueEntry, ...]:
        return tuple(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[TransactionQueueEntry]:
        return iter(tuple(self._entries))
