"""Set-backed work queue of section numbers."""

import logging
from typing import Callable, Dict, Hashable, Iterator, List

log = logging.getLogger(__name__)


class WorkQueue:
    """Ordered queue without duplicates.

    Entries are inserted only if absent. ``drain`` processes the entries
    present when it starts, newest first; entries added while draining are
    kept for the next drain.
    """

    def __init__(self, name: str, warn_on_missing: bool = True):
        """Initialize queue.

        Args:
            name: Queue name used in log messages
            warn_on_missing: Log a warning when removing an absent entry
        """
        self.name = name
        self.warn_on_missing = warn_on_missing
        self._entries: Dict[Hashable, None] = {}

    def push(self, item: Hashable) -> bool:
        """Add an entry if it is not queued yet.

        Returns:
            True if the entry was added
        """
        if item in self._entries:
            return False
        self._entries[item] = None
        return True

    def remove(self, item: Hashable) -> bool:
        """Remove an entry.

        Returns:
            True if the entry was present
        """
        if item in self._entries:
            del self._entries[item]
            return True

        if self.warn_on_missing:
            log.warning("Attempting to remove non-existing section %s from %s queue", item, self.name)
        return False

    def drain(self, handler: Callable[[Hashable], None]) -> int:
        """Process and remove every entry currently queued.

        Args:
            handler: Called once per entry, after the entry is removed

        Returns:
            Number of processed entries
        """
        processed = 0
        for item in reversed(list(self._entries)):
            if item not in self._entries:
                # Removed by an earlier handler in this drain
                continue
            del self._entries[item]
            handler(item)
            processed += 1
        return processed

    def clear(self):
        self._entries.clear()

    def items(self) -> List[Hashable]:
        return list(self._entries)

    def __contains__(self, item: Hashable) -> bool:
        return item in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Hashable]:
        return iter(list(self._entries))

    def __repr__(self) -> str:
        return f"WorkQueue({self.name!r}, {list(self._entries)!r})"
