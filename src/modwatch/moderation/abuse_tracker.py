"""
In-memory abuse counter for moderators.

Counts punitive actions per guild and per moderator over a rolling window.
Records live for the lifetime of the process only; a restart forgets every
count.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, Dict, Iterator, Tuple

from modwatch.util.logger import get_logger

logger = get_logger("abuse_tracker")


@dataclass(slots=True)
class AbuseRecord:
    """Counter state for one moderator in one guild.

    Attributes:
        count: Punitive actions counted in the current window.
        first_action_time: Clock reading at the start of the current window.
    """
    count: int
    first_action_time: float


class AbuseTracker:
    """Two-level map of ``guild_id -> moderator_id -> AbuseRecord``.

    Parameters
    ----------
    action_limit:
        Number of actions allowed per window. A count strictly greater than
        this is considered abuse.
    window_seconds:
        Length of the window. An increment arriving more than this long after
        ``first_action_time`` starts a fresh window.
    clock:
        Monotonic time source, replaceable in tests.
    """

    def __init__(
        self,
        action_limit: int = 3,
        window_seconds: float = 3600.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.action_limit = action_limit
        self.window_seconds = window_seconds
        self._clock = clock
        self._records: Dict[int, Dict[int, AbuseRecord]] = {}

    def increment(self, guild_id: int, moderator_id: int) -> int:
        """Count one action for ``moderator_id`` in ``guild_id`` and return the new count."""
        now = self._clock()
        guild_records = self._records.setdefault(guild_id, {})
        record = guild_records.get(moderator_id)

        if record is None:
            record = AbuseRecord(count=0, first_action_time=now)
            guild_records[moderator_id] = record
        elif now - record.first_action_time > self.window_seconds:
            logger.debug(
                "Abuse window expired for moderator %s in guild %s; resetting count %d",
                moderator_id, guild_id, record.count,
            )
            record.count = 0
            record.first_action_time = now

        record.count += 1
        return record.count

    def is_exceeded(self, count: int) -> bool:
        return count > self.action_limit

    def get(self, guild_id: int, moderator_id: int) -> AbuseRecord | None:
        return self._records.get(guild_id, {}).get(moderator_id)

    def clear(self, guild_id: int, moderator_id: int) -> bool:
        """Forget the record for a moderator. Returns True if one existed."""
        guild_records = self._records.get(guild_id)
        if not guild_records or moderator_id not in guild_records:
            return False

        del guild_records[moderator_id]
        if not guild_records:
            del self._records[guild_id]
        return True

    def remaining_window(self, record: AbuseRecord) -> float:
        """Seconds left before ``record``'s window expires (never negative)."""
        return max(0.0, self.window_seconds - (self._clock() - record.first_action_time))

    def snapshot(self) -> Iterator[Tuple[int, int, AbuseRecord]]:
        """Yield ``(guild_id, moderator_id, record)`` for every tracked record."""
        for guild_id, guild_records in list(self._records.items()):
            for moderator_id, record in list(guild_records.items()):
                yield guild_id, moderator_id, record

    def __len__(self) -> int:
        return sum(len(guild_records) for guild_records in self._records.values())
