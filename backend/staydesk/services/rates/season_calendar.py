"""Season calendar: maps a date to the hotel season covering it."""

import bisect
import logging
from datetime import date

from staydesk.services.rates.errors import SeasonOverlapError
from staydesk.services.rates.types import SeasonRecord

logger = logging.getLogger(__name__)


def overlaps(a_start: date, a_end: date, b_start: date, b_end: date) -> bool:
    """Inclusive interval overlap."""
    return a_start <= b_end and a_end >= b_start


def find_overlaps(
    existing: list[SeasonRecord],
    start: date,
    end: date,
    exclude_id: int | None = None,
) -> list[SeasonRecord]:
    """Active seasons in `existing` that a [start, end] interval would collide with."""
    return [
        s
        for s in existing
        if s.is_active and s.id != exclude_id and overlaps(start, end, s.start_date, s.end_date)
    ]


class SeasonCalendar:
    """Sorted, non-overlapping season intervals for one hotel."""

    def __init__(self, seasons: list[SeasonRecord]):
        ordered = sorted((s for s in seasons if s.is_active), key=lambda s: (s.start_date, s.id))
        for prev, nxt in zip(ordered, ordered[1:]):
            if nxt.start_date <= prev.end_date:
                logger.warning(
                    f"Overlapping seasons {prev.id} ({prev.start_date}..{prev.end_date}) "
                    f"and {nxt.id} ({nxt.start_date}..{nxt.end_date})"
                )
                raise SeasonOverlapError([prev, nxt])
        self._seasons = ordered
        self._starts = [s.start_date for s in ordered]

    def __len__(self) -> int:
        return len(self._seasons)

    @property
    def seasons(self) -> list[SeasonRecord]:
        return list(self._seasons)

    def season_for(self, d: date) -> SeasonRecord | None:
        i = bisect.bisect_right(self._starts, d) - 1
        if i < 0:
            return None
        season = self._seasons[i]
        return season if season.end_date >= d else None

    def label_days(self, dates: list[date]) -> dict[date, SeasonRecord | None]:
        return {d: self.season_for(d) for d in dates}
