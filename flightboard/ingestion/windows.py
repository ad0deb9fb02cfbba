"""
Time window splitting for AeroDataBox airport queries.

The airport flights endpoint rejects requests spanning more than 12 hours,
so a wider [start, end] interval is broken into consecutive sub-windows:

    [00:00, 12:00], [12:01, 15:00]

Consecutive windows are separated by one minute. AeroDataBox is believed
to treat both window boundaries as inclusive, so without the gap a flight
scheduled exactly on a boundary would be returned twice.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import List

MAX_WINDOW_SPAN = timedelta(hours=12)
WINDOW_GAP = timedelta(minutes=1)


@dataclass(frozen=True)
class TimeWindow:
    """A closed [start, end] interval of airport-local wall-clock time."""
    start: datetime
    end: datetime

    @property
    def span(self) -> timedelta:
        return self.end - self.start

    def __str__(self) -> str:
        return f'[{self.start:%Y-%m-%dT%H:%M}, {self.end:%Y-%m-%dT%H:%M}]'


def split_window(
    start: datetime,
    end: datetime,
    max_span: timedelta = MAX_WINDOW_SPAN,
    gap: timedelta = WINDOW_GAP,
) -> List[TimeWindow]:
    """
    Split [start, end] into ordered sub-windows no longer than max_span.

    The first window starts at start, the last one ends at end, and each
    following window starts one gap after the previous one ended.
    start == end yields a single zero-length window.

    Raises:
        ValueError: if start > end or max_span is not positive
    """
    if start > end:
        raise ValueError(f'Window start {start} is after end {end}')
    if max_span <= timedelta(0):
        raise ValueError('max_span must be positive')

    windows: List[TimeWindow] = []
    current = start

    while True:
        current_end = min(current + max_span, end)
        windows.append(TimeWindow(start=current, end=current_end))

        if current_end >= end:
            break

        # Sub-minute inputs could otherwise step past end
        current = min(current_end + gap, end)

    return windows
