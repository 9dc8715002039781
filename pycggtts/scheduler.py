"""
Common-view scheduling.

BIPM common-view periods last 16 minutes: 3 minutes of setup followed by
13 minutes (780 s) of tracking. The first period of each MJD starts 4
minutes earlier than on the previous day, to follow the GPS sidereal
repetition. MJD 50722 is the reference day, whose first period starts at
00:02 UTC.

Usage:
    from pycggtts.scheduler import CommonViewPeriod

    period = CommonViewPeriod.bipm()
    start = period.next_window_start(datetime.now(timezone.utc))
    wait = period.time_to_next_window(datetime.now(timezone.utc))
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Iterator

from pycggtts.track.track import BIPM_TRACKING_DURATION
from pycggtts.utils.dates import datetime_from_mjd, ensure_utc, mjd_day
from pycggtts.utils.logging import get_logger

logger = get_logger(__name__)


# Constants
MJD_REFERENCE = 50_722
BIPM_SETUP_DURATION = timedelta(seconds=180)

# Daily shift of the first period, and its value on the reference MJD
DAILY_SHIFT = timedelta(minutes=4)
REFERENCE_OFFSET = timedelta(minutes=2)


def _to_us(delta: timedelta) -> int:
    """Exact duration in integer microseconds."""
    return (delta.days * 86400 + delta.seconds) * 1_000_000 + delta.microseconds


@dataclass(frozen=True)
class CommonViewWindow:
    """One observation window: setup then tracking."""

    start: datetime
    setup_duration: timedelta
    tracking_duration: timedelta

    @property
    def tracking_start(self) -> datetime:
        return self.start + self.setup_duration

    @property
    def end(self) -> datetime:
        return self.tracking_start + self.tracking_duration

    @property
    def midpoint(self) -> datetime:
        """Middle of the tracking phase, where tracks are reduced."""
        return self.tracking_start + self.tracking_duration / 2

    def contains(self, t: datetime) -> bool:
        return self.start <= ensure_utc(t) < self.end

    def is_tracking(self, t: datetime) -> bool:
        """True while measurements should be collected."""
        return self.tracking_start <= ensure_utc(t) < self.end


@dataclass(frozen=True)
class CommonViewPeriod:
    """Common-view period definition.

    Attributes:
        setup_duration: Warm-up time before tracking
        tracking_duration: Tracking (measurement) time
    """

    setup_duration: timedelta = BIPM_SETUP_DURATION
    tracking_duration: timedelta = BIPM_TRACKING_DURATION

    def __post_init__(self):
        if self.setup_duration < timedelta(0):
            raise ValueError(f"negative setup duration: {self.setup_duration}")
        if self.tracking_duration <= timedelta(0):
            raise ValueError(f"tracking duration must be positive: {self.tracking_duration}")

    @classmethod
    def bipm(cls) -> "CommonViewPeriod":
        """Standard BIPM period (180 s + 780 s)."""
        return cls()

    @property
    def total_duration(self) -> timedelta:
        return self.setup_duration + self.tracking_duration

    def is_bipm(self) -> bool:
        return (
            self.setup_duration == BIPM_SETUP_DURATION
            and self.tracking_duration == BIPM_TRACKING_DURATION
        )

    def required_samples(self, sampling_period: timedelta) -> int:
        """Number of measurements needed to fit one track."""
        if sampling_period <= timedelta(0):
            raise ValueError(f"sampling period must be positive: {sampling_period}")
        return math.ceil(self.tracking_duration / sampling_period)

    def first_track_offset(self, mjd: int) -> timedelta:
        """Offset of the first window start within MJD day mjd.

        Only BIPM periods follow the sidereal shift; other periods start
        at midnight.
        """
        if not self.is_bipm():
            return timedelta(0)
        raw = (MJD_REFERENCE - mjd) * _to_us(DAILY_SHIFT) + _to_us(REFERENCE_OFFSET)
        # non-negative for a positive divisor
        return timedelta(microseconds=raw % _to_us(self.total_duration))

    def next_window(self, t: datetime) -> tuple[datetime, bool]:
        """Start of the next window at or after t.

        Returns:
            Tuple of (window start in UTC, whether it is the first window
            of its MJD)
        """
        t = ensure_utc(t)
        mjd = mjd_day(t)
        day_start = datetime_from_mjd(mjd)
        next_day = datetime_from_mjd(mjd + 1)
        total_us = _to_us(self.total_duration)

        if next_day - t < self.total_duration:
            # no complete window left in this day
            return next_day + self.first_track_offset(mjd + 1), True

        offset_us = _to_us(self.first_track_offset(mjd))
        elapsed_us = _to_us(t - day_start)
        index = max(0, -((offset_us - elapsed_us) // total_us))
        start = day_start + timedelta(microseconds=offset_us + index * total_us)
        return start, index == 0

    def next_window_start(self, t: datetime) -> datetime:
        """Start of the next window at or after t (UTC)."""
        start, _ = self.next_window(t)
        return start

    def time_to_next_window(self, t: datetime) -> timedelta:
        """Remaining time before the next window starts."""
        return self.next_window_start(t) - ensure_utc(t)

    def window(self, start: datetime) -> CommonViewWindow:
        return CommonViewWindow(ensure_utc(start), self.setup_duration, self.tracking_duration)

    def windows_for_mjd(self, mjd: int) -> list[CommonViewWindow]:
        """All complete windows starting within MJD day mjd."""
        day_start = datetime_from_mjd(mjd)
        next_day = datetime_from_mjd(mjd + 1)
        start = day_start + self.first_track_offset(mjd)
        windows = []
        while start + self.total_duration <= next_day:
            windows.append(self.window(start))
            start += self.total_duration
        return windows


class CommonViewCalendar:
    """Series of consecutive common-view windows.

    Usage:
        calendar = CommonViewCalendar(CommonViewPeriod.bipm())
        for window in calendar.windows(count=4):
            print(window.start, window.midpoint)
    """

    def __init__(
        self,
        period: CommonViewPeriod | None = None,
        deploy_time: datetime | None = None,
    ):
        """Initialize calendar.

        Args:
            period: Period definition (BIPM by default)
            deploy_time: Time from which windows are scheduled (default: now)
        """
        self.period = period or CommonViewPeriod.bipm()
        deploy_time = ensure_utc(deploy_time) if deploy_time else datetime.now(timezone.utc)
        self.start_time, self.is_t0 = self.period.next_window(deploy_time)
        logger.debug(
            "Common-view calendar deployed",
            start=self.start_time.isoformat(),
            first_of_day=self.is_t0,
        )

    def is_active(self, now: datetime | None = None) -> bool:
        """True once the first window has started."""
        now = ensure_utc(now) if now else datetime.now(timezone.utc)
        return now >= self.start_time

    def __iter__(self) -> Iterator[CommonViewWindow]:
        start = self.start_time
        while True:
            yield self.period.window(start)
            start = self.period.next_window_start(start + timedelta(microseconds=1))

    def windows(self, count: int) -> list[CommonViewWindow]:
        """The first count windows of this calendar."""
        result = []
        for window in self:
            if len(result) >= count:
                break
            result.append(window)
        return result
