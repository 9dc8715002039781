"""
Satellite tracking and track reduction.

During the tracking phase of a common-view window, per-epoch measurements
of one satellite are buffered in an SVTracker. At the end of the window,
a degree-1 least-squares fit of each quantity gives its value and slope
at the track midpoint, ready to be written as a CGGTTS track.

Usage:
    from pycggtts.tracker import FitData, SVTracker

    tracker = SVTracker()
    for epoch, refsv, refsys, mdtr, elev, azim in measurements:
        tracker.new_observation(epoch, FitData(refsv, refsys, mdtr, elev, azim))

    result = tracker.fit(
        tracking_duration=timedelta(seconds=780),
        sampling_period=timedelta(seconds=30),
        midpoint=window.midpoint,
    )
    track = result.to_track(sv, window.tracking_start, timedelta(seconds=780), ioe=42, frc="L1C")
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timedelta

import numpy as np

from pycggtts.core.exceptions import (
    FitError,
    IncompleteTrackError,
    LinearRegressionError,
    NonContiguousBufferError,
    NotCenteredError,
    OutOfOrderSampleError,
)
from pycggtts.track.track import (
    CommonViewClass,
    GlonassChannel,
    IonosphericData,
    Track,
    TrackData,
)
from pycggtts.utils.dates import ensure_utc
from pycggtts.utils.gnss import SV
from pycggtts.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class FitData:
    """One measurement of a tracked satellite.

    Attributes:
        refsv: Local clock minus satellite clock (s)
        refsys: Local clock minus system time (s)
        mdtr: Modeled tropospheric delay (s)
        elevation_deg: Satellite elevation (degrees)
        azimuth_deg: Satellite azimuth (degrees)
        mdio: Modeled ionospheric delay (s), if available
        msio: Measured ionospheric delay (s), dual frequency only
    """

    refsv: float
    refsys: float
    mdtr: float
    elevation_deg: float
    azimuth_deg: float
    mdio: float | None = None
    msio: float | None = None


@dataclass(frozen=True)
class FitResult:
    """Reduced values at the track midpoint."""

    elevation_deg: float
    azimuth_deg: float
    refsv: float
    srsv: float
    refsys: float
    srsys: float
    dsg: float
    mdtr: float
    smdt: float
    mdio: float
    smdi: float
    iono: IonosphericData | None = None

    def to_track_data(self, ioe: int) -> TrackData:
        return TrackData(
            refsv=self.refsv,
            srsv=self.srsv,
            refsys=self.refsys,
            srsys=self.srsys,
            dsg=self.dsg,
            ioe=ioe,
            mdtr=self.mdtr,
            smdt=self.smdt,
            mdio=self.mdio,
            smdi=self.smdi,
        )

    def to_track(
        self,
        sv: SV,
        epoch: datetime,
        duration: timedelta,
        ioe: int,
        frc: str,
        cv_class: CommonViewClass = CommonViewClass.MULTI_CHANNEL,
        hc: int = 0,
        fdma_channel: GlonassChannel | None = None,
    ) -> Track:
        """Build the CGGTTS track for this fit.

        Args:
            sv: Tracked satellite
            epoch: Track start (tracking phase start), UTC
            duration: Tracking duration
            ioe: Issue of ephemeris used
            frc: Carrier code mnemonic (1 to 3 characters)
            cv_class: Track class
            hc: Receiver hardware channel
            fdma_channel: GLONASS frequency channel
        """
        return Track(
            sv=sv,
            cv_class=cv_class,
            epoch=epoch,
            duration=duration,
            elevation_deg=self.elevation_deg,
            azimuth_deg=self.azimuth_deg,
            frc=frc,
            data=self.to_track_data(ioe),
            iono=self.iono,
            fdma_channel=fdma_channel or GlonassChannel.unknown(),
            hc=hc,
        )


def _linear_fit(quantity: str, x: np.ndarray, y: np.ndarray) -> tuple[float, float]:
    """Least-squares line through (x, y).

    Returns:
        Tuple of (slope, value at x=0)

    Raises:
        LinearRegressionError: On degenerate or non-finite input
    """
    if not np.all(np.isfinite(y)):
        raise LinearRegressionError(quantity, "non-finite values")
    try:
        slope, intercept = np.polyfit(x, y, 1)
    except (np.linalg.LinAlgError, ValueError) as e:
        raise LinearRegressionError(quantity, str(e)) from e
    if not (math.isfinite(slope) and math.isfinite(intercept)):
        raise LinearRegressionError(quantity, "non-finite coefficients")
    return float(slope), float(intercept)


class SVTracker:
    """Measurement buffer of one satellite during one tracking phase.

    Measurements must be added in strictly increasing epoch order.
    """

    def __init__(self):
        self._buffer: dict[datetime, FitData] = {}

    def __len__(self) -> int:
        return len(self._buffer)

    @property
    def epochs(self) -> list[datetime]:
        return list(self._buffer)

    def not_empty(self) -> bool:
        return bool(self._buffer)

    def reset(self) -> None:
        """Drop all buffered measurements (new tracking phase)."""
        self._buffer.clear()

    def new_observation(self, epoch: datetime, data: FitData) -> None:
        """Buffer a new measurement.

        Raises:
            OutOfOrderSampleError: If epoch is not after the latest buffered one
        """
        epoch = ensure_utc(epoch)
        if self._buffer:
            latest = next(reversed(self._buffer))
            if epoch <= latest:
                raise OutOfOrderSampleError(epoch.isoformat(), latest.isoformat())
        self._buffer[epoch] = data

    def no_gaps(self, sampling_period: timedelta) -> bool:
        """True when consecutive measurements are at most sampling_period apart."""
        epochs = self.epochs
        return all(b - a <= sampling_period for a, b in zip(epochs, epochs[1:]))

    def check_contiguous(self, sampling_period: timedelta) -> None:
        """Raise on the first gap larger than sampling_period.

        Raises:
            NonContiguousBufferError: If a gap is found
        """
        epochs = self.epochs
        for before, after in zip(epochs, epochs[1:]):
            if after - before > sampling_period:
                raise NonContiguousBufferError(before.isoformat(), after.isoformat())

    def is_complete(
        self,
        tracking_duration: timedelta,
        sampling_period: timedelta,
        midpoint: datetime,
    ) -> bool:
        """True when fit() would pass its completeness checks."""
        try:
            self._check_completeness(tracking_duration, sampling_period, ensure_utc(midpoint))
        except FitError:
            return False
        return True

    def _check_completeness(
        self,
        tracking_duration: timedelta,
        sampling_period: timedelta,
        midpoint: datetime,
    ) -> None:
        required = math.ceil(tracking_duration / sampling_period)
        if len(self._buffer) < required:
            raise IncompleteTrackError(len(self._buffer), required)
        epochs = self.epochs
        if not (epochs[0] < midpoint < epochs[-1]):
            raise NotCenteredError(midpoint.isoformat())

    def fit(
        self,
        tracking_duration: timedelta,
        sampling_period: timedelta,
        midpoint: datetime,
    ) -> FitResult:
        """Reduce the buffered measurements at the track midpoint.

        Args:
            tracking_duration: Duration of the tracking phase
            sampling_period: Nominal measurement interval
            midpoint: Track midpoint (UTC)

        Returns:
            FitResult

        Raises:
            IncompleteTrackError: Fewer than tracking/sampling measurements
            NotCenteredError: Measurements do not surround the midpoint
            LinearRegressionError: Degenerate fit
        """
        midpoint = ensure_utc(midpoint)
        self._check_completeness(tracking_duration, sampling_period, midpoint)

        epochs = self.epochs
        samples = list(self._buffer.values())

        # abscissae in seconds relative to the midpoint
        x = np.array([(t - midpoint).total_seconds() for t in epochs])
        if len(np.unique(x)) < 2:
            raise LinearRegressionError("epochs", "fewer than two distinct epochs")

        elevation, azimuth = self._attitude_at(midpoint, epochs, samples)

        srsv, refsv = _linear_fit("refsv", x, np.array([s.refsv for s in samples]))
        srsys, refsys = _linear_fit("refsys", x, np.array([s.refsys for s in samples]))
        smdt, mdtr = _linear_fit("mdtr", x, np.array([s.mdtr for s in samples]))
        smdi, mdio = _linear_fit(
            "mdio", x, np.array([s.mdio if s.mdio is not None else 0.0 for s in samples])
        )

        # spread of the fitted line around the midpoint estimate
        fitted = srsys * x + refsys
        dsg = float(np.sqrt(np.sum((fitted - refsys) ** 2)))

        iono = None
        if any(s.msio is not None for s in samples):
            smsi, msio = _linear_fit(
                "msio", x, np.array([s.msio if s.msio is not None else 0.0 for s in samples])
            )
            fitted = smsi * x + msio
            isg = float(np.sqrt(np.sum((fitted - msio) ** 2)))
            iono = IonosphericData(msio=msio, smsi=smsi, isg=isg)

        return FitResult(
            elevation_deg=elevation,
            azimuth_deg=azimuth,
            refsv=refsv,
            srsv=srsv,
            refsys=refsys,
            srsys=srsys,
            dsg=dsg,
            mdtr=mdtr,
            smdt=smdt,
            mdio=mdio,
            smdi=smdi,
            iono=iono,
        )

    @staticmethod
    def _attitude_at(
        midpoint: datetime,
        epochs: list[datetime],
        samples: list[FitData],
    ) -> tuple[float, float]:
        """Elevation and azimuth at midpoint, measured or interpolated."""
        before = 0
        for i, t in enumerate(epochs):
            if t == midpoint:
                return samples[i].elevation_deg, samples[i].azimuth_deg
            if t < midpoint:
                before = i

        t0, t1 = epochs[before], epochs[before + 1]
        ratio = (midpoint - t0) / (t1 - t0)
        s0, s1 = samples[before], samples[before + 1]
        elevation = s0.elevation_deg + ratio * (s1.elevation_deg - s0.elevation_deg)
        azimuth = s0.azimuth_deg + ratio * (s1.azimuth_deg - s0.azimuth_deg)
        return elevation, azimuth


class SkyTracker:
    """One SVTracker per satellite in view.

    Usage:
        sky = SkyTracker()
        sky.new_observation(SV.parse("G08"), epoch, data)
        results = sky.fit_all(tracking_duration, sampling_period, midpoint)
    """

    def __init__(self):
        self.trackers: dict[SV, SVTracker] = {}

    def new_observation(self, sv: SV, epoch: datetime, data: FitData) -> None:
        self.trackers.setdefault(sv, SVTracker()).new_observation(epoch, data)

    def tracker(self, sv: SV) -> SVTracker | None:
        return self.trackers.get(sv)

    def reset_sv(self, sv: SV) -> None:
        tracker = self.trackers.get(sv)
        if tracker is not None:
            tracker.reset()

    def reset(self) -> None:
        self.trackers.clear()

    def fit_all(
        self,
        tracking_duration: timedelta,
        sampling_period: timedelta,
        midpoint: datetime,
    ) -> dict[SV, FitResult | FitError]:
        """Fit every tracked satellite.

        Returns:
            Mapping of satellite to its FitResult, or to the FitError that
            prevented the fit
        """
        results: dict[SV, FitResult | FitError] = {}
        for sv, tracker in sorted(self.trackers.items()):
            try:
                results[sv] = tracker.fit(tracking_duration, sampling_period, midpoint)
            except FitError as e:
                logger.info("Track not produced", sv=str(sv), reason=str(e))
                results[sv] = e
        return results
