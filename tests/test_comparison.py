"""
Tests for common-view clock comparison.
"""

import pytest
from dataclasses import replace
from pathlib import Path

from pycggtts import CGGTTS
from pycggtts.comparison import average_by_epoch, common_view_differences


DATA_DIR = Path(__file__).parent / "data"


@pytest.fixture
def local() -> CGGTTS:
    return CGGTTS.from_path(DATA_DIR / "GZSY8259.568")


def shifted(cggtts: CGGTTS, offset: float, count: int) -> CGGTTS:
    """Copy of the first count tracks with REFSYS shifted by -offset."""
    tracks = [
        replace(t, data=replace(t.data, refsys=t.data.refsys - offset), elevation_deg=45.0)
        for t in cggtts.tracks[:count]
    ]
    return CGGTTS(header=cggtts.header, tracks=tracks)


class TestCommonViewDifferences:
    """Tests for track pairing."""

    def test_common_tracks(self, local):
        """Only tracks present in both files are paired."""
        remote = shifted(local, 5e-9, 3)
        diffs = common_view_differences(local, remote)

        assert len(diffs) == 3
        assert [d.epoch for d in diffs] == [t.epoch for t in local.tracks[:3]]
        for d in diffs:
            assert d.difference == pytest.approx(5e-9, abs=1e-15)
            assert d.elevation_local == pytest.approx(9.9)
            assert d.elevation_remote == 45.0
            assert d.frc == "L1C"

    def test_carrier_code_must_match(self, local):
        """Tracks on different carriers are not compared."""
        remote = CGGTTS(
            header=local.header,
            tracks=[t.with_carrier_code("L2P") for t in local.tracks],
        )
        assert common_view_differences(local, remote) == []

    def test_duplicates(self, local):
        """The first of duplicated remote tracks is used."""
        first = shifted(local, 1e-9, 1).tracks[0]
        second = shifted(local, 2e-9, 1).tracks[0]
        remote = CGGTTS(header=local.header, tracks=[first, second])
        diffs = common_view_differences(local, remote)
        assert len(diffs) == 1
        assert diffs[0].difference == pytest.approx(1e-9, abs=1e-15)


class TestAverageByEpoch:
    """Tests for per-epoch averaging."""

    def test_average(self, local):
        """One mean value per epoch, in time order."""
        diffs = common_view_differences(local, shifted(local, 3e-9, 4))
        averages = average_by_epoch(list(reversed(diffs)))
        assert [epoch for epoch, _ in averages] == [t.epoch for t in local.tracks]
        for _, value in averages:
            assert value == pytest.approx(3e-9, abs=1e-15)

    def test_empty(self):
        assert average_by_epoch([]) == []
