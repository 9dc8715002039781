"""
Tests for CGGTTS tracks.

Covers the track model invariants, the column table (scaling, rounding
and saturation), and the line reader and writer.
"""

import pytest
from datetime import timedelta

from pycggtts.core.diagnostics import ChecksumMismatch, WarningKind
from pycggtts.core.exceptions import (
    ChecksumFormatError,
    FieldError,
    FormattingError,
    InvalidTrackFormatError,
    NonAsciiError,
    NumericFieldError,
)
from pycggtts.track import (
    CommonViewClass,
    GlonassChannel,
    IonosphericData,
    Track,
    TrackData,
    format_track,
    parse_track,
)
from pycggtts.track import fields
from pycggtts.track.formatter import format_track_body
from pycggtts.track.parser import split_checksum
from pycggtts.utils.dates import datetime_from_mjd
from pycggtts.utils.gnss import SV, Constellation


# Dual frequency Galileo tracks
E1_LINE = (
    "E03 FF 60258 001000  780 139  548      723788     14        -302    -14    2"
    "  76  325  -36   32   -3   20   20   3  0  0  E1 74"
)
E5B_LINE = (
    "E03 FF 60258 001000  780 139  548      724092     28           2      1    2"
    "  76  325  -36   54   -6   34   35   5  0  0 E5b 77"
)
# Single channel GPS combination, signs and zero padding as produced in the field
G99_LINE = (
    "G99 99 59568 001000 0780 099 0099 +9999999999 +99999       +1536   +181   26"
    " 999 9999 +999 9999 +999 00 00 L1C D3"
)
# GLONASS track whose declared checksum is wrong (computed 6F)
R24_LINE = (
    "R24 FF 57000 000600 0780 347 0394 +1186342 +0 163 +0 40 2 141 +22 23 -1 23"
    " -1 29 +2 0 L3P EF"
)

G08_LINE = (
    "G08 FF 59568 001000  780 452 1234       12345    -25         -31      1   21"
    "  42   85  -11   42    2  0  0 L1C 43"
)
# GLONASS channel 12 and hardware channel 10, both hexadecimal
R24_HEX_LINE = (
    "R24 FF 59568 001000  780 452 1234       12345    -25         -31      1   21"
    "  42   85  -11   42    2  C  A L3P 7F"
)


@pytest.fixture
def g08_track() -> Track:
    """Single frequency multi channel GPS track."""
    return Track(
        sv=SV.parse("G08"),
        cv_class=CommonViewClass.MULTI_CHANNEL,
        epoch=datetime_from_mjd(59568) + timedelta(minutes=10),
        duration=timedelta(seconds=780),
        elevation_deg=45.2,
        azimuth_deg=123.4,
        data=TrackData(
            refsv=1.2345e-6,
            srsv=-2.5e-12,
            refsys=-3.1e-9,
            srsys=1e-13,
            dsg=2.1e-9,
            ioe=42,
            mdtr=8.5e-9,
            smdt=-1.1e-12,
            mdio=4.2e-9,
            smdi=2e-13,
        ),
        frc="L1C",
    )


class TestTrackModel:
    """Tests for Track invariants and helpers."""

    def test_helpers(self, g08_track):
        """Constellation, BIPM and ionosphere predicates."""
        assert g08_track.mjd == 59568
        assert g08_track.uses_constellation(Constellation.GPS)
        assert not g08_track.uses_constellation(Constellation.GALILEO)
        assert g08_track.follows_bipm_specs()
        assert not g08_track.has_ionospheric_data()
        assert not g08_track.is_melting_pot

    def test_non_bipm_duration(self, g08_track):
        """Only 780 s tracks follow BIPM specifications."""
        track = Track(
            sv=g08_track.sv,
            cv_class=g08_track.cv_class,
            epoch=g08_track.epoch,
            duration=timedelta(seconds=600),
            elevation_deg=10.0,
            azimuth_deg=10.0,
            frc="L1C",
        )
        assert not track.follows_bipm_specs()

    def test_builders(self, g08_track):
        """with_* methods return modified copies."""
        track = (
            g08_track
            .with_sv(SV.parse("G99"))
            .with_elevation(10.0)
            .with_azimuth(20.0)
            .with_carrier_code("L2P")
        )
        assert track.is_melting_pot
        assert track.elevation_deg == 10.0
        assert track.azimuth_deg == 20.0
        assert track.frc == "L2P"
        assert g08_track.sv == SV.parse("G08")

    def test_iono_requires_multi_channel(self, g08_track):
        """Ionospheric data is only valid on multi channel tracks."""
        with pytest.raises(ValueError, match="multi channel"):
            Track(
                sv=g08_track.sv,
                cv_class=CommonViewClass.SINGLE_CHANNEL,
                epoch=g08_track.epoch,
                duration=g08_track.duration,
                elevation_deg=10.0,
                azimuth_deg=10.0,
                frc="L1C",
                iono=IonosphericData(),
            )

    def test_duration_positive(self, g08_track):
        """Zero duration tracks are rejected."""
        with pytest.raises(ValueError):
            Track(
                sv=g08_track.sv,
                cv_class=g08_track.cv_class,
                epoch=g08_track.epoch,
                duration=timedelta(0),
                elevation_deg=10.0,
                azimuth_deg=10.0,
                frc="L1C",
            )

    def test_invalid_carrier_code(self, g08_track):
        """Carrier codes are at most three ASCII characters."""
        with pytest.raises(ValueError):
            g08_track.with_carrier_code("L1CA")

    @pytest.mark.parametrize("frc", ["", "L 1", "L\n"])
    def test_carrier_code_required(self, g08_track, frc):
        """Empty carrier codes and codes with separators are rejected."""
        with pytest.raises(ValueError, match="carrier code"):
            g08_track.with_carrier_code(frc)

    def test_invalid_hardware_channel(self, g08_track):
        """HC must fit 8 bits."""
        with pytest.raises(ValueError):
            Track(
                sv=g08_track.sv,
                cv_class=g08_track.cv_class,
                epoch=g08_track.epoch,
                duration=g08_track.duration,
                elevation_deg=10.0,
                azimuth_deg=10.0,
                frc="L1C",
                hc=256,
            )

    def test_ioe_range(self):
        """IOE must be in [0, 999]."""
        with pytest.raises(ValueError):
            TrackData(ioe=1000)

    def test_non_finite_data(self):
        """Track data must be finite."""
        with pytest.raises(ValueError):
            TrackData(refsys=float("inf"))
        with pytest.raises(ValueError):
            IonosphericData(msio=float("nan"))


class TestGlonassChannel:
    """Tests for the FR field."""

    def test_zero_is_unknown(self):
        """0 means not applicable."""
        assert GlonassChannel.parse("0").is_unknown
        assert GlonassChannel.parse("00").is_unknown
        assert str(GlonassChannel.unknown()) == "0"

    def test_channel_number(self):
        """Channel numbers are kept."""
        channel = GlonassChannel.parse("+2")
        assert channel == GlonassChannel.number(2)
        assert str(channel) == "2"

    def test_hexadecimal(self):
        """Channels above 9 are hexadecimal digits."""
        assert GlonassChannel.parse("0C") == GlonassChannel.number(12)
        assert GlonassChannel.parse("C") == GlonassChannel.number(12)
        assert str(GlonassChannel.number(12)) == "C"
        assert str(GlonassChannel.number(0x1F)) == "1F"


class TestCommonViewClass:
    """Tests for the CL field."""

    def test_from_str(self):
        """'99' and 'FF' (any case) are the only classes."""
        assert CommonViewClass.from_str("99") == CommonViewClass.SINGLE_CHANNEL
        assert CommonViewClass.from_str("ff") == CommonViewClass.MULTI_CHANNEL
        with pytest.raises(ValueError):
            CommonViewClass.from_str("AA")


class TestScaledFields:
    """Tests for scaling, rounding and saturation."""

    def test_round_half_away_from_zero(self):
        """Halves round away from zero."""
        assert fields.round_half_away(2.5) == 3
        assert fields.round_half_away(-2.5) == -3
        assert fields.round_half_away(2.4) == 2
        assert fields.round_half_away(-2.4) == -2

    def test_scaling(self):
        """Seconds to 0.1 ns and s/s to 0.1 ps/s."""
        assert fields.REFSYS.to_wire(-3.02e-8) == -302
        assert fields.SRSYS.to_wire(-1.4e-12) == -14
        assert fields.ELV.to_wire(13.9) == 139

    def test_signed_saturation(self):
        """Signed columns clamp to [-M/10, M]."""
        assert fields.REFSV.to_wire(100.0) == 99_999_999_999
        assert fields.REFSV.to_wire(-1.0) == -9_999_999_999
        assert fields.SMDT.to_wire(-1.0) == -999

    def test_unsigned_saturation(self):
        """Unsigned columns clamp to [0, M]."""
        assert fields.DSG.to_wire(1.0) == 9_999
        assert fields.DSG.to_wire(-1e-9) == 0
        assert fields.ELV.to_wire(120.0) == 999

    def test_infinity_saturates(self):
        """Infinite values saturate."""
        assert fields.SRSV.to_wire(float("inf")) == 999_999
        assert fields.SRSV.to_wire(float("-inf")) == -99_999

    def test_nan_rejected(self):
        """NaN cannot be written."""
        with pytest.raises(FormattingError, match="REFSYS"):
            fields.REFSYS.to_wire(float("nan"))

    def test_width(self):
        """Values are right aligned to the column width."""
        assert fields.REFSV.format(7.23788e-5) == "     723788"
        assert fields.ISG.format(3e-10) == "  3"


class TestTrackFormatting:
    """Tests for the track writer."""

    def test_format(self, g08_track):
        """Column-exact output with checksum."""
        assert format_track(g08_track) == G08_LINE
        assert str(g08_track) == G08_LINE

    def test_body_ends_with_separator(self, g08_track):
        """The checksummed body includes the trailing space."""
        body = format_track_body(g08_track)
        assert body.endswith("L1C ")
        assert format_track(g08_track) == body + "43"

    def test_saturated_output(self, g08_track):
        """Out of range values keep the column layout."""
        track = Track(
            sv=g08_track.sv,
            cv_class=g08_track.cv_class,
            epoch=g08_track.epoch,
            duration=g08_track.duration,
            elevation_deg=150.0,
            azimuth_deg=1500.0,
            data=TrackData(
                refsv=100.0,
                srsv=-1.0,
                refsys=-1.0,
                srsys=1.0,
                dsg=1.0,
                ioe=999,
                mdtr=1.0,
                smdt=-1.0,
                mdio=-1.0,
                smdi=1.0,
            ),
            frc="L1C",
        )
        body = format_track_body(track)
        assert body == (
            "G08 FF 59568 001000  780 999 9999 99999999999 -99999 -9999999999 999999"
            " 9999 999 9999 -999    0 9999  0  0 L1C "
        )

    def test_glonass_channel(self, g08_track):
        """FR and HC are written in hexadecimal, right aligned on two columns."""
        track = Track(
            sv=SV.parse("R24"),
            cv_class=g08_track.cv_class,
            epoch=g08_track.epoch,
            duration=g08_track.duration,
            elevation_deg=10.0,
            azimuth_deg=10.0,
            fdma_channel=GlonassChannel.number(2),
            hc=12,
            frc="L3P",
        )
        assert format_track_body(track).endswith("  2  C L3P ")


class TestTrackParsing:
    """Tests for the track reader."""

    def test_parse_dual_frequency(self):
        """All fields of a dual frequency track."""
        warnings = []
        track = parse_track(E1_LINE, warnings=warnings)
        assert warnings == []

        assert track.sv == SV(Constellation.GALILEO, 3)
        assert track.cv_class == CommonViewClass.MULTI_CHANNEL
        assert track.mjd == 60258
        assert track.epoch == datetime_from_mjd(60258) + timedelta(minutes=10)
        assert track.duration == timedelta(seconds=780)
        assert track.follows_bipm_specs()
        assert track.elevation_deg == pytest.approx(13.9)
        assert track.azimuth_deg == pytest.approx(54.8)

        data = track.data
        assert data.refsv == pytest.approx(723788e-10, abs=1e-16)
        assert data.srsv == pytest.approx(14e-13, abs=1e-19)
        assert data.refsys == pytest.approx(-302e-10, abs=1e-16)
        assert data.srsys == pytest.approx(-14e-13, abs=1e-19)
        assert data.dsg == pytest.approx(2e-10, abs=1e-16)
        assert data.ioe == 76
        assert data.mdtr == pytest.approx(325e-10, abs=1e-16)
        assert data.smdt == pytest.approx(-36e-13, abs=1e-19)
        assert data.mdio == pytest.approx(32e-10, abs=1e-16)
        assert data.smdi == pytest.approx(-3e-13, abs=1e-19)

        assert track.has_ionospheric_data()
        assert track.iono.msio == pytest.approx(20e-10, abs=1e-16)
        assert track.iono.smsi == pytest.approx(20e-13, abs=1e-19)
        assert track.iono.isg == pytest.approx(3e-10, abs=1e-16)

        assert track.fdma_channel.is_unknown
        assert track.hc == 0
        assert track.frc == "E1"

    def test_parse_single_frequency(self):
        """Signed and zero padded tokens are accepted."""
        track = parse_track(G99_LINE)
        assert track.sv == SV.parse("G99")
        assert track.is_melting_pot
        assert track.cv_class == CommonViewClass.SINGLE_CHANNEL
        assert track.duration == timedelta(seconds=780)
        assert track.elevation_deg == pytest.approx(9.9)
        assert track.data.refsv == pytest.approx(0.9999999999)
        assert track.data.refsys == pytest.approx(1536e-10, abs=1e-16)
        assert track.data.ioe == 999
        assert not track.has_ionospheric_data()
        assert track.frc == "L1C"

    @pytest.mark.parametrize("line", [E1_LINE, E5B_LINE, G08_LINE, R24_HEX_LINE])
    def test_roundtrip_exact(self, line):
        """Lines in the output layout are written back unchanged."""
        assert format_track(parse_track(line)) == line

    def test_parse_hexadecimal_channels(self):
        """FR and HC are read as hexadecimal."""
        warnings = []
        track = parse_track(R24_HEX_LINE, warnings=warnings)
        assert warnings == []
        assert track.sv == SV.parse("R24")
        assert track.fdma_channel == GlonassChannel.number(12)
        assert track.hc == 10
        assert track.frc == "L3P"

        zero_padded = R24_HEX_LINE.replace("  C  A L3P 7F", " 0C 0A L3P 9F")
        assert parse_track(zero_padded).fdma_channel == GlonassChannel.number(12)

    def test_roundtrip_with_trailing_newline(self):
        """Line terminators are ignored."""
        assert format_track(parse_track(E1_LINE + "\r\n")) == E1_LINE

    def test_checksum_mismatch_is_warning(self):
        """A wrong CK is reported and the track is still returned."""
        warnings = []
        track = parse_track(R24_LINE, line_number=18, warnings=warnings)

        assert track.sv == SV.parse("R24")
        assert track.fdma_channel == GlonassChannel.number(2)
        assert track.frc == "L3P"

        assert len(warnings) == 1
        warning = warnings[0]
        assert isinstance(warning, ChecksumMismatch)
        assert warning.kind == WarningKind.TRACK_CHECKSUM
        assert warning.declared == 0xEF
        assert warning.computed == 0x6F
        assert warning.line_number == 18

    def test_checksum_mismatch_without_collector(self):
        """Mismatches never raise, even without a warnings list."""
        assert parse_track(R24_LINE).sv == SV.parse("R24")

    def test_split_checksum(self):
        """Content keeps the separating space."""
        content, ck = split_checksum(G99_LINE)
        assert ck == "D3"
        assert content.endswith("L1C ")

    def test_wrong_token_count(self):
        """Token counts other than 21 and 24 are rejected."""
        line = E1_LINE.replace(" 20   20   3 ", " 20 ")
        with pytest.raises(InvalidTrackFormatError) as exc_info:
            parse_track(line, line_number=20)
        assert exc_info.value.token_count == 22
        assert exc_info.value.line_number == 20

    def test_invalid_satellite(self):
        """Unknown constellation letters are rejected."""
        with pytest.raises(FieldError, match="satellite"):
            parse_track("X" + E1_LINE[1:])

    def test_invalid_class(self):
        """CL must be 99 or FF."""
        with pytest.raises(FieldError, match="class"):
            parse_track(E1_LINE.replace(" FF ", " AA ", 1))

    def test_invalid_number(self):
        """Non-numeric scaled values are rejected."""
        with pytest.raises(NumericFieldError) as exc_info:
            parse_track(E1_LINE.replace("723788", "72378x"))
        assert exc_info.value.field == "REFSV"

    def test_invalid_start_time(self):
        """STTIME must be a valid HHMMSS."""
        with pytest.raises(FieldError, match="STTIME"):
            parse_track(E1_LINE.replace("001000", "251000"))

    def test_invalid_checksum_token(self):
        """A non-hexadecimal CK is rejected."""
        with pytest.raises(ChecksumFormatError):
            parse_track(E1_LINE[:-2] + "ZZ")

    def test_non_ascii(self):
        """Non-ASCII content is rejected."""
        with pytest.raises(NonAsciiError):
            parse_track(E1_LINE.replace(" E1 ", " É1 "))
