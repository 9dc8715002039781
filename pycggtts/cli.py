"""
Command-line interface for PyCGGTTS.

Provides a CLI using Click to inspect, check and rewrite CGGTTS files,
print common-view schedules and compare two stations.
"""

from __future__ import annotations

import sys
from datetime import datetime, timezone
from pathlib import Path

import click

from pycggtts import __version__
from pycggtts.core.exceptions import CGGTTSError


@click.group()
@click.version_option(version=__version__, prog_name="PyCGGTTS")
@click.option(
    "--config", "-c",
    type=click.Path(exists=True, path_type=Path),
    help="Path to configuration file",
)
@click.option(
    "--verbose", "-v",
    is_flag=True,
    help="Enable verbose output",
)
@click.option(
    "--debug",
    is_flag=True,
    help="Enable debug mode",
)
@click.pass_context
def cli(ctx: click.Context, config: Path | None, verbose: bool, debug: bool) -> None:
    """PyCGGTTS: CGGTTS common-view time transfer files

    Read, check and write BIPM CGGTTS 2E files, and compute common-view
    schedules and clock comparisons.
    """
    from pycggtts.core.config import load_settings
    from pycggtts.utils.logging import setup_logging

    try:
        settings = load_settings(config)
    except CGGTTSError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if debug:
        level = "DEBUG"
    elif verbose:
        level = "INFO"
    else:
        level = settings.logging.level

    setup_logging(
        level=level,
        log_dir=settings.logging.log_dir,
        log_to_file=settings.logging.log_to_file,
        log_to_console=settings.logging.log_to_console,
        json_format=settings.logging.json_format,
    )

    ctx.ensure_object(dict)
    ctx.obj["config"] = config
    ctx.obj["settings"] = settings
    ctx.obj["verbose"] = verbose
    ctx.obj["debug"] = debug


def _read(path: Path) -> "CGGTTS":
    """Read a file, exiting with status 1 on a fatal error."""
    from pycggtts.cggtts import CGGTTS

    try:
        return CGGTTS.from_path(path)
    except CGGTTSError as e:
        click.echo(f"Error: {path}: {e}", err=True)
        sys.exit(1)


@cli.command()
@click.argument("cggtts_file", type=click.Path(exists=True, path_type=Path))
@click.pass_context
def info(ctx: click.Context, cggtts_file: Path) -> None:
    """Identify a CGGTTS file.

    Examples:

        pycggtts info GZSY8259.568
    """
    settings = ctx.obj["settings"]
    cggtts = _read(cggtts_file)
    header = cggtts.header

    click.echo(f"File:        {cggtts_file}")
    click.echo(f"Version:     {header.version.value} (rev. {header.release_date.isoformat()})")
    click.echo(f"Station:     {header.station}")
    click.echo(f"Receiver:    {header.receiver or 'N/A'}")
    click.echo(f"Channels:    {header.nb_channels}")
    if header.ims is not None:
        click.echo(f"IMS:         {header.ims}")
    click.echo(f"Reference:   {header.reference_time}")
    click.echo(f"Frame:       {header.reference_frame or 'N/A'}")
    apc = header.apc_coordinates
    click.echo(f"APC:         {apc.x:.3f} {apc.y:.3f} {apc.z:.3f} m")
    click.echo(f"Tracks:      {len(cggtts.tracks)}")

    epoch = cggtts.epoch()
    click.echo(f"First epoch: {epoch.isoformat() if epoch else 'N/A'}")
    click.echo(f"Class:       {cggtts.common_view_class().name}")
    click.echo(f"Ionosphere:  {'yes' if cggtts.has_ionospheric_data() else 'no'}")
    click.echo(f"BIPM specs:  {'yes' if cggtts.follows_bipm_specs() else 'no'}")
    click.echo(f"Codes:       {', '.join(c for c in cggtts.carrier_codes() if c) or 'N/A'}")
    click.echo(f"Satellites:  {' '.join(str(sv) for sv in cggtts.satellites()) or 'N/A'}")
    name = cggtts.standardized_file_name(settings.output.lab, settings.output.receiver_id)
    click.echo(f"File name:   {name}")


@cli.command()
@click.argument("cggtts_file", type=click.Path(exists=True, path_type=Path))
@click.option(
    "--sv", "-s",
    type=str,
    help="Only tracks of this satellite (e.g. G08)",
)
@click.option(
    "--constellation", "-C",
    type=str,
    help="Only tracks of this constellation (letter or name)",
)
@click.option(
    "--format", "-f",
    type=click.Choice(["table", "csv", "raw"]),
    default="table",
    help="Output format",
)
@click.pass_context
def tracks(
    ctx: click.Context,
    cggtts_file: Path,
    sv: str | None,
    constellation: str | None,
    format: str,
) -> None:
    """List the tracks of a CGGTTS file.

    Examples:

        # Galileo tracks as CSV
        pycggtts tracks GZSY8259.568 -C GAL -f csv

        # One satellite, original line layout
        pycggtts tracks GZSY8259.568 -s G08 -f raw
    """
    from pycggtts.utils.gnss import SV, Constellation

    cggtts = _read(cggtts_file)

    selected = iter(cggtts.tracks)
    try:
        if sv:
            selected = cggtts.sv_tracks(SV.parse(sv))
        elif constellation:
            selected = cggtts.constellation_tracks(Constellation.from_str(constellation))
    except ValueError as e:
        raise click.BadParameter(str(e)) from e
    selected = list(selected)

    if format == "table":
        click.echo(
            f"{'SAT':<4} {'CL':<3} {'Start (UTC)':<20} {'ELV':>5} {'AZTH':>6} "
            f"{'REFSYS (ns)':>14} {'DSG (ns)':>9} {'FRC':<3}"
        )
        click.echo("-" * 72)
        for t in selected:
            click.echo(
                f"{str(t.sv):<4} {t.cv_class.value:<3} "
                f"{t.epoch.strftime('%Y-%m-%d %H:%M:%S'):<20} "
                f"{t.elevation_deg:>5.1f} {t.azimuth_deg:>6.1f} "
                f"{t.data.refsys * 1e9:>14.1f} {t.data.dsg * 1e9:>9.1f} {t.frc:<3}"
            )
    elif format == "csv":
        click.echo("sv,class,epoch,elevation_deg,azimuth_deg,refsv_s,refsys_s,dsg_s,frc")
        for t in selected:
            click.echo(
                f"{t.sv},{t.cv_class.value},{t.epoch.isoformat()},{t.elevation_deg},"
                f"{t.azimuth_deg},{t.data.refsv},{t.data.refsys},{t.data.dsg},{t.frc}"
            )
    else:
        for t in selected:
            click.echo(str(t))

    if format == "table":
        click.echo(f"\nTotal: {len(selected)} tracks")


@cli.command()
@click.argument(
    "cggtts_files",
    nargs=-1,
    required=True,
    type=click.Path(exists=True, path_type=Path),
)
@click.pass_context
def check(ctx: click.Context, cggtts_files: tuple[Path, ...]) -> None:
    """Verify checksums and track layout.

    Exits with status 1 when any file has warnings or cannot be read.

    Examples:

        pycggtts check GZSY8259.568 GZSY8259.569
    """
    from pycggtts.cggtts import CGGTTSReader

    failed = 0
    for path in cggtts_files:
        reader = CGGTTSReader()
        try:
            cggtts = reader.parse(path)
        except CGGTTSError as e:
            click.echo(f"{path}: ERROR {e}")
            failed += 1
            continue

        if reader.warnings:
            failed += 1
            click.echo(f"{path}: {len(reader.warnings)} warning(s)")
            for warning in reader.warnings:
                click.echo(f"  [{warning.kind.value}] {warning}")
        else:
            click.echo(f"{path}: OK ({len(cggtts.tracks)} tracks)")

    if failed:
        sys.exit(1)


@cli.command()
@click.argument("cggtts_file", type=click.Path(exists=True, path_type=Path))
@click.option(
    "--output", "-o",
    type=click.Path(path_type=Path),
    help="Output file path",
)
@click.option(
    "--standard-name",
    is_flag=True,
    help="Name the output after the BIPM convention (in --output-dir)",
)
@click.option(
    "--output-dir", "-d",
    type=click.Path(path_type=Path),
    help="Output directory for --standard-name (default from settings)",
)
@click.pass_context
def rewrite(
    ctx: click.Context,
    cggtts_file: Path,
    output: Path | None,
    standard_name: bool,
    output_dir: Path | None,
) -> None:
    """Parse a CGGTTS file and write it back.

    Checksums are recomputed and columns realigned.

    Examples:

        pycggtts rewrite input.cggtts -o fixed.cggtts

        pycggtts rewrite input.cggtts --standard-name -d products/
    """
    settings = ctx.obj["settings"]

    if output is None and not standard_name:
        raise click.UsageError("Either --output or --standard-name is required")

    cggtts = _read(cggtts_file)

    if standard_name:
        directory = output_dir or settings.output.output_dir
        output = directory / cggtts.standardized_file_name(
            settings.output.lab, settings.output.receiver_id
        )

    try:
        written = cggtts.write_path(output)
    except CGGTTSError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo(f"Wrote {len(cggtts.tracks)} tracks to {written}")


@cli.command()
@click.option(
    "--time", "-t",
    "time_str",
    type=str,
    help="UTC time (ISO 8601, default: now)",
)
@click.option(
    "--day",
    is_flag=True,
    help="List every window of the MJD containing --time",
)
@click.pass_context
def schedule(ctx: click.Context, time_str: str | None, day: bool) -> None:
    """Show common-view windows.

    Examples:

        # Next window
        pycggtts schedule

        # Whole day table
        pycggtts schedule -t 2021-12-20T00:00:00 --day
    """
    from pycggtts.scheduler import CommonViewPeriod
    from pycggtts.utils.dates import ensure_utc, mjd_day

    settings = ctx.obj["settings"]

    if time_str:
        try:
            t = ensure_utc(datetime.fromisoformat(time_str))
        except ValueError as e:
            raise click.BadParameter(f"Invalid time: {time_str}") from e
    else:
        t = datetime.now(timezone.utc)

    try:
        period = CommonViewPeriod(
            setup_duration=settings.scheduler.setup_duration,
            tracking_duration=settings.scheduler.tracking_duration,
        )
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if day:
        mjd = mjd_day(t)
        windows = period.windows_for_mjd(mjd)
        click.echo(f"MJD {mjd}: {len(windows)} windows")
        for i, w in enumerate(windows, 1):
            click.echo(
                f"  {i:3d} {w.start.strftime('%H:%M:%S')} "
                f"tracking {w.tracking_start.strftime('%H:%M:%S')}-{w.end.strftime('%H:%M:%S')}"
            )
        return

    start, is_first = period.next_window(t)
    window = period.window(start)
    click.echo(f"Next window:    {start.isoformat()}{' (first of day)' if is_first else ''}")
    click.echo(f"Tracking:       {window.tracking_start.isoformat()} - {window.end.isoformat()}")
    click.echo(f"Midpoint:       {window.midpoint.isoformat()}")
    click.echo(
        f"Samples:        {period.required_samples(settings.tracker.sampling_period)} "
        f"every {settings.tracker.sampling_period_s:g} s"
    )
    click.echo(f"Time to window: {period.time_to_next_window(t)}")


@cli.command()
@click.argument("local_file", type=click.Path(exists=True, path_type=Path))
@click.argument("remote_file", type=click.Path(exists=True, path_type=Path))
@click.option(
    "--average",
    is_flag=True,
    help="Average all satellites of each epoch",
)
@click.pass_context
def compare(
    ctx: click.Context,
    local_file: Path,
    remote_file: Path,
    average: bool,
) -> None:
    """Common-view comparison of two stations.

    Prints local REFSYS minus remote REFSYS for every satellite seen by
    both stations at the same time.

    Examples:

        pycggtts compare GZSY8259.568 GZOP0159.568 --average
    """
    from pycggtts.comparison import average_by_epoch, common_view_differences

    local = _read(local_file)
    remote = _read(remote_file)
    differences = common_view_differences(local, remote)

    if not differences:
        click.echo("No common-view tracks")
        sys.exit(1)

    if average:
        click.echo(f"{'Start (UTC)':<20} {'Offset (ns)':>12}")
        for epoch, offset in average_by_epoch(differences):
            click.echo(f"{epoch.strftime('%Y-%m-%d %H:%M:%S'):<20} {offset * 1e9:>12.2f}")
    else:
        click.echo(f"{'Start (UTC)':<20} {'SAT':<4} {'FRC':<3} {'Offset (ns)':>12}")
        for d in differences:
            click.echo(
                f"{d.epoch.strftime('%Y-%m-%d %H:%M:%S'):<20} {str(d.sv):<4} "
                f"{d.frc:<3} {d.difference * 1e9:>12.2f}"
            )

    click.echo(f"\nTotal: {len(differences)} common-view tracks")


def main() -> None:
    """Main entry point."""
    cli(obj={})


if __name__ == "__main__":
    main()
