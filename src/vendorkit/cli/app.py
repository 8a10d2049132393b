"""
cli.app — Main Typer application.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.table import Table

from ..core.config import load_config
from ..core.errors import InstallError
from ..core.models import (
    BuildRequest,
    InstrumentationProfile,
    InstrumentationTag,
    StageStatus,
    VendorMetadata,
)

app = typer.Typer(
    name="vendorkit",
    help="Instrumented vendored-library builds and deterministic entropy.",
    no_args_is_help=True,
)
console = Console()


def _build_config(**cli_overrides: object):
    """Build a ``Config`` from .env + CLI overrides, dropping None values."""
    return load_config(**{k: v for k, v in cli_overrides.items() if v is not None})


def _parse_tags(values: Optional[List[str]]) -> List[InstrumentationTag]:
    tags = []
    for v in values or []:
        try:
            tags.append(InstrumentationTag(v))
        except ValueError:
            allowed = ", ".join(t.value for t in InstrumentationTag)
            raise typer.BadParameter(f"unknown instrumentation {v!r} (choose from {allowed})")
    return tags


# ═════════════════════════════════════════════════════════════════════
#  Stages
# ═════════════════════════════════════════════════════════════════════


@app.command()
def install(
    source_dir: Path = typer.Argument(help="Vendored source tree (holds the public headers)"),
    build_dir: Path = typer.Argument(help="Build output directory"),
    prefix: Path = typer.Argument(help="Install prefix"),
    debug: bool = typer.Option(False, "--debug", help="Enable debug output"),
) -> None:
    """Copy static archives and headers into PREFIX."""
    from ..build.installer import install_artifacts

    cfg = _build_config(debug=debug or None)
    try:
        result = install_artifacts(source_dir, build_dir, prefix, cfg=cfg)
    except InstallError as exc:
        console.print(f"[red]Install failed: {exc}[/]")
        raise typer.Exit(code=1)
    console.print(f"[green]Installed {len(result.archives)} archive(s) into {result.prefix}[/]")


@app.command()
def probe(
    lib_dir: Path = typer.Argument(help="Directory holding the installed *.a archives"),
    request: Optional[List[str]] = typer.Option(None, "--request", "-r", help="Requested instrumentation tag (repeatable)"),
    nm: Optional[str] = typer.Option(None, "--nm", help="Symbol listing tool"),
    marker: Optional[str] = typer.Option(None, "--marker", help="Claimer marker symbol"),
    debug: bool = typer.Option(False, "--debug", help="Enable debug output"),
) -> None:
    """Report the instrumentation a build actually carries."""
    from ..build.prober import probe_claimer, resolve_instrumentation

    cfg = _build_config(nm_tool=nm, claimer_marker=marker, debug=debug or None)
    profile = InstrumentationProfile.from_tags(_parse_tags(request))
    result = probe_claimer(lib_dir, cfg=cfg)
    final = resolve_instrumentation(profile, result)

    console.print(f"Archives scanned: {len(result.archives_scanned)}")
    for path in result.archives_matched:
        console.print(f"  [green]{result.marker}[/] in {path}")
    if not result.tool_available:
        console.print(f"  [yellow]{cfg.nm_tool} unavailable; claimer treated as absent[/]")
    names = [t.value for t in InstrumentationTag.ordered(final)]
    console.print(f"Instrumentation: {', '.join(names) or '(none)'}")


@app.command()
def metadata(
    prefix: Optional[Path] = typer.Argument(None, help="Write vendor.toml here (prints to stdout when omitted)"),
    libname: str = typer.Option(..., "--libname", help="Library name"),
    version: str = typer.Option(..., "--version", help="Library version"),
    instrumentation: Optional[List[str]] = typer.Option(None, "--instrumentation", "-i", help="Instrumentation tag (repeatable)"),
    known: Optional[List[str]] = typer.Option(None, "--known", help="Known vulnerability id (repeatable)"),
    fixed: Optional[List[str]] = typer.Option(None, "--fixed", help="Fixed vulnerability id (repeatable)"),
) -> None:
    """Emit the vendor provenance record."""
    from ..build.metadata import render_metadata, write_metadata

    record = VendorMetadata(
        libname=libname,
        version=version,
        instrumentation=frozenset(_parse_tags(instrumentation)),
        known_vulnerabilities=tuple(known or ()),
        fixed_vulnerabilities=tuple(fixed or ()),
    )
    if prefix is None:
        typer.echo(render_metadata(record), nl=False)
    else:
        write_metadata(prefix, record, cfg=_build_config())


@app.command()
def build(
    source_dir: Path = typer.Argument(help="Vendored source tree"),
    build_dir: Path = typer.Argument(help="Build output directory"),
    prefix: Path = typer.Argument(help="Install prefix"),
    libname: str = typer.Option(..., "--libname", help="Library name"),
    version: str = typer.Option(..., "--version", help="Library version"),
    instrumentation: Optional[List[str]] = typer.Option(None, "--instrumentation", "-i", help="Instrumentation tag (repeatable)"),
    known: Optional[List[str]] = typer.Option(None, "--known", help="Known vulnerability id (repeatable)"),
    fixed: Optional[List[str]] = typer.Option(None, "--fixed", help="Fixed vulnerability id (repeatable)"),
    skip_compile: bool = typer.Option(False, "--skip-compile", help="Reuse existing build output"),
    cc: Optional[str] = typer.Option(None, "--cc", help="C compiler"),
    jobs: Optional[int] = typer.Option(None, "--jobs", "-j", help="Parallel build jobs"),
    debug: bool = typer.Option(False, "--debug", help="Enable debug output"),
) -> None:
    """Compile, install, probe and describe one vendored library."""
    from ..build.pipeline import run_vendor_build

    cfg = _build_config(cc=cc, build_jobs=jobs, debug=debug or None)
    request = BuildRequest(
        libname=libname,
        version=version,
        source_dir=source_dir,
        build_dir=build_dir,
        prefix=prefix,
        profile=InstrumentationProfile.from_tags(_parse_tags(instrumentation)),
        known_vulnerabilities=list(known or []),
        fixed_vulnerabilities=list(fixed or []),
        skip_compile=skip_compile,
    )
    result = run_vendor_build(request, cfg=cfg)

    table = Table(show_header=True, header_style="bold")
    table.add_column("Stage", min_width=8)
    table.add_column("Status", width=8)
    table.add_column("Duration", justify="right", width=10)
    table.add_column("Detail", max_width=60)
    colours = {StageStatus.OK: "green", StageStatus.FAILED: "red", StageStatus.SKIPPED: "dim"}
    for s in result.stages:
        table.add_row(
            s.name,
            f"[{colours[s.status]}]{s.status.value}[/]",
            f"{s.duration_ms:.0f}ms",
            s.detail,
        )
    console.print(table)
    if not result.success:
        raise typer.Exit(code=1)


# ═════════════════════════════════════════════════════════════════════
#  Entropy
# ═════════════════════════════════════════════════════════════════════


@app.command()
def rng(
    seed: int = typer.Option(42, "--seed", "-s", help="64-bit seed"),
    count: int = typer.Option(32, "--count", "-n", help="Bytes to draw"),
) -> None:
    """Hex-dump the deterministic byte stream for SEED (replay debugging)."""
    from ..entropy.deterministic import SEED_LENGTH, DeterministicRng

    gen = DeterministicRng()
    gen.seed((seed & 0xFFFFFFFFFFFFFFFF).to_bytes(SEED_LENGTH, "little"))
    data = gen.generate(max(count, 0))
    for offset in range(0, len(data), 16):
        typer.echo(f"{offset:08x}  {data[offset:offset + 16].hex(' ')}")


def main() -> None:
    """Entry-point registered in pyproject.toml."""
    app()
