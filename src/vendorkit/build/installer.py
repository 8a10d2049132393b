"""
build.installer — Copy built archives and public headers into an install prefix.

Layout produced under the prefix::

    <prefix>/lib/      every ``*.a`` from the configured build subdirectories
    <prefix>/bin/      created empty
    <prefix>/include/  the source tree's public header directory, recursively

Any missing artefact aborts the whole step with ``InstallError``.  There
is no rollback: files copied before the failure stay on disk.
"""

from __future__ import annotations

import shutil
from pathlib import Path
from typing import List, Optional, Sequence

from ..core.config import Config, load_config
from ..core.errors import InstallError
from ..core.log import console
from ..core.models import InstrumentationProfile, InstallResult


def vendor_install_dir(
    root: Path,
    libname: str,
    version: str,
    profile: InstrumentationProfile,
) -> Path:
    """Versioned prefix isolating one library version and instrumentation variant."""
    return Path(root) / f"{libname}-{version}-{profile.variant_name()}"


def _collect_archives(build_dir: Path, subdirs: Sequence[str]) -> List[Path]:
    archives: List[Path] = []
    for sub in subdirs:
        d = build_dir / sub
        if not d.is_dir():
            raise InstallError(f"Build output directory not found: {d}")
        found = sorted(d.glob("*.a"))
        if not found:
            raise InstallError(f"No static archives in {d}")
        archives.extend(found)
    return archives


def install_artifacts(
    source_dir: Path,
    build_dir: Path,
    prefix: Path,
    *,
    archive_subdirs: Optional[Sequence[str]] = None,
    header_dir: Optional[str] = None,
    cfg: Optional[Config] = None,
) -> InstallResult:
    """
    Install static archives and headers of a finished build.

    Archives are looked up in ``<build_dir>/<subdir>`` for each configured
    subdirectory (``crypto`` and ``ssl`` by default); each one must hold at
    least one ``*.a``.  Headers come from ``<source_dir>/<header_dir>``.

    Raises ``InstallError`` on the first missing artefact or failed copy.
    """
    cfg = cfg or load_config()
    source_dir = Path(source_dir)
    build_dir = Path(build_dir)
    prefix = Path(prefix)
    subdirs = list(archive_subdirs or cfg.archive_subdirs)
    header_name = header_dir or cfg.header_dir

    lib_dir = prefix / "lib"
    bin_dir = prefix / "bin"
    try:
        lib_dir.mkdir(parents=True, exist_ok=True)
        bin_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise InstallError(f"Cannot create install layout under {prefix}: {exc}") from exc

    installed: List[Path] = []
    for archive in _collect_archives(build_dir, subdirs):
        dest = lib_dir / archive.name
        try:
            shutil.copy2(archive, dest)
        except OSError as exc:
            raise InstallError(f"Failed to copy {archive}: {exc}") from exc
        installed.append(dest)
    console.print(f"  [dim]Installed {len(installed)} archive(s) into {lib_dir}[/]")

    headers = source_dir / header_name
    if not headers.is_dir():
        raise InstallError(f"Header tree not found: {headers}")
    include_dir = prefix / headers.name
    try:
        shutil.copytree(headers, include_dir, dirs_exist_ok=True)
    except OSError as exc:
        raise InstallError(f"Failed to copy header tree {headers}: {exc}") from exc

    return InstallResult(
        prefix=prefix,
        lib_dir=lib_dir,
        bin_dir=bin_dir,
        include_dir=include_dir,
        archives=installed,
    )
