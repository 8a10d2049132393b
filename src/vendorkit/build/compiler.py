"""
build.compiler — Configure and build the vendored library with CMake.

The instrumentation profile is turned into ``CMAKE_C_FLAGS``; only
static libraries are produced so the installer finds ``*.a`` archives in
the per-component build subdirectories.
"""

from __future__ import annotations

import os
import subprocess
from pathlib import Path
from typing import List, Optional, Tuple

from ..core.config import Config, load_config
from ..core.log import console, debug_print
from ..core.models import InstrumentationProfile


def configure_command(
    source_dir: Path,
    build_dir: Path,
    profile: InstrumentationProfile,
    cfg: Config,
) -> List[str]:
    cflags = " ".join(profile.compiler_flags())
    return [
        cfg.cmake,
        "-S", str(source_dir),
        "-B", str(build_dir),
        f"-DCMAKE_C_COMPILER={cfg.cc}",
        f"-DCMAKE_C_FLAGS={cflags}",
        "-DBUILD_SHARED_LIBS=OFF",
        "-DCMAKE_BUILD_TYPE=RelWithDebInfo",
    ]


def build_command(build_dir: Path, cfg: Config) -> List[str]:
    return [cfg.cmake, "--build", str(build_dir), "-j", str(cfg.build_jobs)]


def _run_step(cmd: List[str], cfg: Config) -> Tuple[bool, str]:
    debug_print("compiler", " ".join(cmd), enabled=cfg.debug)
    try:
        result = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            timeout=cfg.compile_timeout,
            env={**os.environ, "CC": cfg.cc},
        )
    except subprocess.TimeoutExpired:
        return False, f"{Path(cmd[0]).name} timed out"
    except OSError as exc:
        return False, str(exc)
    if result.returncode != 0:
        return False, result.stderr or result.stdout or f"exit status {result.returncode}"
    return True, ""


def compile_vendor(
    source_dir: Path,
    build_dir: Path,
    profile: InstrumentationProfile,
    *,
    cfg: Optional[Config] = None,
) -> Tuple[bool, str]:
    """
    Configure and build the vendored sources under *profile*.

    Returns ``(success, error_message)``.
    """
    cfg = cfg or load_config()
    source_dir = Path(source_dir)
    build_dir = Path(build_dir)

    if not source_dir.is_dir():
        return False, f"Source directory not found: {source_dir}"
    build_dir.mkdir(parents=True, exist_ok=True)

    console.print(f"  [dim]Configuring {source_dir.name} ({profile.variant_name()})…[/]")
    ok, err = _run_step(configure_command(source_dir, build_dir, profile, cfg), cfg)
    if not ok:
        return False, f"configure failed: {err}"

    console.print("  [dim]Building…[/]")
    ok, err = _run_step(build_command(build_dir, cfg), cfg)
    if not ok:
        return False, f"build failed: {err}"
    return True, ""
