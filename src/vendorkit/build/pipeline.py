"""
build.pipeline — Sequential vendored-build pipeline.

Runs fixed stages in order for a single vendored dependency:

    compile → install → probe → emit

Each stage yields a ``StageResult``.  The first failure marks every later
stage ``skipped``; failures are collected in the result rather than
raised.  Variants built in parallel must each get their own build and
install directories; that isolation is the caller's job.
"""

from __future__ import annotations

import time
from typing import Callable, Dict, Optional

from ..core.config import Config, load_config
from ..core.log import console
from ..core.models import (
    BuildRequest,
    ProbeResult,
    StageResult,
    StageStatus,
    VendorBuildResult,
    VendorMetadata,
)
from ..core.reporting import save_build_report
from .compiler import compile_vendor
from .installer import install_artifacts
from .metadata import write_metadata
from .prober import probe_claimer, resolve_instrumentation

STAGES = ("compile", "install", "probe", "emit")


def _timed(name: str, fn: Callable[[], str]) -> StageResult:
    """Run *fn*; any exception becomes a ``failed`` result carrying its message."""
    start = time.monotonic()
    try:
        detail = fn()
        status = StageStatus.OK
    except Exception as exc:
        detail = str(exc)
        status = StageStatus.FAILED
    return StageResult(
        name=name,
        status=status,
        detail=detail,
        duration_ms=(time.monotonic() - start) * 1000,
    )


def run_vendor_build(
    request: BuildRequest,
    *,
    cfg: Optional[Config] = None,
) -> VendorBuildResult:
    """
    Build, install, probe and describe one vendored library.

    Returns a ``VendorBuildResult``; check ``.success`` / ``.failures()``.
    """
    cfg = cfg or load_config()
    result = VendorBuildResult(request=request)
    probes: Dict[str, ProbeResult] = {}

    def _compile() -> str:
        if request.skip_compile:
            return "skipped by request; using existing build output"
        ok, err = compile_vendor(request.source_dir, request.build_dir, request.profile, cfg=cfg)
        if not ok:
            raise RuntimeError(err)
        return f"flags: {' '.join(request.profile.compiler_flags()) or '(none)'}"

    def _install() -> str:
        installed = install_artifacts(
            request.source_dir, request.build_dir, request.prefix, cfg=cfg,
        )
        return f"{len(installed.archives)} archive(s) → {installed.lib_dir}"

    def _probe() -> str:
        probe = probes["claimer"] = probe_claimer(request.prefix / "lib", cfg=cfg)
        if probe.claimer_present:
            return f"{probe.marker} found in {len(probe.archives_matched)} archive(s)"
        return f"{probe.marker} not found"

    def _emit() -> str:
        metadata = VendorMetadata(
            libname=request.libname,
            version=request.version,
            instrumentation=resolve_instrumentation(request.profile, probes["claimer"]),
            known_vulnerabilities=request.known_vulnerabilities,
            fixed_vulnerabilities=request.fixed_vulnerabilities,
        )
        result.metadata = metadata
        result.metadata_path = write_metadata(request.prefix, metadata, cfg=cfg)
        return str(result.metadata_path)

    steps = dict(zip(STAGES, (_compile, _install, _probe, _emit)))
    failed = False
    for name in STAGES:
        if failed:
            result.stages.append(StageResult(name=name, status=StageStatus.SKIPPED))
            continue
        console.print(f"[bold]Stage: {name}[/]")
        stage = _timed(name, steps[name])
        result.stages.append(stage)
        if not stage.ok:
            failed = True
            console.print(f"[red]{name} failed: {stage.detail}[/]")

    try:
        save_build_report(result)
    except OSError as exc:
        console.print(f"[yellow]Could not save build report: {exc}[/]")
    return result
