"""
build.prober — Detect instrumentation that build flags cannot tell us about.

The claimer hook is compiled in by patching the vendored sources, so the
only reliable evidence is its marker symbol in the installed archives.
Every ``*.a`` in the library directory is listed with ``nm``; the marker
counts as present if it occurs as a substring anywhere in that output.

A missing or failing ``nm`` is *not* an error: it simply means the marker
was not seen.  The probe is a detection, not a toggle; requesting
``claimer`` neither forces nor suppresses it.
"""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import FrozenSet, Optional

from ..core.config import Config, load_config
from ..core.log import debug_print
from ..core.models import InstrumentationProfile, InstrumentationTag, ProbeResult


def _list_symbols(nm_tool: str, archive: Path, timeout: Optional[int]) -> bytes:
    """Return raw ``nm`` output for *archive* as bytes; raises on a nonzero exit.

    Symbol names are not guaranteed to be valid UTF-8, so nothing is decoded.
    """
    out = subprocess.run(
        [nm_tool, str(archive)], capture_output=True, timeout=timeout, check=True,
    )
    return out.stdout


def probe_claimer(lib_dir: Path, *, cfg: Optional[Config] = None) -> ProbeResult:
    """Scan every archive under *lib_dir* for the claimer marker symbol."""
    cfg = cfg or load_config()
    result = ProbeResult(marker=cfg.claimer_marker)
    marker = cfg.claimer_marker.encode()

    for archive in sorted(Path(lib_dir).glob("*.a")):
        result.archives_scanned.append(str(archive))
        try:
            listing = _list_symbols(cfg.nm_tool, archive, cfg.probe_timeout)
        except FileNotFoundError:
            result.tool_available = False
            result.errors.append(f"{cfg.nm_tool} not found")
            debug_print("prober", f"{cfg.nm_tool} not found; marker treated as absent", enabled=cfg.debug)
            break
        except (OSError, subprocess.SubprocessError) as exc:
            result.errors.append(f"{archive.name}: {exc}")
            debug_print("prober", f"scan of {archive} failed: {exc}", enabled=cfg.debug)
            continue
        if marker in listing:
            result.archives_matched.append(str(archive))

    return result


def resolve_instrumentation(
    profile: InstrumentationProfile,
    probe: ProbeResult,
) -> FrozenSet[InstrumentationTag]:
    """Final instrumentation set: requested tags, plus ``claimer`` iff its marker was found.

    A requested ``claimer`` without a matching symbol is dropped.
    """
    tags = set(profile.requested_tags())
    tags.discard(InstrumentationTag.CLAIMER)
    if probe.claimer_present:
        tags.add(InstrumentationTag.CLAIMER)
    return frozenset(tags)


def probe_instrumentation(
    lib_dir: Path,
    profile: InstrumentationProfile,
    *,
    cfg: Optional[Config] = None,
) -> FrozenSet[InstrumentationTag]:
    return resolve_instrumentation(profile, probe_claimer(lib_dir, cfg=cfg))
