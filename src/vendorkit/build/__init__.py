"""
build — Compile, install, probe and describe a vendored library.

Entry-points:
    run_vendor_build(request, cfg)  Full pipeline: compile → install → probe → emit
    compile_vendor(...)             CMake configure + build under a profile
    install_artifacts(...)          Copy archives and headers into a prefix
    probe_claimer(...)              Scan archives for the claimer marker
    render_metadata(...)            Provenance record as TOML text
"""

from .compiler import compile_vendor
from .installer import install_artifacts, vendor_install_dir
from .metadata import load_metadata, parse_metadata, render_metadata, write_metadata
from .pipeline import run_vendor_build
from .prober import probe_claimer, probe_instrumentation, resolve_instrumentation

__all__ = [
    "compile_vendor",
    "install_artifacts",
    "vendor_install_dir",
    "load_metadata",
    "parse_metadata",
    "render_metadata",
    "write_metadata",
    "run_vendor_build",
    "probe_claimer",
    "probe_instrumentation",
    "resolve_instrumentation",
]
