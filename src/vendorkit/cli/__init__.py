"""
cli — Typer CLI entry-point for vendorkit.

Commands:
    install     Copy archives and headers into an install prefix
    probe       Detect the instrumentation a build actually carries
    metadata    Emit the vendor provenance record
    build       Full compile → install → probe → emit pipeline
    rng         Dump the deterministic byte stream for a seed
"""

from .app import app, main

__all__ = ["app", "main"]
