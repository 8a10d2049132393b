"""
vendorkit — Instrumented vendored-library builds and deterministic entropy.

Architecture:
    core/       Configuration, console logging, models, JSON reports
    build/      Compile, install, probe and metadata stages + orchestrator
    entropy/    Seeded deterministic RNG and its host-library plugin
    cli/        Typer CLI entry-points
"""

__version__ = "0.1.0"
