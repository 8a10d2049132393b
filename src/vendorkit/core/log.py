"""
core.log — Console output for vendorkit.

Provides a ``console`` (rich.Console) and ``debug_print`` helper
shared across all modules.
"""

from __future__ import annotations

from rich.console import Console

console = Console(stderr=True)


def debug_print(module: str, msg: str, *, enabled: bool = True) -> None:
    """Print a bracketed debug message to stderr."""
    if enabled:
        console.print(
            f"[DEBUG:{module}] {msg}", style="dim", markup=False, highlight=False,
        )
