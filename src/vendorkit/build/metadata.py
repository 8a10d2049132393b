"""
build.metadata — Render, write and read the vendor provenance record.

The record is a TOML document with exactly five keys in a fixed order::

    libname = "openssl"
    version = "3.0.13"
    instrumentation = ["sancov", "claimer"]
    known_vulnerabilities = ["CVE-1"]
    fixed_vulnerabilities = []

Arrays are always present; an empty one renders as ``[]``.  Strings are TOML
basic strings with backslashes, quotes and control characters escaped, so
every rendered record parses.
"""

from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Iterable, Optional

from ..core.config import Config, load_config
from ..core.log import console
from ..core.models import VendorMetadata


_ESCAPES = {
    "\\": "\\\\",
    "\"": "\\\"",
    "\b": "\\b",
    "\t": "\\t",
    "\n": "\\n",
    "\f": "\\f",
    "\r": "\\r",
}


def _quote(value: str) -> str:
    """TOML basic string."""
    out = []
    for ch in value:
        if ch in _ESCAPES:
            out.append(_ESCAPES[ch])
        elif ord(ch) < 0x20 or ord(ch) == 0x7F:
            out.append(f"\\u{ord(ch):04X}")
        else:
            out.append(ch)
    return '"' + "".join(out) + '"'


def _string_array(items: Iterable[str]) -> str:
    return "[" + ", ".join(_quote(item) for item in items) + "]"


def render_metadata(metadata: VendorMetadata) -> str:
    """Serialize *metadata*; identical records always give identical text."""
    lines = [
        f"libname = {_quote(metadata.libname)}",
        f"version = {_quote(metadata.version)}",
        f"instrumentation = {_string_array(metadata.ordered_instrumentation())}",
        f"known_vulnerabilities = {_string_array(metadata.known_vulnerabilities)}",
        f"fixed_vulnerabilities = {_string_array(metadata.fixed_vulnerabilities)}",
    ]
    return "\n".join(lines) + "\n"


def parse_metadata(text: str) -> VendorMetadata:
    return VendorMetadata(**tomllib.loads(text))


def write_metadata(
    prefix: Path,
    metadata: VendorMetadata,
    *,
    cfg: Optional[Config] = None,
) -> Path:
    """Write the record into the install prefix and return its path."""
    cfg = cfg or load_config()
    prefix = Path(prefix)
    prefix.mkdir(parents=True, exist_ok=True)
    path = prefix / cfg.metadata_filename
    path.write_text(render_metadata(metadata))
    console.print(f"  [dim]Vendor metadata written: {path}[/]")
    return path


def load_metadata(path: Path) -> VendorMetadata:
    """Read a record back, as downstream fuzzing infrastructure does."""
    return parse_metadata(Path(path).read_text())
