"""
core.config — Centralised configuration management.

Loads settings from environment variables and .env files.
Every other module accesses configuration through ``Config``.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

_env_loaded = False


def _load_dotenv() -> None:
    """Load .env from the project root and other standard paths.

    Search order:
        1. ``<project-root>/.env``  (two levels above ``vendorkit/``)
        2. ``$CWD/.env``
        3. ``~/.env``

    Existing environment variables always win over file values.
    """
    global _env_loaded
    if _env_loaded:
        return

    _pkg_root = Path(__file__).resolve().parent.parent          # src/vendorkit
    _project_root = _pkg_root.parent.parent                     # contains pyproject.toml

    search = [
        _project_root / ".env",
        Path.cwd() / ".env",
        Path.home() / ".env",
    ]
    for p in search:
        if p.exists():
            load_dotenv(p, override=False)
    _env_loaded = True


class Config(BaseModel):
    """
    Global runtime configuration.

    Attributes are populated from environment variables / .env.
    Create via ``load_config()`` which pre-loads the env file.
    """

    # ── Toolchain ────────────────────────────────────────────────────
    cc: str = "clang"
    cmake: str = "cmake"
    build_jobs: int = Field(default_factory=lambda: os.cpu_count() or 1)
    compile_timeout: Optional[int] = Field(
        default=None,
        description="Seconds before a configure/build step is killed (None = no limit)",
    )

    # ── Probing ──────────────────────────────────────────────────────
    nm_tool: str = "nm"
    claimer_marker: str = Field(
        default="register_claimer",
        description="Linker symbol whose presence proves the claimer hook was built in",
    )
    probe_timeout: Optional[int] = Field(
        default=None,
        description="Seconds before a symbol scan is abandoned (None = wait forever)",
    )

    # ── Install layout ───────────────────────────────────────────────
    archive_subdirs: List[str] = Field(default_factory=lambda: ["crypto", "ssl"])
    header_dir: str = "include"
    metadata_filename: str = "vendor.toml"

    # ── Entropy ──────────────────────────────────────────────────────
    libcrypto_path: Optional[str] = None

    # ── Debug ────────────────────────────────────────────────────────
    debug: bool = False


def _env_flag(name: str) -> bool:
    return os.environ.get(name, "").lower() in ("1", "true", "yes")


def load_config(**overrides: object) -> Config:
    """
    Load ``Config`` from environment, applying optional overrides.

    Call this once at startup; pass the returned object to subsystems.
    """
    _load_dotenv()
    defaults: dict = {
        "debug": _env_flag("VENDORKIT_DEBUG"),
    }
    for var, key in (
        ("VENDORKIT_NM", "nm_tool"),
        ("VENDORKIT_CLAIMER_MARKER", "claimer_marker"),
        ("VENDORKIT_CC", "cc"),
        ("VENDORKIT_CMAKE", "cmake"),
        ("VENDORKIT_LIBCRYPTO", "libcrypto_path"),
    ):
        val = os.environ.get(var)
        if val:
            defaults[key] = val
    jobs = os.environ.get("VENDORKIT_JOBS")
    if jobs:
        defaults["build_jobs"] = int(jobs)
    defaults.update(overrides)
    return Config(**defaults)  # type: ignore[arg-type]
