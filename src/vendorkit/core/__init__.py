"""
core — Shared models, configuration, console and report helpers.

This package is the foundation layer with zero intra-project dependencies
(nothing in ``core`` imports from ``build``, ``entropy`` or ``cli``).
"""

from .config import Config, load_config
from .errors import EntropyOverrideError, InstallError, VendorkitError
from .log import console, debug_print
from .models import (
    BuildRequest,
    InstallResult,
    InstrumentationProfile,
    InstrumentationTag,
    ProbeResult,
    StageResult,
    StageStatus,
    VendorBuildResult,
    VendorMetadata,
)
from .reporting import build_report, save_build_report

__all__ = [
    "Config",
    "load_config",
    "VendorkitError",
    "InstallError",
    "EntropyOverrideError",
    "console",
    "debug_print",
    "BuildRequest",
    "InstallResult",
    "InstrumentationProfile",
    "InstrumentationTag",
    "ProbeResult",
    "StageResult",
    "StageStatus",
    "VendorBuildResult",
    "VendorMetadata",
    "build_report",
    "save_build_report",
]
