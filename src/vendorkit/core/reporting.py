"""
core.reporting — JSON summary of a vendored build.

Written next to the installed artefacts as ``vendor_build_report.json``::

    {
        "vendorkit_report": true,
        "version": "1.0",
        "generated_at": "2026-…",
        "success": false,
        "failed_stages": ["install"],
        "build": { <VendorBuildResult fields> }
    }
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

from .log import console
from .models import VendorBuildResult

REPORT_FILENAME = "vendor_build_report.json"


def build_report(result: VendorBuildResult) -> Dict[str, Any]:
    return {
        "vendorkit_report": True,
        "version": "1.0",
        "generated_at": datetime.now(timezone.utc).isoformat(),
        "success": result.success,
        "failed_stages": [s.name for s in result.failures()],
        "build": result.model_dump(mode="json"),
    }


def save_build_report(
    result: VendorBuildResult,
    work_dir: Optional[Path] = None,
) -> Path:
    """Write the build summary into *work_dir* (the install prefix by default)."""
    work_dir = Path(work_dir or result.request.prefix)
    work_dir.mkdir(parents=True, exist_ok=True)
    path = work_dir / REPORT_FILENAME
    path.write_text(json.dumps(build_report(result), indent=2))
    console.print(f"  [dim]Report saved: {path}[/]")
    return path
