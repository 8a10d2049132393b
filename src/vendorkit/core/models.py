"""
core.models — Canonical data models for the vendoring pipeline.

Every stage speaks the same language through these Pydantic models:
the build configuration going in, the stage results coming out, and
the provenance record written next to the installed artefacts.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import FrozenSet, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


# ── Instrumentation ───────────────────────────────────────────────────


class InstrumentationTag(str, Enum):
    """Instrumentation kinds a vendored build may carry.

    Declaration order is the canonical rendering order.
    """

    SANCOV = "sancov"
    ASAN = "asan"
    GCOV = "gcov"
    LLVM_COV = "llvm_cov"
    CLAIMER = "claimer"

    @classmethod
    def ordered(cls, tags) -> List[InstrumentationTag]:
        """Return *tags* sorted in declaration order."""
        wanted = {cls(t) for t in tags}
        return [t for t in cls if t in wanted]


_COMPILER_FLAGS = {
    InstrumentationTag.SANCOV: ["-fsanitize-coverage=trace-pc-guard"],
    InstrumentationTag.ASAN: ["-fsanitize=address", "-fno-omit-frame-pointer"],
    InstrumentationTag.GCOV: ["-fprofile-arcs", "-ftest-coverage"],
    InstrumentationTag.LLVM_COV: ["-fprofile-instr-generate", "-fcoverage-mapping"],
}


class InstrumentationProfile(BaseModel):
    """Requested instrumentation toggles for one build invocation."""

    model_config = ConfigDict(frozen=True)

    sancov: bool = False
    asan: bool = False
    gcov: bool = False
    llvm_cov: bool = False
    claimer: bool = False

    @classmethod
    def from_tags(cls, tags) -> InstrumentationProfile:
        return cls(**{InstrumentationTag(t).value: True for t in tags})

    def requested_tags(self) -> FrozenSet[InstrumentationTag]:
        return frozenset(t for t in InstrumentationTag if getattr(self, t.value))

    def compiler_flags(self) -> List[str]:
        """C compiler flags for the compile-time instrumentation kinds.

        ``claimer`` is a source-level hook and adds no flags; whether a
        build really carries it is decided by probing the archives.
        """
        flags: List[str] = []
        for tag in InstrumentationTag.ordered(self.requested_tags()):
            flags.extend(_COMPILER_FLAGS.get(tag, []))
        return flags

    def variant_name(self) -> str:
        tags = InstrumentationTag.ordered(self.requested_tags())
        return "-".join(t.value for t in tags) if tags else "plain"


# ── Provenance ────────────────────────────────────────────────────────


class VendorMetadata(BaseModel):
    """Provenance record tying installed artefacts to a version and instrumentation set.

    Immutable: a changed build produces a fresh record.  The two
    vulnerability lists are independent of each other.
    """

    model_config = ConfigDict(frozen=True)

    libname: str
    version: str
    instrumentation: FrozenSet[InstrumentationTag] = frozenset()
    known_vulnerabilities: Tuple[str, ...] = ()
    fixed_vulnerabilities: Tuple[str, ...] = ()

    def ordered_instrumentation(self) -> List[str]:
        return [t.value for t in InstrumentationTag.ordered(self.instrumentation)]


# ── Stage results ─────────────────────────────────────────────────────


class ProbeResult(BaseModel):
    """Outcome of scanning installed archives for the claimer marker."""

    marker: str
    archives_scanned: List[str] = Field(default_factory=list)
    archives_matched: List[str] = Field(default_factory=list)
    tool_available: bool = True
    errors: List[str] = Field(default_factory=list)

    @property
    def claimer_present(self) -> bool:
        return bool(self.archives_matched)


class InstallResult(BaseModel):
    """Where the installer put things."""

    prefix: Path
    lib_dir: Path
    bin_dir: Path
    include_dir: Path
    archives: List[Path] = Field(default_factory=list)


class StageStatus(str, Enum):
    OK = "ok"
    FAILED = "failed"
    SKIPPED = "skipped"


class StageResult(BaseModel):
    """Result of one pipeline stage (compile / install / probe / emit)."""

    name: str
    status: StageStatus = StageStatus.OK
    detail: str = ""
    duration_ms: float = 0.0

    @property
    def ok(self) -> bool:
        return self.status == StageStatus.OK


class BuildRequest(BaseModel):
    """Fully resolved inputs for one vendored build invocation."""

    libname: str
    version: str
    source_dir: Path
    build_dir: Path
    prefix: Path
    profile: InstrumentationProfile = Field(default_factory=InstrumentationProfile)
    known_vulnerabilities: List[str] = Field(default_factory=list)
    fixed_vulnerabilities: List[str] = Field(default_factory=list)
    skip_compile: bool = False


class VendorBuildResult(BaseModel):
    """Final output of an orchestrated vendored build."""

    request: BuildRequest
    stages: List[StageResult] = Field(default_factory=list)
    metadata: Optional[VendorMetadata] = None
    metadata_path: Optional[Path] = None

    @property
    def success(self) -> bool:
        return bool(self.stages) and all(s.ok for s in self.stages)

    def failures(self) -> List[StageResult]:
        return [s for s in self.stages if s.status == StageStatus.FAILED]
