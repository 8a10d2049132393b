import json
import shutil

from conftest import MARKER, write_archive
from vendorkit.build import pipeline
from vendorkit.build.metadata import load_metadata
from vendorkit.build.pipeline import run_vendor_build
from vendorkit.core.models import (
    BuildRequest,
    InstrumentationProfile,
    InstrumentationTag as T,
    StageStatus,
)


def _request(source, build, prefix, **kwargs):
    fields = dict(
        libname="openssl",
        version="1.1.1j",
        source_dir=source,
        build_dir=build,
        prefix=prefix,
        profile=InstrumentationProfile(sancov=True),
        known_vulnerabilities=["CVE-2021-3449"],
        skip_compile=True,
    )
    fields.update(kwargs)
    return BuildRequest(**fields)


def test_full_run_with_claimer(vendor_tree, cfg):
    source, build, prefix = vendor_tree
    write_archive(build / "ssl" / "libssl.a", "SSL_new", MARKER)

    result = run_vendor_build(_request(source, build, prefix), cfg=cfg)

    assert result.success
    assert [s.name for s in result.stages] == ["compile", "install", "probe", "emit"]
    assert result.metadata.instrumentation == {T.SANCOV, T.CLAIMER}
    assert result.metadata_path == prefix / "vendor.toml"
    assert load_metadata(result.metadata_path) == result.metadata

    report = json.loads((prefix / "vendor_build_report.json").read_text())
    assert report["vendorkit_report"] is True
    assert report["success"] is True
    assert report["failed_stages"] == []
    assert report["build"]["request"]["libname"] == "openssl"


def test_run_without_marker(vendor_tree, cfg):
    source, build, prefix = vendor_tree
    request = _request(source, build, prefix, profile=InstrumentationProfile(asan=True, claimer=True))
    result = run_vendor_build(request, cfg=cfg)
    assert result.success
    assert result.metadata.instrumentation == {T.ASAN}
    assert result.metadata.fixed_vulnerabilities == ()


def test_install_failure_skips_later_stages(vendor_tree, cfg):
    source, build, prefix = vendor_tree
    shutil.rmtree(build / "crypto")

    result = run_vendor_build(_request(source, build, prefix), cfg=cfg)

    assert not result.success
    assert [s.status for s in result.stages] == [
        StageStatus.OK,
        StageStatus.FAILED,
        StageStatus.SKIPPED,
        StageStatus.SKIPPED,
    ]
    assert [s.name for s in result.failures()] == ["install"]
    assert result.metadata is None
    assert not (prefix / "vendor.toml").exists()


def test_compile_stage_runs_compiler(vendor_tree, cfg, monkeypatch):
    source, build, prefix = vendor_tree
    calls = []

    def fake_compile(src, bld, profile, *, cfg=None):
        calls.append((src, bld, profile))
        return False, "configure failed: boom"

    monkeypatch.setattr(pipeline, "compile_vendor", fake_compile)
    result = run_vendor_build(_request(source, build, prefix, skip_compile=False), cfg=cfg)

    assert calls == [(source, build, InstrumentationProfile(sancov=True))]
    assert result.stages[0].status == StageStatus.FAILED
    assert result.stages[0].detail == "configure failed: boom"
    assert all(s.status == StageStatus.SKIPPED for s in result.stages[1:])


def test_non_utf8_symbols_do_not_abort_build(vendor_tree, cfg):
    source, build, prefix = vendor_tree
    (build / "ssl" / "libssl.a").write_bytes(b"0 T \xff\xfeweird\n0 T " + MARKER.encode() + b"\n")

    result = run_vendor_build(_request(source, build, prefix), cfg=cfg)

    assert result.success
    assert result.metadata.instrumentation == {T.SANCOV, T.CLAIMER}
    assert (prefix / "vendor.toml").exists()
