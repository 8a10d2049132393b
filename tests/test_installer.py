import shutil

import pytest

from conftest import write_archive
from vendorkit.build.installer import install_artifacts, vendor_install_dir
from vendorkit.core.errors import InstallError
from vendorkit.core.models import InstrumentationProfile


def test_install_layout(vendor_tree, cfg):
    source, build, prefix = vendor_tree
    write_archive(build / "crypto" / "libextra.a", "extra")

    result = install_artifacts(source, build, prefix, cfg=cfg)

    assert (prefix / "bin").is_dir()
    assert sorted(p.name for p in (prefix / "lib").iterdir()) == ["libcrypto.a", "libextra.a", "libssl.a"]
    assert sorted(p.name for p in result.archives) == ["libcrypto.a", "libextra.a", "libssl.a"]
    assert (prefix / "lib" / "libssl.a").read_text() == (build / "ssl" / "libssl.a").read_text()
    assert result.include_dir == prefix / "include"
    assert (prefix / "include" / "openssl" / "rand.h").read_text() == "/* rand */\n"
    assert (prefix / "include" / "tls.h").exists()


def test_reinstall_over_existing_prefix(vendor_tree, cfg):
    source, build, prefix = vendor_tree
    install_artifacts(source, build, prefix, cfg=cfg)
    install_artifacts(source, build, prefix, cfg=cfg)
    assert len(list((prefix / "lib").glob("*.a"))) == 2


def test_missing_subdirectory_fails(vendor_tree, cfg):
    source, build, prefix = vendor_tree
    shutil.rmtree(build / "ssl")
    with pytest.raises(InstallError, match="ssl"):
        install_artifacts(source, build, prefix, cfg=cfg)


def test_subdirectory_without_archives_fails(vendor_tree, cfg):
    source, build, prefix = vendor_tree
    (build / "ssl" / "libssl.a").unlink()
    (build / "ssl" / "libssl.so").write_text("")
    with pytest.raises(InstallError, match="No static archives"):
        install_artifacts(source, build, prefix, cfg=cfg)


def test_missing_header_tree_fails_after_partial_copy(vendor_tree, cfg):
    source, build, prefix = vendor_tree
    shutil.rmtree(source / "include")
    with pytest.raises(InstallError, match="Header tree"):
        install_artifacts(source, build, prefix, cfg=cfg)
    # No rollback: archives copied before the failure remain.
    assert (prefix / "lib" / "libcrypto.a").exists()


def test_custom_subdirectories(tmp_path, cfg):
    source = tmp_path / "src"
    (source / "headers").mkdir(parents=True)
    write_archive(tmp_path / "build" / "src" / ".libs" / "libwolfssl.a", "wolfSSL_new")
    result = install_artifacts(
        source, tmp_path / "build", tmp_path / "out",
        archive_subdirs=["src/.libs"], header_dir="headers", cfg=cfg,
    )
    assert [p.name for p in result.archives] == ["libwolfssl.a"]
    assert (tmp_path / "out" / "headers").is_dir()


def test_vendor_install_dir(tmp_path):
    assert vendor_install_dir(tmp_path, "openssl", "1.1.1j", InstrumentationProfile()) == tmp_path / "openssl-1.1.1j-plain"
    profile = InstrumentationProfile(asan=True, sancov=True)
    assert vendor_install_dir(tmp_path, "openssl", "1.1.1j", profile).name == "openssl-1.1.1j-sancov-asan"
