from pathlib import Path

import pytest

from vendorkit.core.config import Config

MARKER = "register_claimer"


@pytest.fixture
def cfg():
    # ``cat`` stands in for ``nm``: fake archives hold their own symbol listing.
    return Config(nm_tool="cat", build_jobs=2)


def write_archive(path: Path, *symbols: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    lines = [f"0000000000000000 T {s}" for s in symbols]
    path.write_text("\n".join(lines) + "\n")
    return path


@pytest.fixture
def vendor_tree(tmp_path):
    """A source tree with public headers and a build dir with both archive subdirs."""
    source = tmp_path / "src"
    (source / "include" / "openssl").mkdir(parents=True)
    (source / "include" / "openssl" / "ssl.h").write_text("/* ssl */\n")
    (source / "include" / "openssl" / "rand.h").write_text("/* rand */\n")
    (source / "include" / "tls.h").write_text("/* tls */\n")

    build = tmp_path / "build"
    write_archive(build / "crypto" / "libcrypto.a", "RAND_bytes", "EVP_DigestInit")
    write_archive(build / "ssl" / "libssl.a", "SSL_new", "SSL_connect")

    return source, build, tmp_path / "prefix"
