import shutil
import tomllib

from typer.testing import CliRunner

from vendorkit.cli.app import app

runner = CliRunner()


def test_rng_dump_default_seed():
    result = runner.invoke(app, ["rng", "--count", "4"])
    assert result.exit_code == 0
    assert result.stdout.strip() == "00000000  b7 60 29 ce"


def test_metadata_to_stdout():
    result = runner.invoke(app, [
        "metadata",
        "--libname", "openssl",
        "--version", "3.0.13",
        "-i", "claimer",
        "-i", "sancov",
        "--known", "CVE-1",
    ])
    assert result.exit_code == 0
    doc = tomllib.loads(result.stdout)
    assert doc == {
        "libname": "openssl",
        "version": "3.0.13",
        "instrumentation": ["sancov", "claimer"],
        "known_vulnerabilities": ["CVE-1"],
        "fixed_vulnerabilities": [],
    }


def test_metadata_rejects_unknown_tag():
    result = runner.invoke(app, ["metadata", "--libname", "x", "--version", "1", "-i", "tsan"])
    assert result.exit_code != 0


def test_install_command(vendor_tree):
    source, build, prefix = vendor_tree
    result = runner.invoke(app, ["install", str(source), str(build), str(prefix)])
    assert result.exit_code == 0
    assert (prefix / "lib" / "libcrypto.a").exists()


def test_install_command_fails_nonzero(vendor_tree):
    source, build, prefix = vendor_tree
    shutil.rmtree(build / "ssl")
    result = runner.invoke(app, ["install", str(source), str(build), str(prefix)])
    assert result.exit_code == 1
