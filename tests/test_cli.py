from __future__ import annotations
import hashlib
import os
from pathlib import Path
import pstats
import pytest
from click.testing import CliRunner
from sha256all.__main__ import main
from sha256all.report import read_reports
from .helpers import expected_digests


def digest_lines(output: str) -> dict:
    digests = {}
    for line in output.splitlines():
        parts = line.split("  ")
        if len(parts) == 3 and len(parts[0]) == 64:
            digest, worker_id, path = parts
            assert worker_id.isdigit()
            digests[path] = digest
    return digests


@pytest.mark.parametrize("implementation", ["threads", "interleave", "trio"])
def test_cli(implementation: str, tree: Path) -> None:
    r = CliRunner().invoke(
        main, ["-I", implementation, "-T", "3", str(tree)], catch_exceptions=False
    )
    assert r.exit_code == 0, r.output
    assert digest_lines(r.output) == expected_digests(tree)
    assert "workers=3; t=" in r.output


def test_cli_buffered(tree: Path) -> None:
    r = CliRunner().invoke(main, ["--buffer", "-T", "2", str(tree)])
    assert r.exit_code == 0, r.output
    assert digest_lines(r.output) == expected_digests(tree)


def test_cli_failure_line(tree: Path) -> None:
    (tree / "broken").symlink_to(tree / "nowhere")
    r = CliRunner().invoke(main, [str(tree)])
    assert r.exit_code == 0, r.output
    assert f"error opening file {tree / 'broken'}: " in r.output
    assert digest_lines(r.output) == expected_digests(tree)


def test_cli_missing_root(tmp_path: Path) -> None:
    r = CliRunner().invoke(main, [str(tmp_path / "nonexistent")])
    assert r.exit_code == 2


def test_cli_traversal_error(monkeypatch: pytest.MonkeyPatch, tree: Path) -> None:
    def scandir(path):
        raise PermissionError(13, "Permission denied", str(path))

    monkeypatch.setattr("os.scandir", scandir)
    r = CliRunner().invoke(main, [str(tree)])
    assert r.exit_code == 1
    assert f"Error: Error walking {tree}: " in r.output
    assert "workers=" not in r.output


def test_cli_report(tmp_path: Path, tree: Path) -> None:
    report = tmp_path / "report.jsonl"
    for impl in ["threads", "trio"]:
        r = CliRunner().invoke(
            main, ["-I", impl, "-T", "2", "-Q", "0", "-R", str(report), str(tree)]
        )
        assert r.exit_code == 0, r.output
    entries = read_reports(report)
    assert [e.implementation for e in entries] == ["threads", "trio"]
    for e in entries:
        assert e.root == str(tree)
        assert e.workers == 2
        assert e.queue_size == 0
        assert e.elapsed >= 0


def test_cli_cpuprofile(tmp_path: Path, tree: Path) -> None:
    prof = tmp_path / "run.prof"
    r = CliRunner().invoke(main, ["--cpuprofile", str(prof), str(tree)])
    assert r.exit_code == 0, r.output
    assert prof.exists()
    pstats.Stats(str(prof))


def test_cli_non_utf8_filename(tree: Path) -> None:
    try:
        with open(os.path.join(os.fsencode(tree), b"caf\xe9"), "wb") as fp:
            fp.write(b"latin-1")
    except OSError:
        pytest.skip("Filesystem does not allow non-UTF-8 filenames")
    r = CliRunner().invoke(main, ["-T", "2", str(tree)])
    assert r.exit_code == 0, r.output
    digest = hashlib.sha256(b"latin-1").hexdigest()
    assert any(
        line.startswith(digest) and line.endswith(f"{tree}/caf\\xe9")
        for line in r.output.splitlines()
    )
