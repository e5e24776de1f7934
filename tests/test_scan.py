from __future__ import annotations

import os
from pathlib import Path

import pytest

from gitlocalstats.scan import FolderScanner, ScanError, scan


def _mark_repo(path: Path, marker: str = ".git") -> Path:
    (path / marker).mkdir(parents=True, exist_ok=True)
    return path


def test_scan_empty_root_finds_nothing(tmp_path: Path) -> None:
    assert scan(tmp_path) == set()


def test_scan_finds_nested_repos_and_prunes_vendor(tmp_path: Path) -> None:
    root = tmp_path.resolve()
    a = _mark_repo(root / "a")
    b = _mark_repo(root / "a" / "sub" / "b")
    c = _mark_repo(root / "c")
    _mark_repo(root / "vendor" / "dep")
    (root / "plain" / "dir").mkdir(parents=True)

    assert scan(root) == {a, b, c}


def test_scan_prunes_node_modules(tmp_path: Path) -> None:
    _mark_repo(tmp_path / "node_modules" / "dep")
    assert scan(tmp_path) == set()


def test_scan_does_not_descend_into_marker(tmp_path: Path) -> None:
    root = tmp_path.resolve()
    repo = _mark_repo(root / "r")
    # a marker-looking directory inside .git must not produce a second repo
    _mark_repo(repo / ".git" / "modules" / "inner")
    assert scan(root) == {repo}


def test_scan_ignore_set_is_configurable(tmp_path: Path) -> None:
    root = tmp_path.resolve()
    vendored = _mark_repo(root / "vendor" / "dep")
    _mark_repo(root / "skipme" / "x")

    found = scan(root, ignore_dirnames={"skipme"})
    assert found == {vendored}


def test_scan_detects_jj_and_dedupes_dual_markers(tmp_path: Path) -> None:
    root = tmp_path.resolve()
    jj = _mark_repo(root / "jj-repo", ".jj")
    dual = _mark_repo(root / "dual")
    _mark_repo(dual, ".jj")

    assert scan(root) == {jj, dual}
    assert scan(root, markers=[".git"]) == {dual}


def test_scan_ignores_marker_files(tmp_path: Path) -> None:
    wt = tmp_path / "worktree"
    wt.mkdir()
    (wt / ".git").write_text("gitdir: /elsewhere\n", encoding="utf-8")
    assert scan(tmp_path) == set()


def test_scan_survives_symlink_cycles(tmp_path: Path) -> None:
    root = tmp_path.resolve()
    repo = _mark_repo(root / "r")
    (root / "r" / "loop").symlink_to(root, target_is_directory=True)

    assert scan(root) == {repo}


def test_scan_many_siblings_with_single_worker(tmp_path: Path) -> None:
    root = tmp_path.resolve()
    expected = {_mark_repo(root / f"group{i}" / f"repo{j}") for i in range(5) for j in range(4)}
    assert FolderScanner(jobs=1).scan(root) == expected


def test_scan_missing_root_is_fatal(tmp_path: Path) -> None:
    with pytest.raises(ScanError):
        scan(tmp_path / "missing")


@pytest.mark.skipif(not hasattr(os, "geteuid") or os.geteuid() == 0, reason="root can read any directory")
def test_scan_unreadable_directory_is_fatal(tmp_path: Path) -> None:
    _mark_repo(tmp_path / "ok")
    locked = tmp_path / "locked"
    locked.mkdir()
    locked.chmod(0)
    try:
        with pytest.raises(ScanError, match="locked"):
            scan(tmp_path)
    finally:
        locked.chmod(0o755)
