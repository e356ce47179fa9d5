"""Tests for typesift.module_scanner."""

from __future__ import annotations

from pathlib import Path

import pytest

from typesift.module_scanner import ModuleScanner


def test_scan_lists_dll_files_sorted(tmp_path: Path) -> None:
    for name in ("UnityEngine.dll", "Facepunch.Core.DLL", "Assembly-CSharp.dll", "readme.txt"):
        (tmp_path / name).write_bytes(b"MZ")
    (tmp_path / "nested.dll").mkdir()

    modules = ModuleScanner().scan(tmp_path)

    assert [module.base_name for module in modules] == [
        "Assembly-CSharp",
        "Facepunch.Core",
        "UnityEngine",
    ]
    assert modules[0].path == (tmp_path / "Assembly-CSharp.dll").resolve()


def test_scan_honours_custom_patterns(tmp_path: Path) -> None:
    (tmp_path / "Tool.exe").write_bytes(b"MZ")
    (tmp_path / "Lib.dll").write_bytes(b"MZ")

    modules = ModuleScanner(["*.exe"]).scan(tmp_path)

    assert [module.base_name for module in modules] == ["Tool"]


def test_scan_rejects_missing_directory(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        ModuleScanner().scan(tmp_path / "missing")


def test_scan_rejects_file_path(tmp_path: Path) -> None:
    target = tmp_path / "Lib.dll"
    target.write_bytes(b"MZ")
    with pytest.raises(NotADirectoryError):
        ModuleScanner().scan(target)
