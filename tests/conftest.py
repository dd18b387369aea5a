"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

import hashlib
from collections.abc import Callable, Iterable
from pathlib import Path

import pytest


def fingerprint_of(content: bytes | str) -> str:
    """Truncated SHA-1 of content, as recorded in manifests."""
    data = content.encode() if isinstance(content, str) else content
    return hashlib.sha1(data).hexdigest()[:10]


@pytest.fixture(autouse=True)
def isolated_config_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point XDG_CONFIG_HOME at an empty directory so user settings never leak in."""
    config_home = tmp_path / "xdg-config"
    monkeypatch.setenv("XDG_CONFIG_HOME", str(config_home))
    return config_home


@pytest.fixture
def fingerprint() -> Callable[[bytes | str], str]:
    """Function computing manifest fingerprints."""
    return fingerprint_of


@pytest.fixture
def make_tree(tmp_path: Path) -> Callable[..., Path]:
    """Factory creating a directory tree from a {relative path: content} mapping."""

    def _make(files: dict[str, bytes | str], root: Path | None = None) -> Path:
        base = root or tmp_path / "tree"
        base.mkdir(parents=True, exist_ok=True)
        for relative, content in files.items():
            path = base / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(content, str):
                path.write_text(content, encoding="utf-8")
            else:
                path.write_bytes(content)
        return base

    return _make


@pytest.fixture
def write_manifest() -> Callable[[Path, Iterable[tuple[str, str]]], Path]:
    """Factory writing (fingerprint, path) pairs as manifest lines."""

    def _write(path: Path, entries: Iterable[tuple[str, str]]) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("\n".join(f"{fp} {rel}" for fp, rel in entries), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def manifest_for() -> Callable[[Path, dict[str, bytes | str]], Path]:
    """Factory writing a manifest whose fingerprints match the given contents."""

    def _write(path: Path, files: dict[str, bytes | str]) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        lines = [f"{fingerprint_of(content)} {relative}" for relative, content in files.items()]
        path.write_text("\n".join(lines), encoding="utf-8")
        return path

    return _write
