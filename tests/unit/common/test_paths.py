from __future__ import annotations

from pathlib import Path

import pytest

from starconfig.common import AppDirectories, get_data_directory_from_dirs


def test_data_directory_uses_xdg_data_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "xdg"))

    data_dir = get_data_directory_from_dirs(AppDirectories(app_name="starconfig"))

    assert data_dir == tmp_path / "xdg" / "starconfig"


def test_data_directory_defaults_to_local_share(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("XDG_DATA_HOME", raising=False)
    monkeypatch.setenv("HOME", str(tmp_path))

    data_dir = get_data_directory_from_dirs(AppDirectories(app_name="starconfig"))

    assert data_dir == tmp_path / ".local" / "share" / "starconfig"


def test_explicit_data_dir_wins(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "xdg"))

    data_dir = get_data_directory_from_dirs(AppDirectories(data_dir=str(tmp_path / "store")))

    assert data_dir == tmp_path / "store"
