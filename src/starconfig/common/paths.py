"""Path discovery utilities for starconfig."""

from __future__ import annotations

import os
from pathlib import Path

from .models import AppDirectories


def get_data_directory_from_dirs(directories: AppDirectories) -> Path:
    """Get the data directory for the given AppDirectories.

    Returns ``directories.data_dir`` when set, otherwise
    ~/.local/share/{app_name} (or XDG_DATA_HOME/{app_name} if set).
    """
    if directories.data_dir:
        return Path(directories.data_dir).expanduser()
    xdg_data = os.getenv("XDG_DATA_HOME")
    base_dir = Path(xdg_data).expanduser() if xdg_data else Path.home() / ".local" / "share"
    return base_dir / directories.app_name
