"""Common models used across starconfig."""

from dataclasses import dataclass
from typing import Literal

from pydantic import BaseModel

from starconfig.constants import APP_NAME


class AppInfo(BaseModel):
    project_name: str = APP_NAME
    version: str = "0.1.0"
    environment: Literal["test", "dev", "prod"] = "dev"


class AppPaths(BaseModel):
    data_dir_name: str = APP_NAME
    store_namespace: str = "configurations"
    store_filename: str = "store.json"


@dataclass(frozen=True)
class AppDirectories:
    """Where starconfig keeps its files.

    Attributes:
        app_name: Directory name used under the XDG data home
        data_dir: Explicit data directory; overrides XDG discovery when set
    """

    app_name: str = APP_NAME
    data_dir: str | None = None
