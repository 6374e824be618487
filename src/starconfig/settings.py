from __future__ import annotations

from pydantic import BaseModel
from pydantic_settings import BaseSettings, SettingsConfigDict

from starconfig.common import AppDirectories, AppInfo, AppPaths, LoggingConfig
from starconfig.constants import DEFAULT_SPECIFIER, ENV_PREFIX
from starconfig.datastore import FileConfigurationStore


class LoaderSettings(BaseModel):
    default_specifier: str = DEFAULT_SPECIFIER
    missing_env_message: str | None = None


class Settings(BaseSettings):
    app: AppInfo = AppInfo()
    paths: AppPaths = AppPaths()
    loader: LoaderSettings = LoaderSettings()
    logging: LoggingConfig = LoggingConfig()
    data_dir: str | None = None

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        nested_model_default_partial_update=True,
    )

    def to_app_directories(self, data_dir: str | None = None) -> AppDirectories:
        return AppDirectories(
            app_name=self.paths.data_dir_name,
            data_dir=data_dir or self.data_dir,
        )

    def to_file_store(self, data_dir: str | None = None) -> FileConfigurationStore:
        return FileConfigurationStore(
            directories=self.to_app_directories(data_dir),
            namespace=self.paths.store_namespace,
            filename=self.paths.store_filename,
        )


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


# Private singleton instance
_settings: Settings | None = None

# Convenience access - pre-initialized singleton
settings = get_settings()
