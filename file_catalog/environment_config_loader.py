# Copyright (c) 2024 File-Catalog Contributors
# SPDX-License-Identifier: MIT

"""
Environment configuration loader.

Opt-in only: the library never reads the environment on its own. Hosting
applications call Config.from_env() when they want CATALOG_* overrides.
"""
import os
from pathlib import Path
from file_catalog.config import (
    Config, StorageConfig, RelationIndexConfig, LoggingConfig
)

ENV_PREFIX = "CATALOG_"

class EnvironmentConfigLoader:
    """Loads configuration from environment variables.

    Single Responsibility: Environment access logic.
    """

    def load(self) -> Config:
        """Create Config from environment variables"""
        return Config(
            storage=self._load_storage_config(),
            relations=self._load_relations_config(),
            logging=self._load_logging_config()
        )

    def _load_storage_config(self) -> StorageConfig:
        """Load blob/record store configuration from environment"""
        defaults = StorageConfig()
        return StorageConfig(
            backend=self._get_optional("BACKEND", defaults.backend).lower(),
            files_dir=Path(self._get_optional("FILES_DIR", str(defaults.files_dir))),
            file_extension=self._get_optional("FILE_EXTENSION", defaults.file_extension).lstrip("."),
            records_path=Path(self._get_optional("RECORDS_PATH", str(defaults.records_path)))
        )

    def _load_relations_config(self) -> RelationIndexConfig:
        """Load relation index configuration from environment"""
        defaults = RelationIndexConfig()
        return RelationIndexConfig(
            record_name=self._get_optional("RECORD_NAME", defaults.record_name),
            warn_on_duplicates=self._get_bool("WARN_ON_DUPLICATES", defaults.warn_on_duplicates)
        )

    def _load_logging_config(self) -> LoggingConfig:
        """Load logging configuration from environment"""
        return LoggingConfig(
            level=self._get_optional("LOG_LEVEL", LoggingConfig.level).upper()
        )

    def _get_optional(self, key: str, default: str) -> str:
        """Get optional string environment variable"""
        return os.getenv(ENV_PREFIX + key, default)

    def _get_bool(self, key: str, default: bool) -> bool:
        """Get boolean environment variable"""
        value = os.getenv(ENV_PREFIX + key, str(default).lower())
        return value.lower() == "true"
