# Copyright (c) 2024 File-Catalog Contributors
# SPDX-License-Identifier: MIT

"""
Configuration constants for the file catalog
"""
from pathlib import Path
from dataclasses import dataclass, field

# Name of the single record holding the relation index
RELATIONS_RECORD_NAME = "Relations"

@dataclass
class StorageConfig:
    """Blob and record store configuration

    backend: 'filesystem' keeps blobs as files and the index in SQLite,
    'memory' keeps everything in process (tests, ephemeral hosts).
    """
    backend: str = "filesystem"
    files_dir: Path = Path("data/files")
    file_extension: str = "myfile"  # Every blob on disk carries this extension
    records_path: Path = Path("data/records.db")

@dataclass
class RelationIndexConfig:
    """Relation index configuration"""
    record_name: str = RELATIONS_RECORD_NAME
    warn_on_duplicates: bool = True  # Log when a doc id resolves to several files

@dataclass
class LoggingConfig:
    """Library logging configuration"""
    level: str = "INFO"

@dataclass
class Config:
    """Main configuration container"""
    storage: StorageConfig = field(default_factory=StorageConfig)
    relations: RelationIndexConfig = field(default_factory=RelationIndexConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_env(cls) -> 'Config':
        """Create config from environment - delegates to EnvironmentConfigLoader"""
        from file_catalog.environment_config_loader import EnvironmentConfigLoader
        return EnvironmentConfigLoader().load()

# Default instance, built from defaults only
default_config = Config()
