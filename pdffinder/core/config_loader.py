"""
Configuration loader for PDF Finder.

Loads settings from config.json and provides typed access via dataclasses.
Supports singleton pattern for global access and runtime reload capability.
Falls back to built-in defaults when no config file can be found, since the
index has a per-user default location.
"""

import json
import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from .exceptions import ConfigurationError


APP_DIRNAME = "pdf-finder-pro"
DATABASE_FILENAME = "index.db"


@dataclass
class PathsConfig:
    """Configuration for file system paths."""
    database_path: Path
    logs_directory: Optional[Path]


@dataclass
class ExtractionConfig:
    """Configuration for PDF extraction settings."""
    primary_backend: str
    fallback_backend: str
    min_file_size_bytes: int
    max_file_size_mb: int
    supported_extensions: List[str]


@dataclass
class IndexingConfig:
    """Configuration for indexing behavior."""
    max_workers: Optional[int]
    error_sample_size: int


@dataclass
class BM25Weights:
    """BM25 ranking weights for search fields."""
    title: float
    content: float


@dataclass
class SearchConfig:
    """Configuration for search functionality."""
    max_results: int
    snippet_tokens: int
    highlight_open: str
    highlight_close: str
    ellipsis: str
    bm25_weights: BM25Weights
    tokenizer: str
    max_query_length: int
    max_query_tokens: int


@dataclass
class LoggingConfig:
    """Configuration for logging behavior."""
    level: str
    format: str
    max_file_size_mb: int
    backup_count: int


@dataclass
class Config:
    """
    Main configuration container holding all config sections.

    Provides singleton access via get_config() function.
    """
    paths: PathsConfig
    extraction: ExtractionConfig
    indexing: IndexingConfig
    search: SearchConfig
    logging: LoggingConfig
    project_root: Path = field(default_factory=Path)

    @classmethod
    def from_file(cls, config_path: Path) -> "Config":
        """
        Load configuration from a JSON file.

        Args:
            config_path: Path to the config.json file.

        Returns:
            Populated Config instance.

        Raises:
            ConfigurationError: If file is missing or invalid.
        """
        config_path = Path(config_path)

        if not config_path.exists():
            raise ConfigurationError(
                f"Configuration file not found: {config_path}",
                {"path": str(config_path)}
            )

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigurationError(
                f"Invalid JSON in config file: {e}",
                {"path": str(config_path)}
            )

        if not isinstance(data, dict):
            raise ConfigurationError(
                "Config file must contain a JSON object",
                {"path": str(config_path)}
            )

        project_root = config_path.parent.parent

        return cls._parse_config(data, project_root)

    @classmethod
    def defaults(cls) -> "Config":
        """Build a configuration made only of built-in defaults."""
        return cls._parse_config({}, Path.cwd())

    @classmethod
    def _parse_config(cls, data: dict, project_root: Path) -> "Config":
        """Parse raw config dict into typed Config object."""
        paths_data = data.get("paths", {})
        database_path = paths_data.get("database_path")
        logs_directory = paths_data.get("logs_directory")
        paths = PathsConfig(
            database_path=(
                cls._resolve_path(database_path, project_root)
                if database_path else default_database_path()
            ),
            logs_directory=(
                cls._resolve_path(logs_directory, project_root)
                if logs_directory else None
            )
        )

        ext_data = data.get("extraction", {})
        extraction = ExtractionConfig(
            primary_backend=ext_data.get("primary_backend", "pypdf"),
            fallback_backend=ext_data.get("fallback_backend", "pdfplumber"),
            min_file_size_bytes=ext_data.get("min_file_size_bytes", 100),
            max_file_size_mb=ext_data.get("max_file_size_mb", 100),
            supported_extensions=ext_data.get("supported_extensions", [".pdf"])
        )

        idx_data = data.get("indexing", {})
        indexing = IndexingConfig(
            max_workers=idx_data.get("max_workers"),
            error_sample_size=idx_data.get("error_sample_size", 5)
        )

        search_data = data.get("search", {})
        bm25_data = search_data.get("bm25_weights", {})
        search = SearchConfig(
            max_results=search_data.get("max_results", 100),
            snippet_tokens=search_data.get("snippet_tokens", 64),
            highlight_open=search_data.get("highlight_open", "<mark>"),
            highlight_close=search_data.get("highlight_close", "</mark>"),
            ellipsis=search_data.get("ellipsis", "..."),
            bm25_weights=BM25Weights(
                title=bm25_data.get("title", 1.0),
                content=bm25_data.get("content", 1.0)
            ),
            tokenizer=search_data.get("tokenizer", "porter unicode61 remove_diacritics 1"),
            max_query_length=search_data.get("max_query_length", 1000),
            max_query_tokens=search_data.get("max_query_tokens", 50)
        )

        log_data = data.get("logging", {})
        logging_cfg = LoggingConfig(
            level=log_data.get("level", "INFO"),
            format=log_data.get("format", "%(asctime)s - %(name)s - %(levelname)s - %(message)s"),
            max_file_size_mb=log_data.get("max_file_size_mb", 10),
            backup_count=log_data.get("backup_count", 5)
        )

        return cls(
            paths=paths,
            extraction=extraction,
            indexing=indexing,
            search=search,
            logging=logging_cfg,
            project_root=project_root
        )

    @staticmethod
    def _resolve_path(path_str: str, project_root: Path) -> Path:
        """Resolve a path string, making relative paths absolute."""
        path = Path(path_str).expanduser()
        if path.is_absolute():
            return path
        return project_root / path


def user_data_directory() -> Path:
    """Return the per-user application data directory for the index."""
    if sys.platform.startswith("win"):
        base = os.environ.get("LOCALAPPDATA") or Path.home() / "AppData" / "Local"
    elif sys.platform == "darwin":
        base = Path.home() / "Library" / "Application Support"
    else:
        base = os.environ.get("XDG_DATA_HOME") or Path.home() / ".local" / "share"

    return Path(base) / APP_DIRNAME


def default_database_path() -> Path:
    """Default location of the index database file."""
    return user_data_directory() / DATABASE_FILENAME


_config_instance: Optional[Config] = None


def get_config(config_path: Path = None) -> Config:
    """
    Get the singleton Config instance.

    Args:
        config_path: Optional path to config file. If not provided,
                    searches upward from current directory and falls back
                    to built-in defaults.

    Returns:
        The global Config instance.

    Raises:
        ConfigurationError: If an existing config cannot be loaded.
    """
    global _config_instance

    if _config_instance is None or config_path is not None:
        if config_path is None:
            config_path = _find_config_file()

        if config_path is None:
            _config_instance = Config.defaults()
        else:
            _config_instance = Config.from_file(config_path)

    return _config_instance


def _find_config_file() -> Optional[Path]:
    """Search upward from current directory to find config/config.json."""
    current = Path.cwd()

    for _ in range(10):
        config_path = current / "config" / "config.json"
        if config_path.exists():
            return config_path

        parent = current.parent
        if parent == current:
            break
        current = parent

    return None


def reload_config(config_path: Path = None) -> Config:
    """
    Force reload of configuration.

    Args:
        config_path: Optional path to config file.

    Returns:
        Fresh Config instance.
    """
    global _config_instance
    _config_instance = None
    return get_config(config_path)
