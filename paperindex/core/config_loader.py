"""
Configuration loader for the paper index.

Loads settings from config.json and provides typed access via dataclasses.
Environment variables override file values so the library location can be
switched per shell. Supports singleton pattern for global access and runtime
reload capability.
"""

import json
import os
import platform
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Mapping, Optional

from .exceptions import ConfigurationError


ENV_CONFIG_PATH = "PAPERINDEX_CONFIG"

# Environment variable -> (section, attribute)
ENV_OVERRIDES = {
    "PDF_DIR": ("paths", "pdf_directory"),
    "INDEX_STRUCTURED": ("paths", "structured_index"),
    "INDEX_QUERYABLE": ("paths", "queryable_index"),
    "PDF_VIEWER": ("commands", "viewer"),
}

DEFAULT_LIBRARY = "~/Papers"


@dataclass
class PathsConfig:
    """Configuration for file system paths."""
    pdf_directory: Path
    structured_index: Path
    queryable_index: Path
    logs_directory: Optional[Path] = None


@dataclass
class ScanningConfig:
    """Configuration for PDF discovery."""
    supported_extensions: List[str]


@dataclass
class RecordsConfig:
    """Configuration for freshly created records."""
    default_tags: List[str]


@dataclass
class SearchConfig:
    """Configuration for keyword and tag matching."""
    case_sensitive: bool


@dataclass
class CommandsConfig:
    """
    Command templates for external tools.

    Templates are shell-style strings; ``{path}`` is replaced by the absolute
    file path, ``{dir}`` by its parent directory and ``{line}`` by the line
    number for the editor.
    """
    viewer: str
    reveal: str
    editor: str
    mail: str


@dataclass
class LoggingConfig:
    """Configuration for logging behavior."""
    level: str
    format: str
    max_file_size_mb: int
    backup_count: int


def default_commands(system: str = None) -> Dict[str, str]:
    """Return platform specific default command templates."""
    system = system or platform.system()

    if system == "Darwin":
        return {
            "viewer": "open {path}",
            "reveal": "open -R {path}",
            "editor": "vi +{line} {path}",
            "mail": "open -a Mail {path}",
        }

    return {
        "viewer": "xdg-open {path}",
        "reveal": "xdg-open {dir}",
        "editor": "vi +{line} {path}",
        "mail": "xdg-email --attach {path}",
    }


@dataclass
class Config:
    """
    Main configuration container holding all config sections.

    Provides singleton access via get_config() function.
    """
    paths: PathsConfig
    scanning: ScanningConfig
    records: RecordsConfig
    search: SearchConfig
    commands: CommandsConfig
    logging: LoggingConfig
    project_root: Path = field(default_factory=Path)

    @classmethod
    def from_file(cls, config_path: Path, environ: Mapping[str, str] = None) -> "Config":
        """
        Load configuration from a JSON file.

        Args:
            config_path: Path to the config.json file.
            environ: Environment used for overrides. Defaults to os.environ.

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

        project_root = config_path.resolve().parent.parent

        return cls._parse_config(data, project_root, environ)

    @classmethod
    def default(cls, environ: Mapping[str, str] = None) -> "Config":
        """Build a configuration without a config file."""
        return cls._parse_config({}, Path.cwd(), environ)

    @classmethod
    def _parse_config(
        cls,
        data: dict,
        project_root: Path,
        environ: Mapping[str, str] = None
    ) -> "Config":
        """Parse raw config dict into typed Config object."""
        data = cls._apply_env_overrides(data, os.environ if environ is None else environ)

        paths_data = data.get("paths", {})
        pdf_directory = cls._resolve_path(paths_data.get("pdf_directory", DEFAULT_LIBRARY), project_root)
        logs_directory = paths_data.get("logs_directory")
        paths = PathsConfig(
            pdf_directory=pdf_directory,
            structured_index=cls._resolve_path(
                paths_data.get("structured_index", str(pdf_directory / "index.yaml")), project_root
            ),
            queryable_index=cls._resolve_path(
                paths_data.get("queryable_index", str(pdf_directory / "index.json")), project_root
            ),
            logs_directory=cls._resolve_path(logs_directory, project_root) if logs_directory else None
        )

        scan_data = data.get("scanning", {})
        scanning = ScanningConfig(
            supported_extensions=scan_data.get("supported_extensions", [".pdf"])
        )

        records_data = data.get("records", {})
        records = RecordsConfig(
            default_tags=records_data.get("default_tags", ["new", "unread"])
        )

        search_data = data.get("search", {})
        search = SearchConfig(
            case_sensitive=search_data.get("case_sensitive", True)
        )

        command_defaults = default_commands()
        commands_data = data.get("commands", {})
        commands = CommandsConfig(
            viewer=commands_data.get("viewer", command_defaults["viewer"]),
            reveal=commands_data.get("reveal", command_defaults["reveal"]),
            editor=commands_data.get("editor", command_defaults["editor"]),
            mail=commands_data.get("mail", command_defaults["mail"])
        )

        log_data = data.get("logging", {})
        logging_cfg = LoggingConfig(
            level=log_data.get("level", "WARNING"),
            format=log_data.get("format", "%(asctime)s - %(name)s - %(levelname)s - %(message)s"),
            max_file_size_mb=log_data.get("max_file_size_mb", 10),
            backup_count=log_data.get("backup_count", 5)
        )

        return cls(
            paths=paths,
            scanning=scanning,
            records=records,
            search=search,
            commands=commands,
            logging=logging_cfg,
            project_root=project_root
        )

    @staticmethod
    def _apply_env_overrides(data: dict, environ: Mapping[str, str]) -> dict:
        """Return a copy of data with recognized environment variables applied."""
        merged = {section: dict(values) for section, values in data.items() if isinstance(values, dict)}

        for variable, (section, key) in ENV_OVERRIDES.items():
            value = environ.get(variable)
            if value:
                merged.setdefault(section, {})[key] = value

        # $EDITOR names a program; keep the line/path arguments of the template.
        editor = environ.get("EDITOR")
        if editor and "editor" not in data.get("commands", {}):
            merged.setdefault("commands", {})["editor"] = f"{editor} +{{line}} {{path}}"

        return merged

    @staticmethod
    def _resolve_path(path_str: str, project_root: Path) -> Path:
        """Resolve a path string, making relative paths absolute."""
        path = Path(path_str).expanduser()
        if path.is_absolute():
            return path
        return project_root / path


_config_instance: Optional[Config] = None


def get_config(config_path: Path = None) -> Config:
    """
    Get the singleton Config instance.

    Args:
        config_path: Optional path to config file. If not provided, the
                    PAPERINDEX_CONFIG variable is consulted, then
                    config/config.json is searched upward from the current
                    directory. Built-in defaults apply when nothing is found.

    Returns:
        The global Config instance.

    Raises:
        ConfigurationError: If a config file exists but cannot be loaded.
    """
    global _config_instance

    if _config_instance is None or config_path is not None:
        if config_path is None:
            config_path = _find_config_file()

        if config_path is None:
            _config_instance = Config.default()
        else:
            _config_instance = Config.from_file(Path(config_path))

    return _config_instance


def _find_config_file() -> Optional[Path]:
    """Locate the config file from the environment or by searching upward."""
    env_path = os.environ.get(ENV_CONFIG_PATH)
    if env_path:
        return Path(env_path).expanduser()

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


if __name__ == "__main__":
    try:
        config = get_config()
        print(f"Project root:     {config.project_root}")
        print(f"PDF directory:    {config.paths.pdf_directory}")
        print(f"Structured index: {config.paths.structured_index}")
        print(f"Queryable index:  {config.paths.queryable_index}")
        print(f"Viewer:           {config.commands.viewer}")
    except ConfigurationError as e:
        print(f"Config error: {e.message}")
