"""
Pydantic-based configuration system for Bookmark Tree.

Settings are grouped into parser, export and logging sections, loaded from
a TOML or JSON file and validated with pydantic.
"""

import json
import os
from pathlib import Path
from typing import Dict, List, Literal, Optional

import toml
from pydantic import BaseModel, Field, ValidationError, field_validator

from ..utils.error_handler import ConfigurationError

# Environment variables that override file settings
ENV_LOG_LEVEL = "BOOKMARK_TREE_LOG_LEVEL"
ENV_PARSER = "BOOKMARK_TREE_PARSER"

DEFAULT_CONFIG_NAMES = ("bookmark_tree.toml", "bookmark_tree.json")


class ParserConfig(BaseModel):
    """Markup parser settings."""

    features: Literal["html5lib", "html.parser"] = Field(
        default="html5lib",
        description="BeautifulSoup tree builder",
        json_schema_extra={
            "error_msg": "Parser must be 'html5lib' or 'html.parser'. "
            "Recommended: html5lib, which handles unclosed <DT> tags the "
            "way browsers do."
        },
    )
    folder_tag: str = Field(
        default="h3",
        min_length=1,
        description="Tag holding a folder title",
    )
    item_tag: str = Field(
        default="dt",
        min_length=1,
        description="Tag wrapping each list item",
    )
    list_tag: str = Field(
        default="dl",
        min_length=1,
        description="Tag holding a list of items",
    )

    @field_validator("folder_tag", "item_tag", "list_tag")
    @classmethod
    def normalize_tag(cls, v):
        """Tag names are matched in lower case by the parser."""
        return v.strip().lower()


class ExportConfig(BaseModel):
    """Output format settings."""

    default_format: Literal["html", "json", "csv", "markdown"] = Field(
        default="html",
        description="Format used when none is given on the command line",
        json_schema_extra={
            "error_msg": "Default format must be 'html', 'json', 'csv' or "
            "'markdown'."
        },
    )
    html_title: str = Field(
        default="Bookmarks",
        description="TITLE and H1 text of generated HTML files",
    )
    json_indent: int = Field(
        default=2,
        ge=0,
        le=8,
        description="JSON indentation (0 for compact output)",
        json_schema_extra={
            "error_msg": "JSON indent must be between 0 and 8 spaces."
        },
    )
    csv_tag_separator: str = Field(
        default=";",
        min_length=1,
        description="Separator between tags in the CSV Tags column",
    )

    @field_validator("csv_tag_separator")
    @classmethod
    def validate_tag_separator(cls, v):
        """Warn when the separator is also the CSV field delimiter."""
        if v == ",":
            import warnings

            warnings.warn(
                "A ',' tag separator makes the Tags column harder to split. "
                "Consider using ';' instead.",
                UserWarning,
            )
        return v


class LoggingConfig(BaseModel):
    """Logging settings."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Log level",
        json_schema_extra={
            "error_msg": "Log level must be DEBUG, INFO, WARNING or ERROR."
        },
    )
    log_file: Optional[str] = Field(
        default=None,
        description="Log file name (written under logs/)",
    )
    console_output: bool = Field(
        default=True,
        description="Also log to the console",
    )

    @field_validator("level", mode="before")
    @classmethod
    def normalize_level(cls, v):
        if isinstance(v, str):
            return v.upper()
        return v


class BookmarkTreeConfig(BaseModel):
    """Main configuration model."""

    parser: ParserConfig = Field(default_factory=ParserConfig)
    export: ExportConfig = Field(default_factory=ExportConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


class ConfigurationManager:
    """Manages loading and validation of configuration from multiple sources."""

    def __init__(self, config_path: Optional[Path] = None):
        """
        Initialize configuration manager.

        Args:
            config_path: Optional path to configuration file (TOML or JSON)

        Raises:
            ConfigurationError: If the file cannot be read or is invalid
        """
        self._config: Optional[BookmarkTreeConfig] = None
        self._load_configuration(Path(config_path) if config_path else None)

    def _get_default_config_paths(self) -> List[Path]:
        """Get list of default configuration file paths to try."""
        return [Path.cwd() / name for name in DEFAULT_CONFIG_NAMES]

    def _load_configuration(self, config_path: Optional[Path] = None) -> None:
        """Load configuration from file or use defaults."""
        config_data: Dict = {}

        if config_path:
            config_data = self._load_config_file(config_path)
        else:
            for path in self._get_default_config_paths():
                if path.exists():
                    config_data = self._load_config_file(path)
                    break

        self._apply_env_overrides(config_data)

        try:
            self._config = BookmarkTreeConfig(**config_data)
        except ValidationError as e:
            raise ConfigurationError(format_config_error(e)) from e

    def _load_config_file(self, config_path: Path) -> Dict:
        """Load configuration from TOML or JSON file."""
        if not config_path.exists():
            raise ConfigurationError(
                format_config_error(
                    FileNotFoundError(2, "No such file", str(config_path))
                )
            )

        suffix = config_path.suffix.lower()
        if suffix not in (".toml", ".json"):
            raise ConfigurationError(
                f"Unsupported configuration file format: {config_path.suffix}"
            )

        try:
            if suffix == ".toml":
                return toml.load(config_path)
            with open(config_path, "r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, ValueError, toml.TomlDecodeError) as e:
            raise ConfigurationError(
                f"Failed to load configuration from {config_path}: {e}"
            ) from e

    def _apply_env_overrides(self, config_data: Dict) -> None:
        """Apply environment variable overrides on top of file settings."""
        log_level = os.getenv(ENV_LOG_LEVEL)
        if log_level:
            config_data.setdefault("logging", {})["level"] = log_level

        parser = os.getenv(ENV_PARSER)
        if parser:
            config_data.setdefault("parser", {})["features"] = parser

    def update_from_cli_args(self, args: Dict) -> None:
        """Update configuration from command-line arguments."""
        if not self._config:
            raise RuntimeError("Configuration not loaded")

        config_dict = self._config.model_dump()

        if args.get("verbose"):
            config_dict["logging"]["level"] = "DEBUG"

        if args.get("parser"):
            config_dict["parser"]["features"] = args["parser"]

        if args.get("format"):
            config_dict["export"]["default_format"] = args["format"]

        if args.get("log_file"):
            config_dict["logging"]["log_file"] = args["log_file"]

        try:
            self._config = BookmarkTreeConfig(**config_dict)
        except ValidationError as e:
            raise ConfigurationError(format_config_error(e)) from e

    @property
    def config(self) -> BookmarkTreeConfig:
        """Get the current configuration."""
        if not self._config:
            raise RuntimeError("Configuration not loaded")
        return self._config

    def create_sample_config(self, output_path: Path, format: str = "toml") -> None:
        """Create a sample configuration file."""
        sample_config = {
            "parser": {
                "features": "html5lib",
                "folder_tag": "h3",
                "item_tag": "dt",
                "list_tag": "dl",
            },
            "export": {
                "default_format": "html",
                "html_title": "Bookmarks",
                "json_indent": 2,
                "csv_tag_separator": ";",
            },
            "logging": {"level": "INFO", "console_output": True},
        }

        if format.lower() == "toml":
            with open(output_path, "w", encoding="utf-8") as f:
                toml.dump(sample_config, f)
        elif format.lower() == "json":
            with open(output_path, "w", encoding="utf-8") as f:
                json.dump(sample_config, f, indent=2)
        else:
            raise ValueError(f"Unsupported format: {format}")


_BOUND_SYMBOLS = {
    "greater_than_equal": ">=",
    "less_than_equal": "<=",
    "greater_than": ">",
    "less_than": "<",
}

_TIPS = (
    "Tips:\n"
    "- TOML and JSON files are both accepted\n"
    "- Numeric settings must stay inside their documented ranges\n"
    "- 'bookmark-tree --create-config PATH' writes a complete sample file"
)


class ConfigurationErrorFormatter:
    """Turns pydantic validation errors into one readable line per problem."""

    @classmethod
    def format_validation_error(cls, error: ValidationError) -> str:
        lines = [cls.describe(detail) for detail in error.errors()]
        return (
            "Configuration Validation Failed:\n"
            + "-" * 60
            + "\n"
            + "\n".join(lines)
            + "\n\n"
            + _TIPS
        )

    @staticmethod
    def location(loc: tuple) -> str:
        """("export", "json_indent") -> "export -> json_indent"."""
        if not loc:
            return "Configuration"
        return " -> ".join(part if isinstance(part, str) else f"[{part}]" for part in loc)

    @classmethod
    def describe(cls, detail: dict) -> str:
        where = cls.location(detail["loc"])
        kind = detail["type"]
        ctx = detail.get("ctx") or {}
        got = detail.get("input", "N/A")

        if kind == "missing":
            problem = "Required field is missing"
        elif kind in _BOUND_SYMBOLS:
            limit = next(iter(ctx.values()), "limit")
            problem = f"Value must be {_BOUND_SYMBOLS[kind]} {limit} (got: {got})"
        elif kind == "literal_error":
            problem = f"Must be one of {ctx.get('expected', 'the allowed values')} (got: {got})"
        elif kind == "string_too_short":
            problem = (
                f"String too short, minimum {ctx.get('min_length', '?')} "
                f"characters (got: {len(str(got))})"
            )
        else:
            problem = f"{detail.get('msg', 'Invalid configuration value')} (got: {got})"
        return f"  {where}: {problem}"


def format_config_error(error: Exception) -> str:
    """Readable text for any error raised while loading configuration."""
    if isinstance(error, ValidationError):
        return ConfigurationErrorFormatter.format_validation_error(error)

    if isinstance(error, FileNotFoundError):
        return (
            "Configuration File Not Found:\n"
            f"  Could not find configuration file: {error.filename}\n\n"
            "Run 'bookmark-tree --create-config PATH' to write one, "
            "or drop --config to use the defaults."
        )

    return f"Configuration Error:\n  {error}"
