"""Configuration management for gumup builds."""

import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from .constants import DEFAULT_ENCODING, DEFAULT_SEPARATOR, DEFAULT_SUFFIX
from .utils.exceptions import OptionsError


@dataclass
class BuildConfig:
    """Build mode configuration."""

    unit_paths: list[Path] = field(default_factory=list)
    suffix: str = DEFAULT_SUFFIX
    encoding: str = DEFAULT_ENCODING
    separator: str = DEFAULT_SEPARATOR
    banner: str = ""


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "INFO"
    format: str = "console"  # "console" or "json"
    file: Path | None = None


@dataclass
class GumupConfig:
    """
    Complete configuration for gumup.

    This combines all configuration sections.
    """

    build: BuildConfig = field(default_factory=BuildConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_file(cls, config_path: Path) -> "GumupConfig":
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to YAML config file

        Returns:
            GumupConfig instance

        Raises:
            OptionsError: If the file isn't valid YAML or has unknown options
        """
        try:
            with open(config_path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise OptionsError(f"Invalid YAML in configuration file {config_path}: {e}") from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise OptionsError(
                f"Invalid configuration file structure in {config_path}: "
                f"expected dictionary, got {type(data).__name__}"
            )

        try:
            build_data = dict(data.get("build") or {})
            unit_paths = build_data.get("unit_paths") or []
            if not isinstance(unit_paths, list):
                raise OptionsError(
                    f"Invalid option in configuration file {config_path}: "
                    f"build.unit_paths must be a list, got {type(unit_paths).__name__}",
                    option="build.unit_paths",
                )
            # Relative unit paths are relative to the config file
            build_data["unit_paths"] = [config_path.parent / Path(p) for p in unit_paths]
            build = BuildConfig(**build_data)

            logging_data = dict(data.get("logging") or {})
            if logging_data.get("file"):
                logging_data["file"] = Path(logging_data["file"])
            logging = LoggingConfig(**logging_data)
        except TypeError as e:
            raise OptionsError(f"Invalid option in configuration file {config_path}: {e}") from e

        return cls(build=build, logging=logging)

    def to_file(self, config_path: Path) -> None:
        """
        Save configuration to YAML file.

        Args:
            config_path: Path to save config file
        """
        data = {
            "build": {
                **self.build.__dict__,
                "unit_paths": [str(p) for p in self.build.unit_paths],
            },
            "logging": {
                k: str(v) if isinstance(v, Path) else v
                for k, v in self.logging.__dict__.items()
                if v is not None
            },
        }

        config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(config_path, "w", encoding="utf-8") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)

    @classmethod
    def from_env(cls) -> "GumupConfig":
        """
        Create configuration from environment variables.

        Environment variables:
            GUMUP_UNIT_PATH: Unit directories, separated by os.pathsep
            GUMUP_SUFFIX: Unit file suffix (default: .js)
            LOG_LEVEL: Logging level (default: INFO)
            LOG_FORMAT: console or json (default: console)

        Returns:
            GumupConfig instance
        """
        unit_path = os.environ.get("GUMUP_UNIT_PATH", "")
        build_config = BuildConfig(
            unit_paths=[Path(p) for p in unit_path.split(os.pathsep) if p],
            suffix=os.environ.get("GUMUP_SUFFIX", DEFAULT_SUFFIX),
        )

        logging_config = LoggingConfig(
            level=os.environ.get("LOG_LEVEL", "INFO"),
            format=os.environ.get("LOG_FORMAT", "console"),
        )

        return cls(build=build_config, logging=logging_config)


def load_config(config_file: Path | None = None) -> GumupConfig:
    """
    Load configuration from file or environment variables.

    Args:
        config_file: Optional path to YAML config file

    Returns:
        GumupConfig instance

    Raises:
        FileNotFoundError: If config_file is specified but doesn't exist
    """
    if config_file:
        if not config_file.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_file}")
        return GumupConfig.from_file(config_file)
    return GumupConfig.from_env()
