"""Configuration loader for grading settings."""

import os
from pathlib import Path
from typing import Any

import yaml

from ..errors import ConfigurationError
from .models import GradingConfig

DEFAULT_GRADING_FILE = "grading.yml"


class ConfigLoader:
    """Loads and validates configuration files."""

    def __init__(self, config_dir: Path | None = None):
        """Initialize the config loader.

        Args:
            config_dir: Directory containing config files. Defaults to this package
        """
        self.config_dir = config_dir or Path(__file__).parent

    def load_grading(self, grading_file: str | Path | None = None) -> GradingConfig:
        """Load grading configuration from YAML.

        Args:
            grading_file: Path to the grading YAML file. Falls back to
                ``GRADER_CONFIG`` and then the bundled ``grading.yml``

        Returns:
            Parsed GradingConfig object
        """
        grading_file = grading_file or os.getenv("GRADER_CONFIG") or DEFAULT_GRADING_FILE
        path = self._resolve_path(grading_file)
        data = self._load_yaml(path)
        return GradingConfig.from_dict(data)

    def _resolve_path(self, file_path: str | Path) -> Path:
        """Resolve a config file path."""
        path = Path(file_path).expanduser()
        if not path.is_absolute() and not path.exists():
            path = self.config_dir / path
        return path

    def _load_yaml(self, path: Path) -> dict[str, Any]:
        """Load and parse a YAML file."""
        if not path.exists():
            raise ConfigurationError(f"Config file not found: {path}")

        with open(path, encoding="utf-8") as f:
            try:
                data = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigurationError(f"Config file must contain a mapping: {path}")
        return data
