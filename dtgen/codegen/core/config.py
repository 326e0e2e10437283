"""
Configuration management for code generation.

Handles loading and merging configuration from JSON files,
providing defaults and validation for generator settings.
"""

import json
from dataclasses import asdict, dataclass, field, fields
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from ...logging_config import get_logger

logger = get_logger(__name__)


class ConfigError(Exception):
    """Exception raised for configuration-related errors."""

    pass


class OutputMode(Enum):
    """Where generated SQL procedures are written."""

    SINGLE_FILE = "single-file"  # everything appended to StoredProcedures.sql
    MULTI_FILE = "multi-file"  # one .sql file per procedure


@dataclass
class GeneratorConfig:
    """Settings for one generation run."""

    # Naming settings
    procedure_prefix: str = ""
    access_suffix: str = "Data"
    transfer_suffix: str = ""

    # Output settings
    output_mode: OutputMode = OutputMode.MULTI_FILE
    output_path: str = "."

    # Permissions
    grant_principal: Optional[str] = None

    # Host code settings
    language: str = "csharp"
    namespace: str = "DataTier"
    project_name: str = "DataTier"

    # Overrides the database name found in the schema file
    database_name: Optional[str] = None

    # Custom settings (language-specific)
    custom: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if isinstance(self.output_mode, str):
            try:
                self.output_mode = OutputMode(self.output_mode)
            except ValueError:
                valid = ", ".join(mode.value for mode in OutputMode)
                raise ConfigError(
                    f"Invalid output_mode: {self.output_mode} (expected one of {valid})"
                )

    @property
    def single_file(self) -> bool:
        return self.output_mode == OutputMode.SINGLE_FILE

    @property
    def has_grant(self) -> bool:
        """True when an execute principal is configured."""
        return bool(self.grant_principal)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-serializable dictionary."""
        data = asdict(self)
        data["output_mode"] = self.output_mode.value
        return data


DEFAULT_CONFIG: Dict[str, Any] = {
    "procedure_prefix": "",
    "access_suffix": "Data",
    "transfer_suffix": "",
    "output_mode": OutputMode.MULTI_FILE.value,
    "output_path": ".",
    "grant_principal": None,
    "language": "csharp",
    "namespace": "DataTier",
    "project_name": "DataTier",
}


class ConfigManager:
    """Manages configuration loading and merging."""

    def __init__(self):
        """Initialize configuration manager."""
        self._defaults: Dict[str, Any] = dict(DEFAULT_CONFIG)

    def get_config(
        self,
        custom_config: Optional[Dict[str, Any]] = None,
        config_file: Optional[Union[str, Path]] = None,
    ) -> GeneratorConfig:
        """
        Get complete configuration.

        Args:
            custom_config: Custom configuration overrides
            config_file: Path to JSON configuration file

        Returns:
            Merged configuration (defaults < file < overrides)
        """
        base_config = self._defaults.copy()

        if config_file:
            file_config = self._load_config_file(config_file)
            base_config.update(file_config)
            logger.debug("Loaded configuration file %s", config_file)

        if custom_config:
            base_config.update(
                {key: value for key, value in custom_config.items() if value is not None}
            )

        return self._dict_to_config(base_config)

    def _load_config_file(self, config_path: Union[str, Path]) -> Dict[str, Any]:
        """Load configuration from JSON file."""
        path = Path(config_path)

        if not path.exists():
            raise ConfigError(f"Configuration file not found: {path}")

        if not path.suffix.lower() == ".json":
            raise ConfigError(f"Configuration file must be JSON: {path}")

        try:
            with open(path, "r", encoding="utf-8") as f:
                config = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON in configuration file {path}: {e}") from e
        except OSError as e:
            raise ConfigError(f"Failed to load configuration file {path}: {e}") from e

        if not isinstance(config, dict):
            raise ConfigError(f"Configuration file must contain a JSON object: {path}")

        return config

    def _dict_to_config(self, config_dict: Dict[str, Any]) -> GeneratorConfig:
        """Convert dictionary to GeneratorConfig instance."""
        known_fields = {f.name for f in fields(GeneratorConfig)}

        config_args = {}
        custom_args = {}

        for key, value in config_dict.items():
            if key in known_fields:
                config_args[key] = value
            else:
                custom_args[key] = value

        # Unknown keys land in the custom dict
        if custom_args:
            existing_custom = dict(config_args.get("custom") or {})
            existing_custom.update(custom_args)
            config_args["custom"] = existing_custom

        return GeneratorConfig(**config_args)

    def validate_config(self, config: GeneratorConfig) -> List[str]:
        """
        Validate configuration.

        Returns:
            List of validation warnings
        """
        warnings = []

        for name in ("procedure_prefix", "access_suffix", "transfer_suffix"):
            value = getattr(config, name)
            if value and not value.replace("_", "").isalnum():
                warnings.append(f"{name} contains non-identifier characters: {value!r}")

        if config.access_suffix == config.transfer_suffix:
            warnings.append(
                "access_suffix and transfer_suffix are identical; "
                "transfer and access class names will collide"
            )

        if config.namespace and not all(
            part.isidentifier() for part in config.namespace.split(".")
        ):
            warnings.append(f"Invalid namespace: {config.namespace}")

        return warnings


# Global configuration manager instance
_config_manager = None


def get_config_manager() -> ConfigManager:
    """Get the global configuration manager instance."""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager


def load_config(
    custom_config: Optional[Dict[str, Any]] = None,
    config_file: Optional[Union[str, Path]] = None,
) -> GeneratorConfig:
    """
    Convenience function to load configuration.

    Args:
        custom_config: Custom configuration overrides
        config_file: Path to JSON configuration file

    Returns:
        Merged configuration
    """
    manager = get_config_manager()
    return manager.get_config(custom_config, config_file)
