"""Configuration management for report policies and display settings.

Loads configuration from environment variables, an optional .env file and
an optional YAML file. The allocation engine itself never reads this module;
callers pass the resolved policy values in explicitly.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml
from dotenv import load_dotenv

from .exceptions import ConfigurationError
from .types import ExpenseCategory, PolicyPreset, ReconciliationPolicy

logger = logging.getLogger(__name__)

TRUTHY = {"1", "true", "yes", "on"}
FALSY = {"0", "false", "no", "off", ""}


@dataclass
class CategoryPolicy:
    """How one category is allocated and displayed."""

    reconciliation: ReconciliationPolicy = ReconciliationPolicy.RECONCILE
    fallback_on_empty: bool = False


def preset_policies(preset: PolicyPreset) -> dict[ExpenseCategory, CategoryPolicy]:
    """Build the per-category policies for a named preset."""
    if preset == PolicyPreset.LEGACY:
        return {
            ExpenseCategory.FLIGHTS: CategoryPolicy(ReconciliationPolicy.DISPLAY_FALLBACK),
            ExpenseCategory.LODGING: CategoryPolicy(ReconciliationPolicy.RECONCILE),
            ExpenseCategory.TOURS: CategoryPolicy(ReconciliationPolicy.ALLOCATED),
        }
    return {category: CategoryPolicy() for category in ExpenseCategory}


def parse_bool(key: str, value: Any) -> bool:
    """Parse a boolean-ish config value."""
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in TRUTHY:
        return True
    if text in FALSY:
        return False
    raise ConfigurationError(key, f"expected a boolean, got '{value}'")


def parse_enum(key: str, value: Any, enum_cls: type) -> Any:
    """Parse an enum value, reporting the valid choices on failure."""
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value).strip().lower())
    except ValueError:
        choices = ", ".join(e.value for e in enum_cls)
        raise ConfigurationError(key, f"invalid value '{value}' (valid: {choices})")


@dataclass
class ReportConfig:
    """Report configuration: per-category policies and display settings."""

    policies: dict[ExpenseCategory, CategoryPolicy] = field(
        default_factory=lambda: preset_policies(PolicyPreset.UNIFORM)
    )
    decimals: int = 2
    currency_symbol: str = "$"

    @classmethod
    def from_preset(cls, preset: PolicyPreset | str, **kwargs: Any) -> "ReportConfig":
        """Create a configuration from a named preset."""
        preset = parse_enum("preset", preset, PolicyPreset)
        return cls(policies=preset_policies(preset), **kwargs)

    @classmethod
    def from_env(cls) -> "ReportConfig":
        """Load configuration from environment variables."""
        preset = os.getenv("TRIPCOST_POLICY_PRESET", PolicyPreset.UNIFORM.value)
        config = cls.from_preset(parse_enum("TRIPCOST_POLICY_PRESET", preset, PolicyPreset))

        fallback = os.getenv("TRIPCOST_FALLBACK_ON_EMPTY")
        if fallback is not None:
            config.set_fallback_on_empty(parse_bool("TRIPCOST_FALLBACK_ON_EMPTY", fallback))

        symbol = os.getenv("TRIPCOST_CURRENCY_SYMBOL")
        if symbol is not None:
            config.currency_symbol = symbol

        decimals = os.getenv("TRIPCOST_DECIMALS")
        if decimals is not None:
            try:
                config.decimals = int(decimals)
            except ValueError:
                raise ConfigurationError("TRIPCOST_DECIMALS", f"expected an integer, got '{decimals}'")

        return config

    @classmethod
    def load(
        cls,
        env_file: Optional[Path] = None,
        config_path: Optional[Path] = None,
    ) -> "ReportConfig":
        """
        Load configuration from .env, environment variables and YAML.

        Args:
            env_file: Optional path to .env file. If not provided,
                      looks for .env in the current working directory.
            config_path: Optional YAML file, which must exist. Falls back to
                         TRIPCOST_CONFIG, where a missing file only logs a warning.

        Returns:
            ReportConfig instance with loaded values
        """
        if env_file:
            load_dotenv(env_file)
        else:
            env_path = Path.cwd() / ".env"
            if env_path.exists():
                load_dotenv(env_path)

        config = cls.from_env()

        if config_path:
            config.apply_yaml(Path(config_path), required=True)
        elif os.getenv("TRIPCOST_CONFIG"):
            config.apply_yaml(Path(os.environ["TRIPCOST_CONFIG"]))

        return config

    def apply_yaml(self, config_path: Path, required: bool = False) -> None:
        """
        Overlay settings from a YAML file onto this configuration.

        Args:
            config_path: YAML file to read
            required: Raise if the file is missing instead of keeping defaults

        Raises:
            ConfigurationError: If the file is unreadable or has invalid values
        """
        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except FileNotFoundError:
            if required:
                raise ConfigurationError(str(config_path), "config file not found")
            logger.warning(f"Config file not found: {config_path}, using defaults")
            return
        except (yaml.YAMLError, UnicodeDecodeError) as e:
            raise ConfigurationError(str(config_path), f"invalid YAML: {e}")
        except OSError as e:
            raise ConfigurationError(str(config_path), f"could not read config: {e}")

        if not isinstance(data, dict):
            raise ConfigurationError(str(config_path), "top level must be a mapping")

        if "preset" in data:
            preset = parse_enum("preset", data["preset"], PolicyPreset)
            self.policies = preset_policies(preset)

        categories = data.get("categories") or {}
        if not isinstance(categories, dict):
            raise ConfigurationError("categories", "must be a mapping of category names")

        for name, settings in categories.items():
            category = parse_enum(f"categories.{name}", name, ExpenseCategory)
            policy = self.policies.setdefault(category, CategoryPolicy())
            settings = settings or {}
            if not isinstance(settings, dict):
                raise ConfigurationError(f"categories.{name}", "settings must be a mapping")
            if "reconciliation" in settings:
                policy.reconciliation = parse_enum(
                    f"categories.{name}.reconciliation",
                    settings["reconciliation"],
                    ReconciliationPolicy,
                )
            if "fallback_on_empty" in settings:
                policy.fallback_on_empty = parse_bool(
                    f"categories.{name}.fallback_on_empty",
                    settings["fallback_on_empty"],
                )

        if "currency_symbol" in data:
            self.currency_symbol = str(data["currency_symbol"])
        if "decimals" in data:
            try:
                self.decimals = int(data["decimals"])
            except (TypeError, ValueError):
                raise ConfigurationError("decimals", f"expected an integer, got '{data['decimals']}'")

        logger.info(f"Loaded report config from {config_path}")

    def policy_for(self, category: ExpenseCategory) -> CategoryPolicy:
        """Return the policy for a category (default policy if unset)."""
        return self.policies.get(category, CategoryPolicy())

    def set_fallback_on_empty(self, enabled: bool) -> None:
        """Set fallback-on-empty for every category."""
        for category in ExpenseCategory:
            self.policies.setdefault(category, CategoryPolicy()).fallback_on_empty = enabled


# Global config instance (lazy loaded, CLI use only)
_config: Optional[ReportConfig] = None


def get_config() -> ReportConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = ReportConfig.load()
    return _config


def reload_config(
    env_file: Optional[Path] = None,
    config_path: Optional[Path] = None,
) -> ReportConfig:
    """Reload configuration from environment."""
    global _config
    _config = ReportConfig.load(env_file, config_path)
    return _config
