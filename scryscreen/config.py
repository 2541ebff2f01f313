"""Configuration management for the ScryScreen session engine."""

import logging
from pathlib import Path

import yaml
from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

# Hard ceilings enforced by the dice evaluator regardless of configuration
MAX_DICE_COUNT = 1000
MAX_DICE_SIDES = 100000


class PortalConfig(BaseModel):
    """Player-facing initiative display configuration."""

    show_round: bool = True
    show_initiative_values: bool = True
    include_hidden: bool = False
    max_entries: int = 12  # <= 0 means unlimited


class DiceConfig(BaseModel):
    """Dice evaluator configuration."""

    max_dice_count: int = Field(default=MAX_DICE_COUNT, ge=1, le=MAX_DICE_COUNT)
    max_dice_sides: int = Field(default=MAX_DICE_SIDES, ge=1, le=MAX_DICE_SIDES)
    history_length: int = Field(default=20, ge=1)


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    format: str = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class AppConfig(BaseModel):
    """Main application configuration."""

    portal: PortalConfig = Field(default_factory=PortalConfig)
    dice: DiceConfig = Field(default_factory=DiceConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


CONFIG_FILENAME = "scryscreen.yaml"


def _config_file(config_path: Path | str | None) -> Path:
    return Path(config_path) if config_path is not None else Path.cwd() / CONFIG_FILENAME


def load_config(config_path: Path | str | None = None) -> AppConfig:
    """Read settings from a YAML file.

    Sections or keys missing from the file keep their defaults, so an absent
    or empty file gives ``AppConfig()``.

    Args:
        config_path: File to read. Defaults to scryscreen.yaml in the working directory

    Returns:
        Validated AppConfig

    Raises:
        ValueError: If the file does not hold a mapping of sections
        pydantic.ValidationError: If a value is out of range
    """
    path = _config_file(config_path)
    if not path.is_file():
        logger.debug(f"No config at {path}, using defaults")
        return AppConfig()

    data = yaml.safe_load(path.read_text(encoding="utf-8"))
    if data is None:
        return AppConfig()
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a mapping of config sections")

    return AppConfig.model_validate(data)


def save_config(config: AppConfig, config_path: Path | str | None = None) -> Path:
    """Write settings as YAML, section by section.

    Returns:
        The path written
    """
    path = _config_file(config_path)
    path.write_text(
        yaml.safe_dump(config.model_dump(), default_flow_style=False, sort_keys=False),
        encoding="utf-8",
    )
    logger.info(f"Saved config to {path}")
    return path


def configure_logging(config: AppConfig | None = None) -> None:
    """Configure the root logger from the logging section.

    Unknown level names fall back to INFO.
    """
    if config is None:
        config = get_config()
    level = logging.getLevelName(config.logging.level.upper())
    if not isinstance(level, int):
        level = logging.INFO
    logging.basicConfig(level=level, format=config.logging.format)


_config: AppConfig | None = None


def get_config() -> AppConfig:
    """Process-wide settings, loaded from the working directory on first use."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reload_config(config_path: Path | str | None = None) -> AppConfig:
    """Replace the process-wide settings with a fresh read of ``config_path``."""
    global _config
    _config = load_config(config_path)
    return _config
