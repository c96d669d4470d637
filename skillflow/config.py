"""Configuration management for the skill flow editor."""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

logger = logging.getLogger(__name__)


@dataclass
class LayoutConfig:
    """Node placement used when materializing trees and adding nodes."""

    # Materialize
    root_x: float = 0.0
    root_y: float = 0.0
    spacing_x: float = 500.0
    spacing_y: float = 800.0
    # Requirement children sit straight below their gate
    requirement_offset_y: float = 200.0

    # add_node: next to the rightmost existing sibling
    sibling_offset_x: float = 250.0
    sibling_offset_y: float = 100.0
    # add_node: first child of a parent
    first_child_offset_x: float = 150.0
    first_child_offset_y: float = 200.0
    # add_node: no parent
    orphan_x: float = 100.0
    orphan_y: float = 100.0


@dataclass
class EditorConfig:
    """Editor behaviour settings."""

    default_owner: str = "Octoio"
    id_prefix: str = "node_"
    json_indent: int = 2
    # Drop nodes detached from the root before reconstructing on export
    prune_orphans_on_export: bool = False


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    file: Optional[str] = None


@dataclass
class Config:
    """Main configuration container."""

    layout: LayoutConfig = field(default_factory=LayoutConfig)
    editor: EditorConfig = field(default_factory=EditorConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def _env_flag(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


def load_config(config_path: Optional[str] = None) -> Config:
    """
    Load configuration from YAML file with environment variable overrides.

    Args:
        config_path: Path to config file. Defaults to config/default.yaml

    Returns:
        Populated Config dataclass
    """
    if config_path is None:
        # Look for config in standard locations
        candidates = [
            Path("config/default.yaml"),
            Path(__file__).parent.parent / "config" / "default.yaml",
        ]
        for candidate in candidates:
            if candidate.exists():
                config_path = str(candidate)
                break

    config = Config()

    if config_path and Path(config_path).exists():
        with open(config_path) as f:
            data = yaml.safe_load(f)

        if data:
            if "layout" in data:
                config.layout = LayoutConfig(**data["layout"])
            if "editor" in data:
                config.editor = EditorConfig(**data["editor"])
            if "logging" in data:
                config.logging = LoggingConfig(**data["logging"])
    elif config_path:
        logger.warning(f"Config file not found: {config_path}, using defaults")

    # Environment variable overrides
    if os.environ.get("SKILLFLOW_LOG_LEVEL"):
        config.logging.level = os.environ["SKILLFLOW_LOG_LEVEL"]
    if os.environ.get("SKILLFLOW_DEFAULT_OWNER"):
        config.editor.default_owner = os.environ["SKILLFLOW_DEFAULT_OWNER"]
    if os.environ.get("SKILLFLOW_PRUNE_ORPHANS"):
        config.editor.prune_orphans_on_export = _env_flag(os.environ["SKILLFLOW_PRUNE_ORPHANS"])

    return config


def setup_logging(config: LoggingConfig) -> None:
    """
    Configure logging based on configuration.

    Args:
        config: Logging configuration
    """
    level = getattr(logging, config.level.upper(), logging.INFO)

    handlers: list[logging.Handler] = [logging.StreamHandler()]

    if config.file:
        # Ensure log directory exists
        log_path = Path(config.file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(config.file))

    logging.basicConfig(
        level=level,
        format=config.format,
        handlers=handlers,
    )

    # Reduce noise from third-party libraries
    logging.getLogger("asyncio").setLevel(logging.WARNING)
    logging.getLogger("markdown_it").setLevel(logging.WARNING)

    logger.info(f"Logging configured at level {config.level}")
