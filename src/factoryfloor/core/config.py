"""
Configuration management for factoryfloor.

This module handles loading and validation of YAML configuration files and
provides typed configuration objects.
"""

import os
import yaml
from typing import Any, Dict, List, Optional
from dataclasses import dataclass, field
from pathlib import Path


@dataclass
class FloorConfig:
    """Configuration for the floor itself."""
    position_count: int = 10
    divider: str = "\n"

    def __post_init__(self):
        if not isinstance(self.position_count, int) or isinstance(self.position_count, bool):
            raise ValueError("position_count must be an integer")
        if self.position_count < 0:
            raise ValueError("position_count must be a non-negative integer")
        if not isinstance(self.divider, str):
            raise ValueError("divider must be a string")


@dataclass
class RenderConfig:
    """Configuration for floor images."""
    image_width: int = 640
    image_height: int = 480
    dpi: int = 100

    def __post_init__(self):
        if not isinstance(self.image_width, int) or self.image_width <= 0:
            raise ValueError("image_width must be a positive integer")
        if not isinstance(self.image_height, int) or self.image_height <= 0:
            raise ValueError("image_height must be a positive integer")
        if not isinstance(self.dpi, int) or self.dpi <= 0:
            raise ValueError("dpi must be a positive integer")


@dataclass
class RunnerConfig:
    """Configuration for running command scripts."""
    experiment_name: str = "factory_floor"
    log_dir: str = "logs"
    script_path: Optional[str] = None
    save_logs: bool = False
    save_images: bool = False
    results_csv_path: Optional[str] = None
    verbose: bool = False

    def __post_init__(self):
        # Directory creation is deferred to the logger to avoid side effects on load
        if not isinstance(self.experiment_name, str):
            raise ValueError("experiment_name must be a string")
        if self.save_images and not self.save_logs:
            import warnings
            warnings.warn(
                "save_images is enabled but save_logs is not; "
                "images are only written as part of the step logs."
            )


@dataclass
class Config:
    """Main configuration object."""
    floor: FloorConfig = field(default_factory=FloorConfig)
    runner: RunnerConfig = field(default_factory=RunnerConfig)
    render: RenderConfig = field(default_factory=RenderConfig)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Config":
        """Create Config from dictionary."""
        floor = FloorConfig(**(data.get("floor") or {}))
        runner = RunnerConfig(**(data.get("runner") or {}))
        render = RenderConfig(**(data.get("render") or {}))
        return cls(floor=floor, runner=runner, render=render)

    def to_dict(self) -> Dict[str, Any]:
        """Convert Config to dictionary."""
        return {
            "floor": {k: v for k, v in self.floor.__dict__.items()},
            "runner": {k: v for k, v in self.runner.__dict__.items()},
            "render": {k: v for k, v in self.render.__dict__.items()},
        }


def load_config(config_path: str) -> Config:
    """
    Load configuration from YAML file.

    Args:
        config_path: Path to YAML configuration file

    Returns:
        Config object

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If the file is empty, malformed, or has invalid fields
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path, 'r', encoding='utf-8') as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Error parsing YAML config: {e}")

    if not data:
        raise ValueError("Configuration file is empty")
    if not isinstance(data, dict):
        raise ValueError("Configuration file must contain a mapping")

    try:
        return Config.from_dict(data)
    except (TypeError, ValueError) as e:
        raise ValueError(f"Error creating config from data: {e}")


def create_default_config(output_path: str = "config.yaml", position_count: int = 10) -> Config:
    """
    Create a default configuration file.

    Args:
        output_path: Path where to save the default config
        position_count: Number of floor positions

    Returns:
        Default Config object
    """
    config = Config(floor=FloorConfig(position_count=position_count))

    with open(output_path, 'w', encoding='utf-8') as f:
        yaml.dump(config.to_dict(), f, default_flow_style=False, indent=2)

    return config


def validate_config(config: Config) -> List[str]:
    """
    Validate configuration and return list of warnings/errors.

    Args:
        config: Configuration to validate

    Returns:
        List of validation messages
    """
    issues = []

    if not config.runner.experiment_name:
        issues.append("ERROR: Experiment name is required")

    if config.runner.script_path and config.runner.script_path != "-":
        if not os.path.exists(config.runner.script_path):
            issues.append(f"WARNING: Script file does not exist: {config.runner.script_path}")

    if config.runner.save_images and not config.runner.save_logs:
        issues.append("WARNING: save_images has no effect unless save_logs is enabled")

    if config.floor.position_count == 0:
        issues.append("WARNING: Floor has no positions; every move will fail")

    return issues
