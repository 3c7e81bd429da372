"""
Core modules for factoryfloor.

This package contains the fundamental components:
- Block, action and result types plus the error hierarchy
- The FactoryFloor itself
- Configuration management
- Registry for session tools
"""

from factoryfloor.core.base import (
    Action,
    Block,
    CommandParseError,
    ErrorCode,
    FloorError,
    InvalidArgumentError,
    MoveMode,
    MoveResult,
    NotFoundError,
)

from factoryfloor.core.floor import FactoryFloor

from factoryfloor.core.config import Config, FloorConfig, RenderConfig, RunnerConfig, load_config, create_default_config, validate_config

from factoryfloor.core.registry import register_tool, TOOL_REGISTRY, TOOL_SPEC_REGISTRY

__all__ = [
    "Action",
    "Block",
    "CommandParseError",
    "ErrorCode",
    "FloorError",
    "InvalidArgumentError",
    "MoveMode",
    "MoveResult",
    "NotFoundError",
    "FactoryFloor",
    "Config",
    "FloorConfig",
    "RenderConfig",
    "RunnerConfig",
    "load_config",
    "create_default_config",
    "validate_config",
    "register_tool",
    "TOOL_REGISTRY",
    "TOOL_SPEC_REGISTRY",
]
