"""
Base types for the factoryfloor blocks world.

This module defines the value objects shared by the floor, the command
session and the CLI: blocks, actions, move modes, result records and the
error hierarchy.
"""

from __future__ import annotations
from typing import Any, Dict, Optional, Tuple
from dataclasses import dataclass, field
from enum import Enum


class ErrorCode(Enum):
    """Outcome codes reported by the command session."""
    OK: str = "OK"
    NOOP: str = "NoOp"
    INVALID_ARGUMENT: str = "InvalidArgument"
    NOT_FOUND: str = "NotFound"
    PARSE_ERROR: str = "ParseError"
    UNKNOWN_COMMAND: str = "UnknownCommand"
    FLOOR_ERROR: str = "FloorError"


class FloorError(Exception):
    """Base class for all factory floor errors."""
    code: ErrorCode = ErrorCode.FLOOR_ERROR


class InvalidArgumentError(FloorError, ValueError):
    """Raised when a floor is constructed with a negative position count."""
    code = ErrorCode.INVALID_ARGUMENT


class NotFoundError(FloorError, LookupError):
    """Raised when a block or position id is outside the floor."""
    code = ErrorCode.NOT_FOUND


class CommandParseError(FloorError, ValueError):
    """Raised when a command line cannot be parsed."""
    code = ErrorCode.PARSE_ERROR


class MoveMode(Enum):
    """
    The four move variants.

    Each value is a ``(reset_from, reset_to)`` pair: "move" resets the pile
    above the moved block, "onto" resets the pile above the target block.
    """
    MOVE_ONTO: Tuple[bool, bool] = (True, True)
    MOVE_OVER: Tuple[bool, bool] = (True, False)
    PILE_ONTO: Tuple[bool, bool] = (False, True)
    PILE_OVER: Tuple[bool, bool] = (False, False)

    @property
    def reset_from(self) -> bool:
        return self.value[0]

    @property
    def reset_to(self) -> bool:
        return self.value[1]

    @property
    def tool_name(self) -> str:
        return self.name.lower()

    @classmethod
    def from_words(cls, verb: str, preposition: str) -> "MoveMode":
        """Look up a mode from its command words, e.g. ``("pile", "over")``."""
        return cls[f"{verb.upper()}_{preposition.upper()}"]


@dataclass(frozen=True)
class Block:
    """A block and the position it returns to when reset."""
    block_id: int
    home: int


@dataclass
class Action:
    """Represents a command to be executed against a floor."""
    action_type: str
    parameters: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert action to dictionary representation."""
        return {
            "action_type": self.action_type,
            "parameters": self.parameters,
        }


@dataclass
class MoveResult:
    """Result of a single command."""
    success: bool
    error: ErrorCode
    action: Optional[Action] = None
    message: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "error": self.error.value,
            "action": self.action.to_dict() if self.action else None,
            "message": self.message,
        }
