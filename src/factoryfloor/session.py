"""
Command session over a factory floor.

A session wraps a FactoryFloor so it can be driven by text commands
(``move 9 onto 1``, ``pile 8 over 6``, ``quit``) or by named tool calls.
Floor errors are turned into result values here; the floor itself raises.
"""

from __future__ import annotations

import re
from typing import Any, Dict, Iterable, List, Optional

from factoryfloor.core import (
    Action,
    CommandParseError,
    Config,
    ErrorCode,
    FactoryFloor,
    FloorError,
    MoveMode,
    MoveResult,
    RenderConfig,
    TOOL_REGISTRY,
    TOOL_SPEC_REGISTRY,
    register_tool,
)
from factoryfloor.utils.logger import ExperimentLogger
from factoryfloor.utils.render import render
from factoryfloor.utils.visualizer import render_image

COMMAND_PATTERN = re.compile(r"^(move|pile)\s+(-?\d+)\s+(onto|over)\s+(-?\d+)$", re.IGNORECASE)
QUIT_COMMAND = "quit"

BLOCK_PARAMETERS = ("block_from", "block_to")
BLOCK_ID_PATTERN = re.compile(r"^-?\d+$")


def parse_command(line: str) -> Optional[Action]:
    """
    Parse one command line into an Action.

    Blank lines and ``#`` comments give None. ``quit`` gives an Action of
    type ``quit``.

    Raises:
        CommandParseError: If the line is not a known command
    """
    text = line.strip()
    if not text or text.startswith("#"):
        return None

    if text.lower() == QUIT_COMMAND:
        return Action(action_type=QUIT_COMMAND)

    match = COMMAND_PATTERN.match(text)
    if not match:
        raise CommandParseError(f"cannot parse command: {text!r}")

    verb, block_from, preposition, block_to = match.groups()
    mode = MoveMode.from_words(verb, preposition)
    return Action(
        action_type=mode.tool_name,
        parameters={"block_from": int(block_from), "block_to": int(block_to)},
    )


def _block_id(value: Any) -> int:
    """Accept an int or a string of digits as a block id; anything else is rejected."""
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, str) and BLOCK_ID_PATTERN.match(value.strip()):
        return int(value)
    raise ValueError(f"block id must be an integer, got {value!r}")


class FloorSession:
    """Tool-call and command-script front end for a floor."""

    def __init__(self,
                 floor: FactoryFloor,
                 logger: Optional[ExperimentLogger] = None,
                 render_config: Optional[RenderConfig] = None,
                 save_images: bool = False,
                 verbose: bool = False):
        self.floor = floor
        self.logger = logger
        self.render_config = render_config or RenderConfig()
        self.save_images = save_images
        self.verbose = verbose
        self.step_count: int = 0
        self.stopped: bool = False
        self.history: List[MoveResult] = []

    @classmethod
    def from_config(cls, config: Config, logger: Optional[ExperimentLogger] = None) -> "FloorSession":
        return cls(
            FactoryFloor.new_instance(config.floor.position_count),
            logger=logger,
            render_config=config.render,
            save_images=config.runner.save_images,
            verbose=config.runner.verbose,
        )

    # ------------------------------------------------------------------ #
    # Tools
    # ------------------------------------------------------------------ #
    def get_tool_schemas(self) -> List[Dict[str, Any]]:
        """Return JSON schemas for the registered tools."""
        schemas = []
        for name, (description, parameters) in TOOL_SPEC_REGISTRY.items():
            properties = {
                param: {"type": "integer", "description": f"Block id ({param.replace('_', ' ')})."}
                for param in parameters
            }
            schemas.append({
                "type": "function",
                "function": {
                    "name": name,
                    "description": description,
                    "parameters": {
                        "type": "object",
                        "properties": properties,
                        "required": list(parameters),
                    },
                },
            })
        return schemas

    def execute_tool_call(self, tool_name: str, arguments: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Dispatch a tool call and return a status dict."""
        handler = TOOL_REGISTRY.get(tool_name)
        if not handler:
            return {
                "status": "error",
                "message": f"Unknown tool '{tool_name}'",
                "error": ErrorCode.UNKNOWN_COMMAND.value,
            }
        try:
            return handler(self, **(arguments or {}))
        except FloorError as exc:
            return {"status": "error", "message": str(exc), "error": exc.code.value}
        except (TypeError, ValueError) as exc:
            return {
                "status": "error",
                "message": f"Tool '{tool_name}' got bad arguments: {exc}",
                "error": ErrorCode.INVALID_ARGUMENT.value,
            }

    @register_tool("state", "Show every floor position and the blocks piled on it.")
    def _tool_state(self) -> Dict[str, Any]:
        return {
            "status": "success",
            "message": "State retrieved",
            "floor": render(self.floor, " | "),
            "positions": {position: list(blocks) for position, blocks in self.floor.positions()},
        }

    @register_tool("move_onto",
                   "Move a block onto another block, first returning blocks stacked on either of them to their home positions.",
                   BLOCK_PARAMETERS)
    def _tool_move_onto(self, block_from, block_to) -> Dict[str, Any]:
        return self._tool_move(MoveMode.MOVE_ONTO, block_from, block_to)

    @register_tool("move_over",
                   "Move a block to the top of the pile holding another block, first returning blocks stacked on the moved block to their home positions.",
                   BLOCK_PARAMETERS)
    def _tool_move_over(self, block_from, block_to) -> Dict[str, Any]:
        return self._tool_move(MoveMode.MOVE_OVER, block_from, block_to)

    @register_tool("pile_onto",
                   "Move a block together with everything stacked on it onto another block, first returning blocks stacked on the target to their home positions.",
                   BLOCK_PARAMETERS)
    def _tool_pile_onto(self, block_from, block_to) -> Dict[str, Any]:
        return self._tool_move(MoveMode.PILE_ONTO, block_from, block_to)

    @register_tool("pile_over",
                   "Move a block together with everything stacked on it to the top of the pile holding another block.",
                   BLOCK_PARAMETERS)
    def _tool_pile_over(self, block_from, block_to) -> Dict[str, Any]:
        return self._tool_move(MoveMode.PILE_OVER, block_from, block_to)

    def _tool_move(self, mode: MoveMode, block_from, block_to) -> Dict[str, Any]:
        block_from, block_to = _block_id(block_from), _block_id(block_to)
        moved = self.floor.move(block_from, block_to, mode)
        words = mode.tool_name.replace("_", f" {block_from} ", 1)
        return {
            "status": "success" if moved else "noop",
            "message": f"{words} {block_to}: {'moved' if moved else 'nothing to move'}",
            "floor": render(self.floor, " | "),
        }

    # ------------------------------------------------------------------ #
    # Commands
    # ------------------------------------------------------------------ #
    def start(self) -> None:
        """Record the initial floor."""
        self._log({"step_type": "initial", "floor": render(self.floor, " | ")})

    def step(self, action: Action) -> MoveResult:
        """Execute one action and record its result."""
        self.step_count += 1
        tool_result = self.execute_tool_call(action.action_type, action.parameters)
        status = tool_result["status"]
        if status == "success":
            error = ErrorCode.OK
        elif status == "noop":
            error = ErrorCode.NOOP
        else:
            error = ErrorCode(tool_result["error"])

        result = MoveResult(
            success=status == "success",
            error=error,
            action=action,
            message=tool_result["message"],
        )
        self.history.append(result)
        self._log({
            "step_type": "action" if status != "error" else "error",
            "action": action.to_dict(),
            "tool_result": tool_result,
            "error": tool_result["message"] if status == "error" else None,
        })
        return result

    def run_line(self, line: str) -> Optional[MoveResult]:
        """
        Parse and execute a single command line.

        Returns None for blank and comment lines, and for every line once
        ``quit`` has been seen.
        """
        if self.stopped:
            return None
        try:
            action = parse_command(line)
        except CommandParseError as exc:
            self.step_count += 1
            result = MoveResult(success=False, error=exc.code, message=str(exc))
            self.history.append(result)
            self._log({"step_type": "error", "line": line.rstrip("\n"), "error": str(exc)})
            return result

        if action is None:
            return None
        if action.action_type == QUIT_COMMAND:
            self.stopped = True
            return MoveResult(success=True, error=ErrorCode.OK, action=action, message="quit")
        return self.step(action)

    def run_script(self, lines: Iterable[str]) -> List[MoveResult]:
        """Execute command lines until the input ends or ``quit`` is read."""
        results = []
        for line in lines:
            result = self.run_line(line)
            if result is not None:
                results.append(result)
            if self.stopped:
                break
        return results

    def summary(self) -> Dict[str, Any]:
        """Counts of what happened in this session."""
        return {
            "positions": self.floor.position_count,
            "commands": len(self.history),
            "moves": len([r for r in self.history if r.success]),
            "noops": len([r for r in self.history if r.error is ErrorCode.NOOP]),
            "errors": len([r for r in self.history if not r.success and r.error is not ErrorCode.NOOP]),
            "final_floor": render(self.floor, " | "),
        }

    def _log(self, data: Dict[str, Any]) -> None:
        if self.logger is None:
            return
        if self.save_images:
            data["image"] = render_image(
                self.floor,
                width=self.render_config.image_width,
                height=self.render_config.image_height,
                dpi=self.render_config.dpi,
                title=f"step {self.step_count}",
            )
        self.logger.log_step(self.step_count, data, verbose=self.verbose)
