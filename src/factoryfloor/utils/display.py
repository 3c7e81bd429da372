"""
Console output for the factoryfloor CLI.
"""

import time
from datetime import datetime
from typing import Any, Dict

from factoryfloor.core.base import ErrorCode, MoveResult

STATUS_ICONS = {
    "info": "ℹ️",
    "success": "✅",
    "warning": "⚠️",
    "error": "❌",
    "processing": "🔄",
}

OUTCOME_ICONS = {
    ErrorCode.OK: "✅",
    ErrorCode.NOOP: "➖",
}


class StatusDisplay:
    """Section, status and step lines printed by the CLI."""

    @staticmethod
    def print_section(title: str, width: int = 60):
        print(f"\n📋 {title}")
        print("-" * width)

    @staticmethod
    def print_config(config_dict: Dict[str, Any], title: str = "Configuration"):
        """Print configuration values; strings are quoted so dividers stay visible."""
        StatusDisplay.print_section(title)
        for key, value in config_dict.items():
            shown = repr(value) if isinstance(value, str) else value
            print(f"  {key:<20} : {shown}")

    @staticmethod
    def print_status(message: str, status: str = "info"):
        icon = STATUS_ICONS.get(status, STATUS_ICONS["info"])
        timestamp = datetime.now().strftime("%H:%M:%S")
        print(f"{icon} [{timestamp}] {message}")

    @staticmethod
    def print_results(results: Dict[str, Any], title: str = "Results"):
        StatusDisplay.print_section(title)
        for key, value in results.items():
            print(f"  {key:<20} : {value}")

    @staticmethod
    def print_step_summary(step: int, result: MoveResult):
        """Print one command outcome, e.g. ``Step  3: ✅ OK         move 1 onto 2: moved``."""
        icon = OUTCOME_ICONS.get(result.error, "❌")
        print(f"  Step {step:2d}: {icon} {result.error.value:<15} {result.message}")


class LiveLogger:
    """Timestamped progress messages; only errors are printed when not verbose."""

    def __init__(self, verbose: bool = True):
        self.verbose = verbose
        self.start_time = time.time()

    def log_action(self, action_name: str, details: str = ""):
        if self.verbose:
            message = f"Executing: {action_name}"
            if details:
                message += f" - {details}"
            StatusDisplay.print_status(message, "processing")

    def log_result(self, message: str, success: bool = True):
        if self.verbose:
            StatusDisplay.print_status(message, "success" if success else "error")

    def log_info(self, message: str):
        if self.verbose:
            StatusDisplay.print_status(message, "info")

    def log_warning(self, message: str):
        if self.verbose:
            StatusDisplay.print_status(message, "warning")

    def log_error(self, message: str):
        StatusDisplay.print_status(message, "error")

    def elapsed(self) -> float:
        return time.time() - self.start_time
