"""Utility modules for factoryfloor."""

from factoryfloor.utils.render import render, render_position
from factoryfloor.utils.display import StatusDisplay, LiveLogger
from factoryfloor.utils.logger import ExperimentLogger
from factoryfloor.utils.visualizer import render_image, visualize_floor

__all__ = [
    "render",
    "render_position",
    "StatusDisplay",
    "LiveLogger",
    "ExperimentLogger",
    "render_image",
    "visualize_floor",
]
