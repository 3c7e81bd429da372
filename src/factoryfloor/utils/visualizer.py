"""
Picture of the floor - each position drawn as a column of numbered squares.
"""

import io
import os
from typing import TYPE_CHECKING, Optional

os.environ.setdefault("MPLBACKEND", "Agg")

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
from matplotlib.patches import Rectangle
import numpy as np
from PIL import Image

if TYPE_CHECKING:
    from factoryfloor.core.floor import FactoryFloor


# Predefined colour scheme, indexed by block home position
BLOCK_COLORS = [
    '#FF6B6B',
    '#4ECDC4',
    '#45B7D1',
    '#96CEB4',
    '#FFEAA7',
    '#DFE6E9',
    '#FD79A8',
    '#A29BFE',
    '#74B9FF',
    '#55EFC4',
    '#FDCB6E',
    '#E17055',
]


def get_block_color(home: int) -> str:
    return BLOCK_COLORS[home % len(BLOCK_COLORS)]


def visualize_floor(floor: "FactoryFloor",
                    title: Optional[str] = None,
                    figsize=(6.4, 4.8),
                    block_size: float = 0.9) -> plt.Figure:
    """
    Draw the floor as a matplotlib figure.

    Args:
        floor: Floor to draw
        title: Figure title
        figsize: Figure size in inches
        block_size: Edge of each square (0-1, leaves a gap)

    Returns:
        matplotlib Figure
    """
    fig, ax = plt.subplots(figsize=figsize)

    count = floor.position_count
    heights = np.array([len(blocks) for _, blocks in floor.positions()], dtype=int)
    max_height = int(heights.max()) if count else 0
    offset = (1.0 - block_size) / 2.0

    for position, blocks in floor.positions():
        for level, block in enumerate(blocks):
            x = position + offset
            y = level + offset
            ax.add_patch(Rectangle(
                (x, y), block_size, block_size,
                facecolor=get_block_color(floor.get_block_home(block)),
                edgecolor='black',
                linewidth=1.0,
            ))
            ax.text(position + 0.5, level + 0.5, str(block),
                    ha='center', va='center', fontsize=9)

    ax.set_xlim(0, max(count, 1))
    ax.set_ylim(0, max(max_height, 1) + 0.5)
    ax.set_xticks(np.arange(count) + 0.5)
    ax.set_xticklabels([str(p) for p in range(count)])
    ax.set_yticks([])
    ax.set_xlabel("position")
    ax.set_aspect('equal', adjustable='box')
    if title:
        ax.set_title(title)

    fig.tight_layout()
    return fig


def render_image(floor: "FactoryFloor",
                 width: int = 640,
                 height: int = 480,
                 dpi: int = 100,
                 title: Optional[str] = None) -> Image.Image:
    """Render the floor to an RGB PIL image of roughly ``width`` x ``height`` pixels."""
    fig = visualize_floor(floor, title=title, figsize=(width / dpi, height / dpi))
    buf = io.BytesIO()
    try:
        fig.savefig(buf, format="png", dpi=dpi)
    finally:
        plt.close(fig)
    buf.seek(0)
    return Image.open(buf).convert("RGB")
