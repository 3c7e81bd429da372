"""
Text rendering of a factory floor.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from factoryfloor.core.floor import FactoryFloor


def render_position(position: int, blocks) -> str:
    """Format one position as ``"{pos}: b0 b1 ..."``, or ``"{pos}:"`` when empty."""
    return f"{position}:" + "".join(f" {block}" for block in blocks)


def render(floor: "FactoryFloor", divider: str = "\n") -> str:
    """
    Render every floor position, bottom block first.

    Args:
        floor: Floor to render
        divider: Placed between consecutive positions

    Returns:
        e.g. ``"0: 0 | 1: | 2: 2 1"`` for the divider ``" | "``
    """
    return divider.join(
        render_position(position, floor.get_blocks_at(position))
        for position in range(floor.position_count)
    )
