"""
Factory floor: a fixed row of positions holding piles of numbered blocks.

Every position starts with a single block whose id equals the position index,
and that position is the block's home. Blocks are relocated by the four move
operations; resets send disturbed blocks back to their home positions.
"""

from __future__ import annotations
from typing import Dict, Iterator, List, Tuple

from factoryfloor.core.base import Block, InvalidArgumentError, MoveMode, NotFoundError


class FactoryFloor:
    """Stateful container of positions and the blocks piled on them."""

    def __init__(self, position_count: int):
        if position_count < 0:
            raise InvalidArgumentError(
                f"position_count must not be negative, got {position_count}"
            )

        # block id -> block (with its home position)
        self._blocks: Dict[int, Block] = {}

        # where to find a block: block id -> floor position
        self._block_position: Dict[int, int] = {}

        # blocks on each position, bottom to top
        self._blocks_on_position: Dict[int, List[int]] = {}

        # blocks start on the position matching their id
        for position in range(position_count):
            self._blocks_on_position[position] = []
            self._blocks[position] = Block(block_id=position, home=position)
            self._put(position, position)

    @classmethod
    def new_instance(cls, position_count: int) -> "FactoryFloor":
        """Return a new floor with ``position_count`` positions, one block on each."""
        return cls(position_count)

    # ------------------------------------------------------------------ #
    # Queries
    # ------------------------------------------------------------------ #
    @property
    def position_count(self) -> int:
        return len(self._blocks_on_position)

    def __len__(self) -> int:
        return self.position_count

    def get_blocks_at(self, position: int) -> Tuple[int, ...]:
        """
        Return the blocks at a position, bottom block first.

        The result is a snapshot: later moves do not change it.

        Raises:
            NotFoundError: If the position is not on this floor
        """
        self._confirm_legal(position, "position")
        return tuple(self._blocks_on_position[position])

    def get_block_position(self, block: int) -> int:
        """
        Return the floor position currently holding a block.

        Raises:
            NotFoundError: If the block is not on this floor
        """
        self._confirm_legal(block, "block")
        return self._block_position[block]

    def get_block_home(self, block: int) -> int:
        """Return the position a block is sent back to when reset."""
        self._confirm_legal(block, "block")
        return self._blocks[block].home

    def positions(self) -> Iterator[Tuple[int, Tuple[int, ...]]]:
        """Yield ``(position, blocks)`` pairs in position order."""
        for position in range(self.position_count):
            yield position, tuple(self._blocks_on_position[position])

    def check_invariants(self) -> List[str]:
        """
        Check block bookkeeping and return a list of violations.

        An empty list means every block sits on exactly one position and the
        block -> position map agrees with the piles.
        """
        issues = []
        seen: Dict[int, int] = {}
        for position, pile in self._blocks_on_position.items():
            for block in pile:
                if block in seen:
                    issues.append(f"block {block} is on positions {seen[block]} and {position}")
                    continue
                seen[block] = position
                recorded = self._block_position.get(block)
                if recorded != position:
                    issues.append(f"block {block} is on position {position} but recorded at {recorded}")

        missing = sorted(set(self._blocks) - set(seen))
        if missing:
            issues.append(f"blocks missing from every position: {missing}")

        unknown = sorted(set(seen) - set(self._blocks))
        if unknown:
            issues.append(f"unknown blocks on the floor: {unknown}")

        stale = sorted(set(self._block_position) - set(seen))
        if stale:
            issues.append(f"blocks recorded but not on any position: {stale}")

        return issues

    # ------------------------------------------------------------------ #
    # Moves
    # ------------------------------------------------------------------ #
    def move_onto(self, block_from: int, block_to: int) -> bool:
        """
        Move a block onto another block.

        Blocks above both blocks are first returned to their home positions.
        Returns True if one or more blocks moved.
        """
        return self.move(block_from, block_to, MoveMode.MOVE_ONTO)

    def move_over(self, block_from: int, block_to: int) -> bool:
        """
        Move a block to the top of the pile holding another block.

        Blocks above the moved block are first returned to their home positions.
        """
        return self.move(block_from, block_to, MoveMode.MOVE_OVER)

    def pile_onto(self, block_from: int, block_to: int) -> bool:
        """
        Move a block, and the blocks above it, onto another block.

        Blocks above the target block are first returned to their home positions.
        """
        return self.move(block_from, block_to, MoveMode.PILE_ONTO)

    def pile_over(self, block_from: int, block_to: int) -> bool:
        """Move a block, and the blocks above it, to the top of another block's pile."""
        return self.move(block_from, block_to, MoveMode.PILE_OVER)

    def move(self, block_from: int, block_to: int, mode: MoveMode) -> bool:
        """
        Move a block, which may move other blocks as well.

        Nothing happens if both ids are the same block or the two blocks
        already share a position.

        Args:
            block_from: Block to move
            block_to: The moved block lands on the position holding this block
            mode: Which piles are reset before moving

        Returns:
            True if one or more blocks moved

        Raises:
            NotFoundError: If either block is not on this floor
        """
        if block_from == block_to:
            return False

        # also confirms both ids are legal
        position_from = self.get_block_position(block_from)
        position_to = self.get_block_position(block_to)

        if position_from == position_to:
            return False

        if mode.reset_from:
            self._reset_position(position_from, block_from)
        if mode.reset_to:
            self._reset_position(position_to, block_to)

        self._transfer(position_from, position_to, block_from)
        return True

    # ------------------------------------------------------------------ #
    # Primitives
    # ------------------------------------------------------------------ #
    def _confirm_legal(self, element_id: int, kind: str) -> None:
        # blocks and positions share the id range [0, position_count)
        if element_id < 0 or element_id >= self.position_count:
            raise NotFoundError(f"no {kind} at {element_id}")

    def _put(self, position: int, block: int) -> None:
        self._block_position[block] = position
        self._blocks_on_position[position].append(block)

    def _take(self, position: int) -> int:
        # the block is in transit until the next _put
        block = self._blocks_on_position[position].pop()
        del self._block_position[block]
        return block

    def _reset_position(self, position: int, stop_block: int) -> None:
        """Send every block above ``stop_block`` back to its home position."""
        pile = self._blocks_on_position[position]
        while pile:
            top_block = pile[-1]
            if top_block == stop_block:
                break
            self._transfer(position, self._blocks[top_block].home, top_block)

    def _transfer(self, position_from: int, position_to: int, through_block: int) -> None:
        """Move ``through_block`` and everything above it to the top of ``position_to``."""
        carried = []
        source = self._blocks_on_position[position_from]
        while source:
            carried.append(self._take(position_from))
            if carried[-1] == through_block:
                break

        while carried:
            self._put(position_to, carried.pop())

    # ------------------------------------------------------------------ #
    # Output
    # ------------------------------------------------------------------ #
    def output(self, divider: str) -> str:
        """Render the floor with positions separated by ``divider``."""
        from factoryfloor.utils.render import render
        return render(self, divider)

    def __str__(self) -> str:
        return self.output(" | ")

    def __repr__(self) -> str:
        return f"FactoryFloor(position_count={self.position_count})"
