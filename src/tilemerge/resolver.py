"""
Directional shift/merge resolution.

``plan_move`` is pure: it reads the grid and tiles and returns a ``MovePlan``
without touching either. ``commit_move`` applies a plan once the caller's
animation (if any) has finished.
"""
from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, NamedTuple, Optional, Sequence

from .errors import MergeConflictError
from .grid import Direction, Grid, Position
from .tiles import Tile

logger = logging.getLogger(__name__)


class MoveRecord(NamedTuple):
    tile: Tile
    start: Position
    end: Position  # where the tile travels to; a merging tile travels onto its target


class MergePair(NamedTuple):
    survivor: Tile
    absorbed: Tile


@dataclass
class MovePlan:
    direction: Direction
    records: List[MoveRecord] = field(default_factory=list)
    final_positions: Dict[int, Position] = field(default_factory=dict)
    # (survivor, absorbed): the only link from a moving tile to the tile it merges into
    merges: List[MergePair] = field(default_factory=list)

    @property
    def moved(self) -> bool:
        return bool(self.merges) or any(r.start != r.end for r in self.records)


def resolution_order(tiles: Iterable[Tile], direction: Direction) -> List[Tile]:
    # leading edge first so trailing tiles slide into what it vacates
    ordered = sorted(tiles, key=lambda t: (t.position.x, t.position.y))
    if direction in (Direction.RIGHT, Direction.UP):
        ordered.reverse()
    return ordered


def plan_move(grid: Grid, tiles: Sequence[Tile], direction) -> MovePlan:
    direction = Direction.parse(direction)
    plan = MovePlan(direction=direction)

    occupants: Dict[Position, Tile] = {t.position: t for t in tiles}
    claimed: Dict[int, int] = {}  # target id -> absorbed id

    for tile in resolution_order(tiles, direction):
        start = current = tile.position
        target: Optional[Tile] = None
        while True:
            nxt = current.shifted(direction)
            if not grid.in_bounds(nxt):
                break
            occupant = occupants.get(nxt)
            if occupant is None:
                del occupants[current]
                occupants[nxt] = tile
                current = nxt
                continue
            if occupant.can_merge(tile.value) and occupant.id not in claimed:
                target = occupant
                claimed[occupant.id] = tile.id
                # the merging tile frees its node for tiles behind it
                del occupants[current]
            break

        plan.final_positions[tile.id] = current
        if target is not None:
            plan.merges.append(MergePair(survivor=target, absorbed=tile))
            plan.records.append(MoveRecord(tile, start, plan.final_positions[target.id]))
        else:
            plan.records.append(MoveRecord(tile, start, current))

    _check_exclusive(plan.merges)
    return plan


def _check_exclusive(merges: Sequence[MergePair]) -> None:
    survivors = [p.survivor.id for p in merges]
    involved = survivors + [p.absorbed.id for p in merges]
    if len(set(involved)) != len(involved):
        raise MergeConflictError(f"tile merged more than once in a single move: {merges}")


def merge_blocks(survivor: Tile, absorbed: Tile,
                 create_tile: Callable[[Position, int], Tile],
                 remove_tile: Callable[[Tile], None]) -> Tile:
    """Replace ``survivor`` and ``absorbed`` by a new tile of double value on the survivor's node."""
    pos = survivor.position
    value = survivor.value * 2
    remove_tile(survivor)
    remove_tile(absorbed)
    new_tile = create_tile(pos, value)
    logger.debug("merged tiles %d + %d -> %d (value %d) at %s", survivor.id, absorbed.id, new_tile.id, value, pos)
    return new_tile


def commit_move(grid: Grid, plan: MovePlan,
                create_tile: Callable[[Position, int], Tile],
                remove_tile: Callable[[Tile], None]) -> List[Tile]:
    """Apply final positions then merges. Returns the tiles created by merging."""
    tiles = [r.tile for r in plan.records]
    for tile in tiles:
        grid.release(tile)
    absorbed_ids = {p.absorbed.id for p in plan.merges}
    for tile in tiles:
        if tile.id not in absorbed_ids:
            grid.place(tile, plan.final_positions[tile.id])
    return [merge_blocks(p.survivor, p.absorbed, create_tile, remove_tile) for p in plan.merges]
