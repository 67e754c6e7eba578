from __future__ import annotations
import logging
import random
from dataclasses import dataclass, field
from typing import Callable, Iterable, List, Optional, Protocol

from .grid import Grid, Position
from .tiles import Tile

logger = logging.getLogger(__name__)


class RandomSource(Protocol):
    def random(self) -> float: ...

    def shuffle(self, x: list) -> None: ...


@dataclass
class SpawnResult:
    new_tiles: List[Tile] = field(default_factory=list)
    free_before: int = 0
    lose_triggered: bool = False


class SpawnManager:
    """
    Places new tiles on randomly chosen empty nodes.

    Lose is decided on the free count *before* placement: with one free node
    or fewer left the board cannot recover after this spawn.
    """

    def __init__(self, rng: Optional[RandomSource] = None, seed: Optional[int] = None,
                 four_threshold: float = 0.8):
        self.rng: RandomSource = rng if rng is not None else random.Random(seed)
        self.four_threshold = four_threshold

    def reseed(self, seed: Optional[int]) -> None:
        if isinstance(self.rng, random.Random):
            self.rng.seed(seed)

    def draw_value(self) -> int:
        return 4 if self.rng.random() > self.four_threshold else 2

    def free_nodes(self, grid: Grid) -> List[Position]:
        nodes = grid.empty_nodes()
        self.rng.shuffle(nodes)
        return nodes

    def spawn_blocks(self, grid: Grid, amount: int,
                     create_tile: Callable[[Position, int], Tile]) -> SpawnResult:
        free = self.free_nodes(grid)
        result = SpawnResult(free_before=len(free))
        for node in free[:amount]:
            result.new_tiles.append(create_tile(node, self.draw_value()))
        result.lose_triggered = result.free_before <= 1
        logger.debug("spawned %s with %d free node(s) before placement",
                     [(t.value, tuple(t.position)) for t in result.new_tiles], result.free_before)
        return result


def reached_win(tiles: Iterable[Tile], win_condition: int) -> bool:
    return any(t.value == win_condition for t in tiles)
