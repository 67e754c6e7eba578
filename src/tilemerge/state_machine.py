"""
Game flow: GenerateLevel -> SpawningBlocks -> WaitingInput <-> Moving -> (Win | Lose).

Each state has its own handler returning the next state (or None to stay
put). Transitions outside ``TRANSITIONS`` are rejected before the state changes.
"""
from __future__ import annotations
import itertools
import logging
from enum import Enum
from typing import Dict, FrozenSet, List, Optional

import numpy as np

from .collaborators import Animator, ImmediateAnimator, Instantiator, NullInstantiator
from .config import LevelConfig
from .errors import InvalidTransitionError
from .grid import Direction, Grid, Position, build_grid
from .resolver import MovePlan, commit_move, plan_move
from .spawner import RandomSource, SpawnManager, SpawnResult, reached_win
from .tiles import Tile

logger = logging.getLogger(__name__)


class GameState(Enum):
    GENERATE_LEVEL = "GenerateLevel"
    SPAWNING_BLOCKS = "SpawningBlocks"
    WAITING_INPUT = "WaitingInput"
    MOVING = "Moving"
    WIN = "Win"
    LOSE = "Lose"


TRANSITIONS: Dict[Optional[GameState], FrozenSet[GameState]] = {
    None: frozenset({GameState.GENERATE_LEVEL}),
    GameState.GENERATE_LEVEL: frozenset({GameState.SPAWNING_BLOCKS}),
    GameState.SPAWNING_BLOCKS: frozenset({GameState.LOSE, GameState.WIN, GameState.WAITING_INPUT}),
    GameState.WAITING_INPUT: frozenset({GameState.MOVING}),
    # WaitingInput only when no-op moves skip the spawn phase
    GameState.MOVING: frozenset({GameState.SPAWNING_BLOCKS, GameState.WAITING_INPUT}),
    GameState.WIN: frozenset(),
    GameState.LOSE: frozenset(),
}

TERMINAL_STATES = frozenset({GameState.WIN, GameState.LOSE})


class GameController:
    def __init__(
        self,
        config: Optional[LevelConfig] = None,
        rng: Optional[RandomSource] = None,
        seed: Optional[int] = None,
        animator: Optional[Animator] = None,
        instantiator: Optional[Instantiator] = None,
    ):
        self.config = config if config is not None else LevelConfig()
        self.registry = self.config.validate()
        self.spawner = SpawnManager(rng=rng, seed=seed, four_threshold=self.config.four_threshold)
        self.animator = animator if animator is not None else ImmediateAnimator()
        self.instantiator = instantiator if instantiator is not None else NullInstantiator()

        self.state: Optional[GameState] = None
        self.grid: Optional[Grid] = None
        self.tiles: Dict[int, Tile] = {}
        self.round = 0
        self.moves = 0
        self.last_spawn: Optional[SpawnResult] = None
        self.last_plan: Optional[MovePlan] = None
        self._ids = itertools.count(1)
        self._direction: Optional[Direction] = None
        self._pending: Optional[MovePlan] = None

        self._handlers = {
            GameState.GENERATE_LEVEL: self._on_generate_level,
            GameState.SPAWNING_BLOCKS: self._on_spawning_blocks,
            GameState.WAITING_INPUT: self._on_waiting_input,
            GameState.MOVING: self._on_moving,
            GameState.WIN: self._on_finished,
            GameState.LOSE: self._on_finished,
        }

    # -- lifecycle ------------------------------------------------------------

    def start(self) -> GameState:
        self.change_state(GameState.GENERATE_LEVEL)
        return self.state

    def restart(self) -> GameState:
        """Throw the current level away and build a fresh one, from any state."""
        self._pending = None
        self.state = None
        return self.start()

    def change_state(self, new_state: GameState) -> None:
        next_state: Optional[GameState] = new_state
        while next_state is not None:
            if not isinstance(next_state, GameState):
                raise InvalidTransitionError(f"unknown game state: {next_state!r}")
            if next_state not in TRANSITIONS[self.state]:
                raise InvalidTransitionError(
                    f"cannot go from {self.state.value if self.state else None} to {next_state.value}"
                )
            logger.debug("state %s -> %s", self.state.value if self.state else None, next_state.value)
            self.state = next_state
            next_state = self._handlers[next_state]()

    # -- input ----------------------------------------------------------------

    def handle_input(self, direction) -> bool:
        """Start a move. Returns False (and does nothing) unless waiting for input."""
        direction = Direction.parse(direction)
        if self.state is not GameState.WAITING_INPUT:
            logger.debug("ignoring %s while %s", direction.name, self.state.value if self.state else None)
            return False
        self._direction = direction
        self.change_state(GameState.MOVING)
        return True

    def complete_move(self) -> None:
        """Animation finished: apply the pending plan's merges and spawn again."""
        if self.state is not GameState.MOVING or self._pending is None:
            raise InvalidTransitionError("no move in flight")
        plan, self._pending = self._pending, None
        commit_move(self.grid, plan, self._spawn_tile, self._remove_tile)
        self.moves += 1
        self.change_state(GameState.SPAWNING_BLOCKS)

    # -- state handlers -------------------------------------------------------

    def _on_generate_level(self) -> GameState:
        for tile in list(self.tiles.values()):
            self._remove_tile(tile)
        self.grid = build_grid(self.config.width, self.config.height)
        self.tiles = {}
        self.round = 0
        self.moves = 0
        self.last_plan = None
        self.last_spawn = None
        return GameState.SPAWNING_BLOCKS

    def _on_spawning_blocks(self) -> GameState:
        amount = 2 if self.round == 0 else 1
        self.round += 1
        self.last_spawn = self.spawner.spawn_blocks(self.grid, amount, self._spawn_tile)
        if self.last_spawn.lose_triggered:
            return GameState.LOSE
        if reached_win(self.tiles.values(), self.config.win_condition):
            return GameState.WIN
        return GameState.WAITING_INPUT

    def _on_waiting_input(self) -> None:
        return None

    def _on_moving(self) -> Optional[GameState]:
        plan = plan_move(self.grid, list(self.tiles.values()), self._direction)
        self.last_plan = plan
        if self.config.skip_spawn_on_noop and not plan.moved:
            return GameState.WAITING_INPUT
        self._pending = plan
        self.animator.animate(plan, self.config.travel_time, self.complete_move)
        return None

    def _on_finished(self) -> None:
        logger.info("game finished: %s after %d move(s), max tile %d", self.state.value, self.moves, self.max_tile())
        return None

    # -- tile lifecycle -------------------------------------------------------

    def _spawn_tile(self, pos: Position, value: int) -> Tile:
        tile_type = self.registry.lookup(value)
        tile = Tile(id=next(self._ids), value=value)
        self.grid.place(tile, pos)
        self.tiles[tile.id] = tile
        self.instantiator.create(tile, tile_type)
        return tile

    def _remove_tile(self, tile: Tile) -> None:
        self.grid.release(tile)
        self.tiles.pop(tile.id, None)
        self.instantiator.destroy(tile)

    # -- queries --------------------------------------------------------------

    @property
    def pending_plan(self) -> Optional[MovePlan]:
        return self._pending

    def is_over(self) -> bool:
        return self.state in TERMINAL_STATES

    def legal_directions(self) -> List[Direction]:
        if self.grid is None:
            return []
        tiles = list(self.tiles.values())
        return [d for d in Direction if plan_move(self.grid, tiles, d).moved]

    def max_tile(self) -> int:
        return max((t.value for t in self.tiles.values()), default=0)

    def get_state(self) -> np.ndarray:
        return self.grid.to_array()
