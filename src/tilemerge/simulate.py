from __future__ import annotations
import logging
import random
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

import numpy as np
from tqdm import trange

from .api import TileMergeEnv
from .config import LevelConfig
from .grid import Direction
from .state_machine import GameState

logger = logging.getLogger(__name__)

Policy = Callable[[np.ndarray, List[Direction]], Optional[Direction]]


def random_policy(seed: Optional[int] = None) -> Policy:
    rng = random.Random(seed)

    def act(board: np.ndarray, legal: List[Direction]) -> Optional[Direction]:
        if not legal:
            return rng.choice(list(Direction))
        return rng.choice(legal)

    return act


@dataclass
class GameRecord:
    seed: int
    state: GameState
    moves: int
    max_tile: int


@dataclass
class SimulationSummary:
    games: int
    wins: int
    losses: int
    unfinished: int
    mean_max_tile: float
    best_tile: int
    mean_moves: float

    def __str__(self) -> str:
        return (
            f"games={self.games} wins={self.wins} losses={self.losses} unfinished={self.unfinished} "
            f"mean_max_tile={self.mean_max_tile:.1f} best_tile={self.best_tile} mean_moves={self.mean_moves:.1f}"
        )


def play_game(env: TileMergeEnv, policy: Policy, seed: int, max_steps: int = 10_000) -> GameRecord:
    board = env.reset(seed=seed)
    steps = 0
    while not env.is_over() and steps < max_steps:
        direction = policy(board, env.legal_directions())
        if direction is None:
            break
        board, _, _ = env.step(direction)
        steps += 1
    return GameRecord(seed=seed, state=env.state, moves=env.moves, max_tile=env.max_tile())


def summarize(records: Sequence[GameRecord]) -> SimulationSummary:
    max_tiles = np.array([r.max_tile for r in records], dtype=np.int64)
    moves = np.array([r.moves for r in records], dtype=np.int64)
    wins = sum(r.state is GameState.WIN for r in records)
    losses = sum(r.state is GameState.LOSE for r in records)
    return SimulationSummary(
        games=len(records),
        wins=wins,
        losses=losses,
        unfinished=len(records) - wins - losses,
        mean_max_tile=float(max_tiles.mean()) if len(records) else 0.0,
        best_tile=int(max_tiles.max()) if len(records) else 0,
        mean_moves=float(moves.mean()) if len(records) else 0.0,
    )


def run_simulation(
    games: int,
    config: Optional[LevelConfig] = None,
    seed: int = 42,
    max_steps: int = 10_000,
    policy: Optional[Policy] = None,
    progress: bool = True,
) -> SimulationSummary:
    env = TileMergeEnv(config=config, seed=seed)
    policy = policy if policy is not None else random_policy(seed)
    records = []
    for i in trange(games, desc="Simulating", disable=not progress):
        record = play_game(env, policy, seed=seed + i, max_steps=max_steps)
        logger.debug("game %d: %s after %d moves, max tile %d", i, record.state.value, record.moves, record.max_tile)
        records.append(record)
    return summarize(records)
