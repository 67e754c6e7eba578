from __future__ import annotations
from typing import Dict, List, Optional, Tuple

import numpy as np

from .config import LevelConfig
from .grid import Direction
from .state_machine import GameController, GameState


DIRECTIONS: Tuple[Direction, ...] = (Direction.UP, Direction.RIGHT, Direction.DOWN, Direction.LEFT)


class TileMergeEnv:
    """
    Minimal step-style interface over ``GameController``:
    - reset(seed: Optional[int]) -> board
    - step(direction) -> (board, done, info)
    - get_state() -> board
    - legal_directions() -> List[Direction]

    Moves complete synchronously (no animation).
    """
    def __init__(self, config: Optional[LevelConfig] = None, seed: Optional[int] = None):
        self.controller = GameController(config=config, seed=seed)
        self.controller.start()

    @property
    def state(self) -> Optional[GameState]:
        return self.controller.state

    @property
    def moves(self) -> int:
        return self.controller.moves

    def reset(self, seed: Optional[int] = None) -> np.ndarray:
        if seed is not None:
            self.controller.spawner.reseed(seed)
        self.controller.restart()
        return self.get_state()

    def get_state(self) -> np.ndarray:
        return self.controller.get_state()

    def step(self, direction) -> Tuple[np.ndarray, bool, Dict]:
        if self.is_over():
            return self.get_state(), True, {"state": self.state, "accepted": False}

        accepted = self.controller.handle_input(direction)
        plan = self.controller.last_plan
        info = {
            "state": self.state,
            "accepted": accepted,
            "moved": bool(accepted and plan is not None and plan.moved),
            "merges": len(plan.merges) if accepted and plan is not None else 0,
            "max_tile": self.controller.max_tile(),
        }
        return self.get_state(), self.is_over(), info

    def legal_directions(self) -> List[Direction]:
        return self.controller.legal_directions()

    def is_over(self) -> bool:
        return self.controller.is_over()

    def max_tile(self) -> int:
        return self.controller.max_tile()
