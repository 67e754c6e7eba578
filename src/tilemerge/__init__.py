import importlib
import pkgutil
from typing import List

from .config import LevelConfig
from .errors import (
    ConfigurationError,
    InvalidDirectionError,
    InvalidTransitionError,
    MergeConflictError,
    TileMergeError,
)
from .grid import Direction, Grid, Position, build_grid
from .resolver import MovePlan, commit_move, merge_blocks, plan_move
from .spawner import SpawnManager
from .state_machine import GameController, GameState
from .tiles import Tile, TileType

# submodules are loaded on first attribute access (gui_pygame pulls in pygame)
_SUBMODULES = [m.name for m in pkgutil.iter_modules(__path__) if not m.name.startswith("_")]  # type: ignore[name-defined]

__all__ = [
    "ConfigurationError",
    "Direction",
    "GameController",
    "GameState",
    "Grid",
    "InvalidDirectionError",
    "InvalidTransitionError",
    "LevelConfig",
    "MergeConflictError",
    "MovePlan",
    "Position",
    "SpawnManager",
    "Tile",
    "TileMergeError",
    "TileType",
    "build_grid",
    "commit_move",
    "merge_blocks",
    "plan_move",
]


def __getattr__(name: str):
    if name in _SUBMODULES:
        return importlib.import_module(f"{__name__}.{name}")
    raise AttributeError(f"{__name__} has no attribute {name!r}")


def __dir__() -> List[str]:
    return sorted(list(globals().keys()) + _SUBMODULES)
