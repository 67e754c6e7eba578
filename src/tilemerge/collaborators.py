"""
Boundary interfaces between the game core and its presentation.

The core owns the logical tile lifecycle; an ``Instantiator`` owns whatever
visual object stands for a tile. An ``Animator`` plays a move plan and must
call ``on_complete`` exactly once when every tile has arrived.
"""
from __future__ import annotations
from typing import Callable, TYPE_CHECKING

if TYPE_CHECKING:
    from .resolver import MovePlan
    from .tiles import Tile, TileType


class Animator:
    def animate(self, plan: "MovePlan", duration: float, on_complete: Callable[[], None]) -> None:
        raise NotImplementedError


class Instantiator:
    def create(self, tile: "Tile", tile_type: "TileType") -> None:
        raise NotImplementedError

    def destroy(self, tile: "Tile") -> None:
        raise NotImplementedError


class ImmediateAnimator(Animator):
    """Skips playback and completes the move straight away."""

    def animate(self, plan, duration, on_complete):
        on_complete()


class DeferredAnimator(Animator):
    """Holds the completion callback until ``finish()`` is called."""

    def __init__(self):
        self.pending = None
        self.plans = []

    def animate(self, plan, duration, on_complete):
        self.plans.append(plan)
        self.pending = on_complete

    def finish(self) -> None:
        callback, self.pending = self.pending, None
        if callback is not None:
            callback()


class NullInstantiator(Instantiator):
    def create(self, tile, tile_type):
        pass

    def destroy(self, tile):
        pass
