from __future__ import annotations
import logging
import sys
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple

import pygame

from .collaborators import Animator, Instantiator
from .config import LevelConfig
from .grid import Direction
from .simulate import Policy, random_policy
from .state_machine import GameController, GameState
from .tiles import Tile, TileType

logger = logging.getLogger(__name__)


# palette for everything that is not a tile
BG_COLOR = (250, 248, 239)
GRID_COLOR = (187, 173, 160)
EMPTY_COLOR = (205, 193, 180)

KEY_DIRECTIONS: Dict[int, Direction] = {
    pygame.K_UP: Direction.UP,
    pygame.K_RIGHT: Direction.RIGHT,
    pygame.K_DOWN: Direction.DOWN,
    pygame.K_LEFT: Direction.LEFT,
}


@dataclass
class TileSprite:
    tile: Tile
    tile_type: TileType
    x: float
    y: float


class SpriteInstantiator(Instantiator):
    def __init__(self):
        self.sprites: Dict[int, TileSprite] = {}

    def create(self, tile: Tile, tile_type: TileType) -> None:
        self.sprites[tile.id] = TileSprite(tile, tile_type, float(tile.position.x), float(tile.position.y))

    def destroy(self, tile: Tile) -> None:
        self.sprites.pop(tile.id, None)


def ease_in_quad(t: float) -> float:
    return t * t


class TweenAnimator(Animator):
    """Slides sprites from start to end over ``duration`` seconds, all tweens sharing one clock."""

    def __init__(self, sprites: SpriteInstantiator, clock: Callable[[], int] = pygame.time.get_ticks):
        self.sprites = sprites
        self.clock = clock
        self._tweens: List[Tuple[TileSprite, Tuple[int, int], Tuple[int, int]]] = []
        self._started_ms = 0
        self._duration_ms = 0.0
        self._on_complete: Optional[Callable[[], None]] = None

    @property
    def busy(self) -> bool:
        return self._on_complete is not None

    def animate(self, plan, duration, on_complete):
        self._tweens = [
            (self.sprites.sprites[r.tile.id], r.start, r.end)
            for r in plan.records if r.tile.id in self.sprites.sprites
        ]
        self._started_ms = self.clock()
        self._duration_ms = duration * 1000.0
        self._on_complete = on_complete

    def cancel(self) -> None:
        self._tweens = []
        self._on_complete = None

    def update(self) -> None:
        if self._on_complete is None:
            return
        elapsed = self.clock() - self._started_ms
        t = 1.0 if self._duration_ms <= 0 else min(1.0, elapsed / self._duration_ms)
        k = ease_in_quad(t)
        for sprite, start, end in self._tweens:
            sprite.x = start[0] + (end[0] - start[0]) * k
            sprite.y = start[1] + (end[1] - start[1]) * k
        if t >= 1.0:
            callback = self._on_complete
            self.cancel()
            callback()


def run_gui(config: Optional[LevelConfig] = None, seed: Optional[int] = None,
            agent: Optional[Policy] = None):
    config = config if config is not None else LevelConfig()
    pygame.init()
    pygame.display.set_caption("2048 - Minimal PyGame")

    cell_size = 100
    margin = 15
    header_h = 90
    width = margin + config.width * (cell_size + margin)
    board_h = margin + config.height * (cell_size + margin)
    height = header_h + board_h

    screen = pygame.display.set_mode((width, height))
    clock = pygame.time.Clock()

    # fonts
    font_big = pygame.font.SysFont("arial", 48, bold=True)
    font_mid = pygame.font.SysFont("arial", 28, bold=True)
    font_small = pygame.font.SysFont("arial", 20)

    sprites = SpriteInstantiator()
    animator = TweenAnimator(sprites)
    game = GameController(config=config, seed=seed, animator=animator, instantiator=sprites)
    game.start()

    auto_mode = agent is not None
    if agent is None:
        agent = random_policy(seed)
    step_interval_ms = 120
    last_step_time = 0

    def cell_rect(x: float, y: float) -> pygame.Rect:
        px = margin + x * (cell_size + margin)
        py = header_h + margin + (config.height - 1 - y) * (cell_size + margin)
        return pygame.Rect(int(px), int(py), cell_size, cell_size)

    def draw():
        screen.fill(BG_COLOR)

        # header
        info_text = font_mid.render(f"Moves: {game.moves}  Max: {game.max_tile()}", True, (119, 110, 101))
        hint_text = font_small.render("Arrows: Move | R: Reset | A: Toggle Auto | Esc: Quit", True, (119, 110, 101))
        screen.blit(info_text, (margin, (header_h - info_text.get_height()) // 2))
        screen.blit(hint_text, (margin, header_h - hint_text.get_height() - 8))

        pygame.draw.rect(screen, GRID_COLOR, pygame.Rect(0, header_h, width, height - header_h))
        for node in game.grid:
            pygame.draw.rect(screen, EMPTY_COLOR, cell_rect(node.x, node.y), border_radius=6)

        for sprite in sprites.sprites.values():
            rect = cell_rect(sprite.x, sprite.y)
            val = sprite.tile.value
            pygame.draw.rect(screen, sprite.tile_type.color, rect, border_radius=6)
            # shrink the font as the number grows
            if val < 100:
                f = font_big
            elif val < 1000:
                f = font_mid
            else:
                f = font_small
            text = f.render(str(val), True, sprite.tile_type.text_color)
            screen.blit(text, (rect.x + (cell_size - text.get_width()) // 2, rect.y + (cell_size - text.get_height()) // 2))

        # end-of-game overlay
        if game.is_over():
            overlay = pygame.Surface((width, height), pygame.SRCALPHA)
            overlay.fill((255, 255, 255, 180))
            screen.blit(overlay, (0, 0))
            label = "You Win!" if game.state is GameState.WIN else "Game Over"
            go_text = font_big.render(label, True, (80, 70, 60))
            screen.blit(go_text, (width // 2 - go_text.get_width() // 2, height // 2 - go_text.get_height() // 2))

        pygame.display.flip()

    running = True
    while running:
        clock.tick(60)
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
                break
            if event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    running = False
                    break
                if event.key == pygame.K_r:
                    animator.cancel()
                    game.restart()
                if event.key == pygame.K_a:
                    auto_mode = not auto_mode
                direction = KEY_DIRECTIONS.get(event.key)
                if direction is not None:
                    # dropped unless the game is waiting for input
                    game.handle_input(direction)

        animator.update()

        if auto_mode and game.state is GameState.WAITING_INPUT:
            now = pygame.time.get_ticks()
            if now - last_step_time >= step_interval_ms:
                direction = agent(game.get_state(), game.legal_directions())
                if direction is not None:
                    game.handle_input(direction)
                last_step_time = now

        draw()

    pygame.quit()
    sys.exit(0)
