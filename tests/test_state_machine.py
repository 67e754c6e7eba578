import random

import pytest

from tilemerge.collaborators import DeferredAnimator, Instantiator
from tilemerge.config import LevelConfig
from tilemerge.errors import InvalidTransitionError
from tilemerge.grid import Direction, Position
from tilemerge.state_machine import GameController, GameState
from tilemerge.tiles import is_tile_value


class RecordingInstantiator(Instantiator):
    def __init__(self):
        self.created = []
        self.destroyed = []

    def create(self, tile, tile_type):
        assert tile_type.value == tile.value
        self.created.append(tile.id)

    def destroy(self, tile):
        self.destroyed.append(tile.id)


def test_start_spawns_two_tiles_and_waits():
    game = GameController(seed=3)
    assert game.start() is GameState.WAITING_INPUT
    assert len(game.tiles) == 2
    assert game.last_spawn.free_before == 16


def test_later_rounds_spawn_one_tile(fixed_random):
    game = GameController(rng=fixed_random(0.1))
    game.start()
    # tiles at (0,0) and (0,1); moving right keeps them apart
    assert game.handle_input(Direction.RIGHT)
    assert len(game.tiles) == 3
    assert len(game.last_spawn.new_tiles) == 1
    assert game.state is GameState.WAITING_INPUT


def test_input_is_dropped_while_moving(fixed_random):
    animator = DeferredAnimator()
    game = GameController(rng=fixed_random(0.1), animator=animator)
    game.start()
    assert game.handle_input("right")
    assert game.state is GameState.MOVING
    assert game.pending_plan is animator.plans[-1]

    assert game.handle_input("left") is False
    assert len(animator.plans) == 1

    animator.finish()
    assert game.state is GameState.WAITING_INPUT
    assert game.pending_plan is None
    assert game.moves == 1


def test_completion_without_pending_move_is_rejected(fixed_random):
    game = GameController(rng=fixed_random(0.1))
    game.start()
    with pytest.raises(InvalidTransitionError):
        game.complete_move()
    assert game.state is GameState.WAITING_INPUT


def test_undefined_transitions_leave_state_unchanged():
    game = GameController(seed=1)
    game.start()
    with pytest.raises(InvalidTransitionError):
        game.change_state("Paused")
    with pytest.raises(InvalidTransitionError):
        game.change_state(GameState.WIN)
    assert game.state is GameState.WAITING_INPUT


def test_input_before_start_is_ignored():
    game = GameController(seed=1)
    assert game.handle_input(Direction.UP) is False
    assert game.state is None


def test_merge_reaching_threshold_wins(fixed_random):
    instantiator = RecordingInstantiator()
    game = GameController(LevelConfig(win_condition=4), rng=fixed_random(0.1), instantiator=instantiator)
    game.start()
    assert game.legal_directions()
    game.handle_input(Direction.DOWN)
    assert game.state is GameState.WIN
    assert game.max_tile() == 4
    # two originals destroyed, one merge result created
    assert instantiator.destroyed == [1, 2]
    assert 3 in instantiator.created

    assert game.handle_input(Direction.UP) is False
    assert game.state is GameState.WIN


def test_lose_when_single_free_node_before_spawn(fixed_random):
    game = GameController(LevelConfig(width=2, height=1), rng=fixed_random(0.1))
    game.start()
    assert game.state is GameState.WAITING_INPUT
    game.handle_input(Direction.LEFT)
    assert game.last_spawn.free_before == 1
    assert game.state is GameState.LOSE
    assert game.is_over()


def test_noop_move_still_spawns_and_full_grid_loses(fixed_random):
    game = GameController(LevelConfig(width=1, height=2), rng=fixed_random(0.9))
    game.start()
    before = {t.id: t.position for t in game.tiles.values()}
    game.handle_input(Direction.LEFT)
    assert not game.last_plan.moved
    assert {t.id: t.position for t in game.tiles.values()} == before
    assert game.last_spawn.free_before == 0
    assert game.state is GameState.LOSE


def test_noop_move_can_skip_spawn(fixed_random):
    game = GameController(LevelConfig(width=1, height=2, skip_spawn_on_noop=True), rng=fixed_random(0.9))
    game.start()
    rounds = game.round
    game.handle_input(Direction.RIGHT)
    assert game.state is GameState.WAITING_INPUT
    assert game.round == rounds
    assert game.moves == 0


def test_restart_rebuilds_level(fixed_random):
    instantiator = RecordingInstantiator()
    game = GameController(LevelConfig(width=2, height=1), rng=fixed_random(0.1), instantiator=instantiator)
    game.start()
    game.handle_input(Direction.LEFT)
    assert game.state is GameState.LOSE
    live = set(game.tiles)

    assert game.restart() is GameState.WAITING_INPUT
    assert live <= set(instantiator.destroyed)
    assert len(game.tiles) == 2
    assert game.moves == 0


def test_invariants_hold_over_random_play(check_consistent):
    rng = random.Random(11)
    game = GameController(seed=5)
    game.start()
    for _ in range(300):
        if game.is_over():
            break
        game.handle_input(rng.choice(list(Direction)))
        check_consistent(game.grid, game.tiles.values())
        assert all(is_tile_value(t.value) for t in game.tiles.values())
        assert all(isinstance(t.position, Position) for t in game.tiles.values())
    assert game.state in (GameState.WAITING_INPUT, GameState.WIN, GameState.LOSE)
