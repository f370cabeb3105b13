import numpy as np
import pytest

from falling_block_rl.game import Action, FallingBlockGame, GameConfig, GameStatus, TetrominoType

from .conftest import grid_from_cells

I_INDEX = int(TetrominoType.I)


def _cells(height=20, width=10):
    return np.zeros((height, width), dtype=np.int8)


def test_config_validation():
    with pytest.raises(ValueError):
        GameConfig(width=0)
    with pytest.raises(ValueError):
        GameConfig(gravity_ms=0)


def test_initial_state(make_game):
    game = make_game([I_INDEX])
    assert game.status is GameStatus.ACTIVE
    assert game.score == 0
    assert not game.game_over and not game.paused
    assert game.timer.running
    piece = game.current_piece
    assert (piece.kind, piece.x, piece.y) == (TetrominoType.I, 3, 0)


def test_i_piece_falls_and_lands_without_clearing(make_game):
    game = make_game([I_INDEX])
    for _ in range(19):
        game.gravity_tick()
    assert game.current_piece.y == 19
    first = game.current_piece

    game.gravity_tick()

    assert game.grid.cells[19].tolist() == [0, 0, 0, 1, 1, 1, 1, 0, 0, 0]
    assert game.last_lines_cleared == 0
    assert game.score == 0
    assert game.current_piece is not first
    assert (game.current_piece.x, game.current_piece.y) == (3, 0)
    assert not game.game_over


def test_completing_a_row_scores_100(make_game):
    game = make_game([I_INDEX])
    cells = _cells()
    cells[19, [0, 1, 2, 7, 8, 9]] = 2
    cells[18, 0] = 5
    game.grid = grid_from_cells(cells)

    for _ in range(20):
        game.gravity_tick()

    assert game.last_lines_cleared == 1
    assert game.score == 100
    assert game.grid.cells.shape == (20, 10)
    assert game.grid.cells[19].tolist() == [5] + [0] * 9
    assert int(np.count_nonzero(game.grid.cells)) == 1


def test_four_lines_with_vertical_piece(make_game):
    game = make_game([I_INDEX])
    cells = _cells()
    cells[16:, :] = 3
    cells[16:, 3] = 0
    game.grid = grid_from_cells(cells)

    game.request_rotate()
    assert game.current_piece.shape.shape == (4, 1)
    for _ in range(16):
        game.gravity_tick()
    assert game.current_piece.y == 16
    game.gravity_tick()

    assert game.last_lines_cleared == 4
    assert game.score == 400
    assert not game.grid.cells.any()


def test_blocked_moves_are_noops(make_game):
    game = make_game([I_INDEX])
    for _ in range(5):
        game.request_move(-1, 0)
    assert game.current_piece.x == 0
    for _ in range(10):
        game.request_move(1, 0)
    assert game.current_piece.x == 6
    assert game.current_piece.y == 0


def test_blocked_rotation_leaves_piece_unchanged(make_game):
    game = make_game([I_INDEX])
    cells = _cells()
    cells[1, 3] = 4
    game.grid = grid_from_cells(cells)
    piece = game.current_piece
    before_shape = piece.shape.copy()

    game.request_rotate()

    assert np.array_equal(piece.shape, before_shape)
    assert (piece.x, piece.y) == (3, 0)


def test_rotation_near_wall_has_no_kick(make_game):
    game = make_game([I_INDEX])
    game.request_rotate()
    for _ in range(8):
        game.request_move(1, 0)
    piece = game.current_piece
    assert piece.x == 9
    vertical = piece.shape.copy()

    game.request_rotate()

    assert np.array_equal(piece.shape, vertical)
    assert piece.x == 9


def test_rotation_does_not_mutate_catalog(make_game):
    from falling_block_rl.game.pieces import BASE_SHAPES

    game = make_game([int(TetrominoType.T)])
    original = BASE_SHAPES[TetrominoType.T].copy()
    game.request_rotate()
    game.request_rotate()
    assert np.array_equal(BASE_SHAPES[TetrominoType.T], original)


@pytest.mark.parametrize("index", range(7))
def test_spawn_after_reset_never_game_over(make_game, index):
    game = make_game([index])
    game.request_reset()
    assert not game.game_over
    assert game.current_piece.kind is TetrominoType(index)


def _force_game_over(game):
    cells = _cells()
    cells[1, :9] = 1
    game.grid = grid_from_cells(cells)
    game.gravity_tick()


def test_spawn_overlap_ends_game_and_freezes_state(make_game):
    game = make_game([I_INDEX])
    _force_game_over(game)

    assert game.game_over
    assert game.status is GameStatus.GAME_OVER
    assert not game.timer.running
    assert game.grid.cells[0].tolist() == [0, 0, 0, 1, 1, 1, 1, 0, 0, 0]

    before = game.snapshot()
    game.request_move(-1, 0)
    game.request_move(0, 1)
    game.request_rotate()
    game.gravity_tick()
    game.advance(10_000)
    game.request_pause()
    after = game.snapshot()

    assert np.array_equal(before.grid, after.grid)
    assert np.array_equal(before.active_piece.shape, after.active_piece.shape)
    assert (before.active_piece.x, before.active_piece.y) == (after.active_piece.x, after.active_piece.y)
    assert after.score == before.score
    assert after.is_game_over and not after.is_paused


def test_reset_after_game_over(make_game):
    game = make_game([I_INDEX])
    _force_game_over(game)
    game.request_reset()
    assert game.status is GameStatus.ACTIVE
    assert game.score == 0
    assert not game.grid.cells.any()
    assert game.timer.running


def test_pause_suppresses_everything(make_game):
    game = make_game([I_INDEX])
    game.request_pause()
    assert game.paused
    assert not game.timer.running

    game.request_move(1, 0)
    game.request_move(0, 1)
    game.request_rotate()
    game.gravity_tick()
    game.advance(5000)
    piece = game.current_piece
    assert (piece.x, piece.y) == (3, 0)
    assert piece.shape.shape == (1, 4)

    game.request_pause()
    assert game.status is GameStatus.ACTIVE
    assert game.timer.running
    game.request_move(1, 0)
    assert piece.x == 4


def test_explicit_pause_values(make_game):
    game = make_game([I_INDEX])
    game.request_pause(False)
    assert game.status is GameStatus.ACTIVE
    game.request_pause(True)
    game.request_pause(True)
    assert game.paused
    game.request_pause(False)
    assert game.status is GameStatus.ACTIVE


def test_reset_clears_pause(make_game):
    game = make_game([I_INDEX])
    game.request_pause()
    game.request_reset()
    assert game.status is GameStatus.ACTIVE


def test_stale_tick_after_pause_is_discarded(make_game):
    game = make_game([I_INDEX])
    stale = game.timer.generation
    game.request_pause()
    game.request_pause()

    game.gravity_tick(stale)
    assert game.current_piece.y == 0

    game.gravity_tick(game.timer.generation)
    assert game.current_piece.y == 1


def test_stale_tick_after_reset_is_discarded(make_game):
    game = make_game([I_INDEX])
    stale = game.timer.generation
    game.request_reset()
    game.gravity_tick(stale)
    assert game.current_piece.y == 0


def test_advance_drives_gravity(make_game):
    game = make_game([I_INDEX], GameConfig(gravity_ms=500))
    game.advance(499)
    assert game.current_piece.y == 0
    game.advance(1)
    assert game.current_piece.y == 1
    game.advance(1250)
    assert game.current_piece.y == 3


def test_snapshot_is_a_copy(make_game):
    game = make_game([I_INDEX])
    snap = game.snapshot()
    snap.grid[0, 0] = 9
    snap.active_piece.x = 0
    assert game.grid.cells[0, 0] == 0
    assert game.current_piece.x == 3


def test_get_state_overlays_piece(make_game):
    game = make_game([I_INDEX])
    state = game.get_state()
    assert state[0].tolist() == [0, 0, 0, -1, -1, -1, -1, 0, 0, 0]
    assert not game.grid.cells.any()


def test_get_state_skips_rows_above_board(make_game):
    game = make_game([I_INDEX], GameConfig(spawn_y=-1))
    assert game.current_piece.y == -1
    assert not game.get_state().any()


def test_step_reports_lines(make_game):
    game = make_game([I_INDEX])
    cells = _cells()
    cells[19, [0, 1, 2, 7, 8, 9]] = 2
    game.grid = grid_from_cells(cells)

    _, lines, done, info = game.step(Action.LEFT)
    assert game.current_piece.x == 2
    game.step(Action.RIGHT)
    for _ in range(19):
        _, lines, done, info = game.step(Action.DOWN)
        assert lines == 0
    _, lines, done, info = game.step(Action.DOWN)
    assert lines == 1
    assert not done
    assert info == {"score": 100, "lines_cleared_total": 1, "pieces_placed": 1}


def test_seeded_games_are_reproducible():
    a = FallingBlockGame(GameConfig(random_seed=3))
    b = FallingBlockGame(GameConfig(random_seed=3))
    for _ in range(200):
        a.gravity_tick()
        b.gravity_tick()
    assert np.array_equal(a.grid.cells, b.grid.cells)
    assert a.current_piece.kind is b.current_piece.kind
