import numpy as np
import pytest

from minigames.games.game_2048 import Board, can_move, merge_row, rotate, shift_grid


def row(values):
    return np.array(values, dtype=np.int64)


@pytest.mark.parametrize(
    "values, expected, gained",
    [
        ([2, 2, 2, 2], [4, 4, 0, 0], 8),
        ([2, 2, 4, 0], [4, 4, 0, 0], 4),
        ([4, 0, 4, 8], [8, 8, 0, 0], 8),
        ([0, 0, 0, 2], [2, 0, 0, 0], 0),
        ([2, 4, 8, 16], [2, 4, 8, 16], 0),
        ([8, 8, 8, 0], [16, 8, 0, 0], 16),
        ([0, 0, 0, 0], [0, 0, 0, 0], 0),
    ],
)
def test_merge_row(values, expected, gained):
    new_row, row_gain, won = merge_row(row(values))
    assert new_row.tolist() == expected
    assert row_gain == gained
    assert won is False


def test_merge_row_reports_win():
    new_row, gained, won = merge_row(row([1024, 1024, 2, 0]))
    assert new_row.tolist() == [2048, 2, 0, 0]
    assert gained == 2048
    assert won is True


def test_existing_2048_tile_is_not_a_win():
    _, _, won = merge_row(row([2048, 0, 2, 4]))
    assert won is False


GRID = [
    [2, 0, 0, 2],
    [0, 4, 4, 0],
    [8, 0, 0, 0],
    [0, 0, 0, 8],
]


@pytest.mark.parametrize(
    "direction, expected, gained",
    [
        ("left", [[4, 0, 0, 0], [8, 0, 0, 0], [8, 0, 0, 0], [8, 0, 0, 0]], 12),
        ("right", [[0, 0, 0, 4], [0, 0, 0, 8], [0, 0, 0, 8], [0, 0, 0, 8]], 12),
        ("up", [[2, 4, 4, 2], [8, 0, 0, 8], [0, 0, 0, 0], [0, 0, 0, 0]], 0),
        ("down", [[0, 0, 0, 0], [0, 0, 0, 0], [2, 0, 0, 2], [8, 4, 4, 8]], 0),
    ],
)
def test_shift_grid_directions(direction, expected, gained):
    new_grid, grid_gain, _ = shift_grid(np.array(GRID), direction)
    assert new_grid.tolist() == expected
    assert grid_gain == gained


def test_vertical_moves_merge_towards_the_edge():
    grid = np.array([
        [2, 0, 0, 0],
        [2, 0, 0, 0],
        [4, 0, 0, 0],
        [0, 0, 0, 0],
    ])
    up, _, _ = shift_grid(grid, "up")
    down, _, _ = shift_grid(grid, "down")
    assert up[:, 0].tolist() == [4, 4, 0, 0]
    assert down[:, 0].tolist() == [0, 0, 4, 4]


def test_shift_grid_does_not_modify_input():
    grid = np.array(GRID)
    shift_grid(grid, "left")
    assert grid.tolist() == GRID


def test_shift_grid_rejects_unknown_direction():
    with pytest.raises(ValueError):
        shift_grid(np.array(GRID), "sideways")


def test_rotate_clockwise():
    grid = np.array([[1, 2], [3, 4]])
    assert rotate(grid).tolist() == [[3, 1], [4, 2]]
    assert rotate(grid, 3).tolist() == rotate(grid, -1).tolist()


def test_four_rotations_restore_grid():
    grid = np.arange(16).reshape(4, 4)
    assert np.array_equal(rotate(grid, 4), grid)
    assert np.array_equal(rotate(rotate(rotate(rotate(grid)))), grid)


def test_can_move():
    assert can_move([[2, 2], [4, 8]])
    assert can_move([[2, 4], [2, 8]])
    assert not can_move([[2, 4], [4, 2]])


def random_grid(rng):
    exponents = rng.integers(0, 6, size=(4, 4))
    return np.where(exponents == 0, 0, 2 ** exponents)


def test_moves_preserve_tile_sum_and_score_tracks_merges():
    rng = np.random.default_rng(7)
    for _ in range(200):
        grid = random_grid(rng)
        for direction in ("up", "down", "left", "right"):
            board = Board(grid=grid, np_random=rng)
            changed = board.move(direction)
            assert board.grid.sum() == grid.sum()
            _, gained, _ = shift_grid(grid, direction)
            assert board.score == (gained if changed else 0)
            assert board.score % 2 == 0


def test_repeating_a_no_op_move_changes_nothing():
    board = Board(grid=[[2, 4, 0, 0], [8, 0, 0, 0], [0, 0, 0, 0], [0, 0, 0, 0]])
    assert board.move("left") is False
    assert board.move("left") is False
    assert board.grid.tolist()[0] == [2, 4, 0, 0]
    assert board.score == 0


def test_apply_move_spawns_only_when_grid_changes():
    board = Board(grid=[[2, 2, 0, 0], [0, 0, 0, 0], [0, 0, 0, 0], [0, 0, 0, 0]],
                  np_random=np.random.default_rng(1))
    assert board.apply_move("left") is True
    assert np.count_nonzero(board.grid) == 2
    assert board.grid[0, 0] == 4
    assert board.score == 4
    assert board.last_spawn is not None

    # A single column of tiles against the left edge cannot move further left
    board.grid = np.array([[4, 0, 0, 0], [2, 0, 0, 0], [0, 0, 0, 0], [0, 0, 0, 0]])
    before = board.grid.copy()
    assert board.apply_move("left") is False
    assert np.array_equal(board.grid, before)


def test_win_flag_set_by_2048_merge():
    board = Board(grid=[[1024, 1024, 0, 0], [0] * 4, [0] * 4, [0] * 4])
    board.apply_move("left")
    assert board.won
    assert board.score == 2048


def test_game_over_only_when_full_and_stuck():
    board = Board(
        grid=[
            [2, 4, 2, 4],
            [4, 2, 4, 2],
            [32, 4, 2, 4],
            [8, 16, 8, 0],
        ],
        np_random=np.random.default_rng(3),
    )
    assert not board.check_game_over()
    assert board.apply_move("right") is True
    assert board.is_full()
    assert not board.can_move()
    assert board.over


def test_full_board_with_merges_is_not_over():
    board = Board(grid=[[2, 2, 4, 8], [4, 8, 16, 32], [8, 16, 32, 64], [16, 32, 64, 128]])
    assert board.is_full()
    assert not board.check_game_over()


def test_spawn_on_full_board_is_a_no_op():
    grid = [[2, 4, 2, 4], [4, 2, 4, 2], [2, 4, 2, 4], [4, 2, 4, 2]]
    board = Board(grid=grid)
    assert board.spawn_random_tile() is None
    assert board.grid.tolist() == grid


def test_spawn_distribution():
    rng = np.random.default_rng(123)
    values = []
    positions = set()
    for _ in range(2000):
        board = Board(np_random=rng)
        pos = board.spawn_random_tile()
        positions.add(pos)
        values.append(int(board.grid[pos]))
    fours = values.count(4) / len(values)
    assert set(values) == {2, 4}
    assert 0.05 < fours < 0.15
    assert len(positions) == 16


def test_board_rejects_wrong_shape():
    with pytest.raises(ValueError):
        Board(grid=[[2, 0], [0, 2]])


def test_copy_is_independent():
    board = Board(grid=[[2, 2, 0, 0], [0] * 4, [0] * 4, [0] * 4])
    clone = board.copy()
    clone.move("left")
    assert board.grid[0].tolist() == [2, 2, 0, 0]
    assert clone.grid[0].tolist() == [4, 0, 0, 0]
