import pytest

from caustics.app import (
    INITIAL_DISTURBANCES,
    SCREEN_HEIGHT,
    SCREEN_WIDTH,
    screen_to_grid,
    seed_grid,
)
from caustics.simulation import WaveGrid


@pytest.mark.parametrize(
    "cell", [(0, 0), (10, 20), (100, 100), (199, 0), (0, 199), (199, 199), (75, 125)]
)
def test_cell_centre_maps_back_to_cell(cell):
    gx, gy = cell
    xpos = (gx + 0.5) * SCREEN_WIDTH / 200
    ypos = (1.0 - (gy + 0.5) / 200) * SCREEN_HEIGHT
    assert screen_to_grid(xpos, ypos, SCREEN_WIDTH, SCREEN_HEIGHT, 200, 200) == cell


def test_bottom_left_corner_is_origin_cell():
    assert screen_to_grid(0, SCREEN_HEIGHT, SCREEN_WIDTH, SCREEN_HEIGHT, 200, 200) == (0, 0)


def test_vertical_axis_is_inverted():
    top = screen_to_grid(400, 1, SCREEN_WIDTH, SCREEN_HEIGHT, 200, 200)
    bottom = screen_to_grid(400, SCREEN_HEIGHT - 1, SCREEN_WIDTH, SCREEN_HEIGHT, 200, 200)
    assert top[1] > bottom[1]
    assert top[0] == bottom[0]


@pytest.mark.parametrize(
    "xpos, ypos",
    [
        (SCREEN_WIDTH, 300),
        (SCREEN_WIDTH + 50, 300),
        (-10, 300),
        (400, 0),
        (400, -20),
        (400, SCREEN_HEIGHT + 50),
    ],
)
def test_positions_outside_grid_give_none(xpos, ypos):
    assert screen_to_grid(xpos, ypos, SCREEN_WIDTH, SCREEN_HEIGHT, 200, 200) is None


def test_small_negative_offset_truncates_toward_zero():
    cell = screen_to_grid(-1, SCREEN_HEIGHT, SCREEN_WIDTH, SCREEN_HEIGHT, 200, 200)
    assert cell == (0, 0)


def test_result_scales_with_grid_size():
    cell = screen_to_grid(
        SCREEN_WIDTH - 1, 1, SCREEN_WIDTH, SCREEN_HEIGHT, 10, 30
    )
    assert cell == (9, 29)


def test_seed_grid_places_initial_disturbances():
    grid = WaveGrid()
    seed_grid(grid)
    for x, y, value in INITIAL_DISTURBANCES:
        assert grid.current[x, y] == pytest.approx(value)
    assert int((grid.current != 0).sum()) == len(INITIAL_DISTURBANCES)


def test_seed_grid_source_values():
    grid = WaveGrid()
    seed_grid(grid)
    assert grid.current[50, 50] == pytest.approx(2.0)
    assert grid.current[150, 150] == pytest.approx(1.5)
    assert grid.current[75, 125] == pytest.approx(1.8)


def test_seed_grid_clears_earlier_heights():
    grid = WaveGrid()
    grid.add_disturbance(10, 10, 9.0)
    seed_grid(grid)
    assert grid.current[10, 10] == 0.0


def test_seed_grid_on_too_small_grid_raises():
    grid = WaveGrid(width=20, height=20)
    with pytest.raises(IndexError):
        seed_grid(grid)


def test_seeded_grid_evolves_from_disturbances():
    grid = WaveGrid()
    seed_grid(grid)
    grid.step()
    x, y, _ = INITIAL_DISTURBANCES[0]
    assert grid.current[x + 1, y] > 0.0
    assert grid.previous[x, y] == pytest.approx(INITIAL_DISTURBANCES[0][2])