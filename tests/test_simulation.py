import math

import numpy as np
import pytest

from caustics.simulation import WaveGrid


def make_grid(**kwargs):
    params = dict(width=9, height=9, dx=1.0, dt=0.5, c=1.0, damping=0.0)
    params.update(kwargs)
    return WaveGrid(**params)


def test_default_grid_is_flat_and_sized():
    grid = WaveGrid()
    assert grid.shape == (200, 200)
    assert not grid.current.any()


def test_flat_surface_stays_flat():
    grid = make_grid()
    for _ in range(5):
        grid.step()
    assert not grid.current.any()
    assert not grid.previous.any()


def test_single_step_values():
    grid = make_grid()
    grid.add_disturbance(4, 4, 4.0)
    grid.step()
    # coefficient c^2 dt^2 / dx^2 = 0.25, no damping
    assert grid.current[4, 4] == pytest.approx(4.0)
    assert grid.current[5, 4] == pytest.approx(1.0)
    assert grid.current[4, 6] == pytest.approx(0.0)


def test_step_moves_current_into_previous():
    grid = make_grid()
    grid.add_disturbance(3, 5, 2.0)
    before = grid.current.copy()
    grid.step()
    np.testing.assert_array_equal(grid.previous, before)


def test_wave_spreads_symmetrically():
    grid = make_grid(width=21, height=21, dt=0.7, damping=0.01)
    grid.add_disturbance(10, 10, 2.0)
    for _ in range(4):
        grid.step()
    h = grid.current
    np.testing.assert_allclose(h, h[::-1, :], atol=1e-6)
    np.testing.assert_allclose(h, h[:, ::-1], atol=1e-6)
    np.testing.assert_allclose(h, h.T, atol=1e-6)
    assert h[12, 10] != 0.0


def test_boundary_pinned_to_zero_after_step():
    grid = make_grid()
    grid.add_disturbance(0, 4, 3.0)
    grid.add_disturbance(4, 4, 1.0)
    grid.step()
    assert grid.current[0, :].max() == 0.0
    assert grid.current[-1, :].max() == 0.0
    assert grid.current[:, 0].max() == 0.0
    assert grid.current[:, -1].max() == 0.0


def test_damping_reduces_energy():
    undamped = make_grid(width=31, height=31)
    damped = make_grid(width=31, height=31, damping=0.2)
    for grid in (undamped, damped):
        grid.add_disturbance(15, 15, 1.0)
        for _ in range(6):
            grid.step()
    assert np.abs(damped.current).sum() < np.abs(undamped.current).sum()


def test_reset_flattens_current_only():
    grid = make_grid()
    grid.add_disturbance(4, 4, 1.0)
    grid.step()
    grid.reset()
    assert not grid.current.any()
    assert grid.previous[4, 4] == pytest.approx(1.0)


def test_add_disturbance_sets_value():
    grid = make_grid()
    grid.add_disturbance(2, 7, 1.5)
    assert grid.current[2, 7] == pytest.approx(1.5)
    grid.add_disturbance(2, 7, -0.5)
    assert grid.current[2, 7] == pytest.approx(-0.5)


@pytest.mark.parametrize("x, y", [(-1, 0), (9, 0), (0, 9), (3, -2)])
def test_add_disturbance_out_of_range(x, y):
    grid = make_grid()
    with pytest.raises(IndexError):
        grid.add_disturbance(x, y, 1.0)


@pytest.mark.parametrize("width, height", [(0, 5), (5, 0), (-3, 4)])
def test_invalid_dimensions(width, height):
    with pytest.raises(ValueError):
        WaveGrid(width, height)


def test_flat_normal_points_up():
    grid = make_grid()
    np.testing.assert_allclose(grid.surface_normal(4, 4), [0.0, 0.0, 1.0])


def test_normal_of_slope():
    grid = make_grid()
    grid.add_disturbance(5, 4, 2.0)
    half = 1.0 / math.sqrt(2.0)
    np.testing.assert_allclose(grid.surface_normal(4, 4), [-half, 0.0, half], rtol=1e-6)


@pytest.mark.parametrize("x, y", [(0, 4), (8, 4), (4, 0), (4, 8)])
def test_surface_normal_rejects_edges(x, y):
    grid = make_grid()
    with pytest.raises(IndexError):
        grid.surface_normal(x, y)


def test_normals_match_pointwise_and_are_unit():
    grid = make_grid(width=12, height=10)
    rng = np.random.default_rng(7)
    grid.current[...] = rng.normal(size=grid.shape).astype(np.float32)
    normals = grid.normals()
    assert normals.shape == (12, 10, 3)
    np.testing.assert_allclose(np.linalg.norm(normals, axis=-1), 1.0, rtol=1e-5)
    for x in range(1, 11):
        for y in range(1, 9):
            np.testing.assert_allclose(normals[x, y], grid.surface_normal(x, y), rtol=1e-5, atol=1e-6)


def test_normals_edges_point_up():
    grid = make_grid()
    grid.current[...] = np.arange(81, dtype=np.float32).reshape(9, 9)
    normals = grid.normals()
    for edge in (normals[0], normals[-1], normals[:, 0], normals[:, -1]):
        np.testing.assert_array_equal(edge, np.tile([0.0, 0.0, 1.0], (9, 1)))