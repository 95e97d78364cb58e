import dataclasses
import math

import numpy as np
import pytest

from routemark.utils.geometry import (
    Vector3,
    heading_from_yaw_deg,
    horizontal_heading,
    rotate_xz,
    yaw_deg_from_heading,
)


def _close(a: Vector3, b: Vector3, tol=1e-6):
    np.testing.assert_allclose(a.as_array(), b.as_array(), atol=tol, rtol=0)


def test_vector3_is_immutable_and_single_precision():
    v = Vector3(0.1, 0.2, 0.3)
    assert v.x == float(np.float32(0.1))
    with pytest.raises(dataclasses.FrozenInstanceError):
        v.x = 1.0


def test_vector3_arithmetic():
    a, b = Vector3(1, 2, 3), Vector3(0.5, -1, 2)
    assert a + b == Vector3(1.5, 1, 5)
    assert a - b == Vector3(0.5, 3, 1)
    assert -a == Vector3(-1, -2, -3)
    assert a.scaled(2) == Vector3(2, 4, 6)
    assert a.dot(b) == pytest.approx(0.5 - 2 + 6)
    assert Vector3(3, 0, 4).length() == pytest.approx(5.0)
    assert list(Vector3(1, 2, 3)) == [1.0, 2.0, 3.0]


def test_normalized_unit_and_degenerate():
    n = Vector3(3, 0, 4).normalized()
    assert n.length() == pytest.approx(1.0, abs=1e-6)
    _close(n, Vector3(0.6, 0, 0.8))
    z = Vector3(0, 0, 0)
    assert z.normalized() == z


@pytest.mark.parametrize("h", [Vector3(0, 0, -1), Vector3(0.6, 0, 0.8), Vector3(-1, 0, 0)])
def test_rotate_twice_equals_half_turn_and_negation(h):
    twice = rotate_xz(rotate_xz(h, 90), 90)
    _close(twice, rotate_xz(h, 180))
    _close(twice, -h)


@pytest.mark.parametrize("h", [Vector3(0, 0, -1), Vector3(0.6, 0, 0.8)])
def test_quarter_turn_is_orthogonal_and_horizontal(h):
    r = rotate_xz(h, 90)
    assert r.y == 0.0
    assert abs(r.dot(h)) < 1e-6
    assert r.length() == pytest.approx(1.0, abs=1e-6)


def test_right_turn_from_negative_z_points_to_positive_x():
    _close(rotate_xz(Vector3(0, 0, -1), 90), Vector3(1, 0, 0))
    _close(rotate_xz(Vector3(0, 0, -1), -90), Vector3(-1, 0, 0))


def test_horizontal_heading_projection():
    _close(horizontal_heading(Vector3(3, 7, 4)), Vector3(0.6, 0, 0.8))
    assert horizontal_heading(None) is None
    assert horizontal_heading(Vector3(0, 1, 0)) is None
    assert horizontal_heading(Vector3(0, 0, 0)) is None


def test_yaw_round_trip():
    for yaw in (-135.0, -90.0, 0.0, 30.0, 90.0, 179.0):
        assert yaw_deg_from_heading(heading_from_yaw_deg(yaw)) == pytest.approx(yaw, abs=1e-4)
    assert yaw_deg_from_heading(Vector3(1, 0, 0)) == pytest.approx(90.0)
    assert abs(yaw_deg_from_heading(Vector3(0, 0, -1))) == pytest.approx(180.0)
    assert math.isclose(heading_from_yaw_deg(0).z, 1.0)


def test_horizontal_heading_rejects_non_finite():
    assert horizontal_heading(Vector3(float("nan"), 0, -1)) is None
    assert horizontal_heading(Vector3(float("inf"), 0, -1)) is None
