"""Shared fixtures for the route/marker tests."""

import pytest

from routemark.utils.config import RouteCfg
from routemark.utils.diagnostics import DiagnosticLog
from routemark.utils.geometry import Vector3
from routemark.utils.route_steps import DirectionToken, RouteStep

F, B, R, L = (DirectionToken.FORWARD, DirectionToken.BACKWARD,
              DirectionToken.TURN_RIGHT, DirectionToken.TURN_LEFT)


@pytest.fixture
def origin():
    return Vector3(0.0, 0.0, 0.0)


@pytest.fixture
def facing_neg_z():
    return Vector3(0.0, 0.0, -1.0)


@pytest.fixture
def diag():
    return DiagnosticLog("test")


@pytest.fixture
def unit_cfg():
    return RouteCfg(marker_spacing_m=1.0, turn_trim=True)


@pytest.fixture
def zigzag_steps():
    return [RouteStep(F, 2.0), RouteStep(R, 1.0), RouteStep(L, 3.0), RouteStep(R, 1.0), RouteStep(L, 1.0)]
