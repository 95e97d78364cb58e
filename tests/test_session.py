from routemark.utils.diagnostics import DiagnosticKind
from routemark.utils.geometry import Vector3
from routemark.utils.session import NavigationSession, place_route_once


def test_places_markers_once(facing_neg_z, zigzag_steps, unit_cfg):
    session = NavigationSession()
    assert session.set_start_anchor(Vector3(0, 0, 0))
    first = place_route_once(session, facing_neg_z, zigzag_steps, unit_cfg)
    assert first is not None and len(first) > 0
    assert session.markers_placed
    assert place_route_once(session, facing_neg_z, zigzag_steps, unit_cfg) is None


def test_missing_anchor_allows_retry(facing_neg_z, zigzag_steps, unit_cfg):
    session = NavigationSession()
    res = place_route_once(session, facing_neg_z, zigzag_steps, unit_cfg)
    assert res.markers == ()
    assert [d.kind for d in res.diagnostics] == [DiagnosticKind.MISSING_ANCHOR]
    assert not session.markers_placed

    session.set_start_anchor(Vector3(0, 0, 0))
    res = place_route_once(session, facing_neg_z, zigzag_steps, unit_cfg)
    assert res.destination.position.is_close(Vector3(2, 0, -6))


def test_missing_forward_allows_retry(zigzag_steps, unit_cfg, facing_neg_z):
    session = NavigationSession()
    session.set_start_anchor(Vector3(0, 0, 0))
    assert place_route_once(session, None, zigzag_steps, unit_cfg).markers == ()
    assert not session.markers_placed
    assert len(place_route_once(session, facing_neg_z, zigzag_steps, unit_cfg)) > 0


def test_start_anchor_is_first_tap_only():
    session = NavigationSession()
    assert session.set_start_anchor(Vector3(1, 0, 1))
    assert not session.set_start_anchor(Vector3(5, 0, 5))
    assert session.start_position == Vector3(1, 0, 1)
    assert session.has_start_anchor
