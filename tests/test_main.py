import json

import pytest

from routemark.main import DEMO_ROUTE_STEPS, main, marker_meta, resolve_forward
from routemark.utils.config import PlacementCfg, RunCfg
from routemark.utils.geometry import Vector3
from routemark.utils.markers import MarkerRecord


def _load(out_dir):
    with open(out_dir / "markers.json") as f:
        return json.load(f)


def test_demo_route_writes_markers_and_birdeye(tmp_path):
    rc = main(["--demo-route", "--marker-spacing-m", "1.0", "--save-birdeye",
               "--out-path", str(tmp_path)])
    assert rc == 0
    meta = _load(tmp_path)
    assert len(meta["steps"]) == len(DEMO_ROUTE_STEPS)
    assert meta["corners_world"][-1] == pytest.approx([2.0, 0.0, -6.0], abs=1e-5)
    kinds = [m["kind"] for m in meta["markers"]]
    assert kinds[-1] == "destination"
    assert kinds.count("destination") == 1
    assert [m["index"] for m in meta["markers"]] == list(range(len(kinds)))
    assert (tmp_path / "route_birdeye.png").stat().st_size > 0


def test_steps_json_and_yaw(tmp_path):
    route = tmp_path / "route.json"
    route.write_text(json.dumps([{"direction": "forward", "distance": 1.0}]), encoding="utf-8")
    rc = main(["--steps-json", str(route), "--yaw-deg", "90", "--marker-spacing-m", "0.5",
               "--out-path", str(tmp_path / "out")])
    assert rc == 0
    meta = _load(tmp_path / "out")
    assert meta["markers"][-1]["position_world"] == pytest.approx([1.0, 0.0, 0.0], abs=1e-5)


def test_empty_route_reports_and_fails(tmp_path):
    rc = main(["--out-path", str(tmp_path)])
    assert rc == 1
    meta = _load(tmp_path)
    assert meta["markers"] == []
    assert [d["kind"] for d in meta["diagnostics"]] == ["empty_result"]
    assert not (tmp_path / "route_birdeye.png").exists()


def test_marker_meta_arrow_vs_destination():
    place = PlacementCfg(arrow_lift_m=0.05)
    arrow = MarkerRecord(Vector3(1, 0, 2), Vector3(1, 0, 0), False, 0)
    finish = MarkerRecord(Vector3(3, 0, 2), Vector3(1, 0, 0), True, 1)

    a = marker_meta(arrow, place)
    assert a["kind"] == "arrow"
    assert a["anchor_position_world"][1] == pytest.approx(0.05)
    assert a["yaw_deg"] == pytest.approx(90.0)
    assert a["scale"] == pytest.approx(place.arrow_scale)
    assert "slide" in a

    d = marker_meta(finish, place)
    assert d["kind"] == "destination"
    assert d["anchor_position_world"] == d["position_world"]
    assert d["rotation_wxyz"] == [1.0, 0.0, 0.0, 0.0]
    assert d["spin_deg_s"] == pytest.approx(place.finish_spin_deg_s)


def test_resolve_forward_prefers_yaw():
    assert resolve_forward(RunCfg(forward=[0, 0, -1])) == Vector3(0, 0, -1)
    assert resolve_forward(RunCfg(yaw_deg=0.0)).is_close(Vector3(0, 0, 1))


def test_cli_leaves_log_level_to_env(tmp_path, monkeypatch):
    seen = {}
    monkeypatch.setattr("routemark.main.setup_logging",
                        lambda service, level=None: seen.setdefault("level", level))
    main(["--demo-route", "--out-path", str(tmp_path)])
    assert seen["level"] is None
