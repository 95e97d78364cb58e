import json
from pathlib import Path
from typing import List

from routemark.utils.config import PlacementCfg, RouteCfg, RunCfg, parse_configs_from_cli
from routemark.utils.diagnostics import DiagnosticLog
from routemark.utils.geometry import Vector3, heading_from_yaw_deg, yaw_deg_from_heading
from routemark.utils.log import get_logger, setup_logging
from routemark.utils.markers import MarkerRecord, RouteResult
from routemark.utils.quaternion_helper import marker_rotation, quat_to_wxyz
from routemark.utils.route_steps import (
    DirectionToken,
    RouteStep,
    load_route_steps,
    parse_route_steps,
    steps_to_meta,
)
from routemark.utils.route_vis import save_birdeye_markers_png
from routemark.utils.session import NavigationSession, place_route_once

logger = get_logger("routemark.main")

# Zig-zag demo: corners (0,0,-2) (1,0,-2) (1,0,-5) (2,0,-5) (2,0,-6) when facing -Z.
DEMO_ROUTE_STEPS = (
    RouteStep(DirectionToken.FORWARD, 2.0),
    RouteStep(DirectionToken.TURN_RIGHT, 1.0),
    RouteStep(DirectionToken.TURN_LEFT, 3.0),
    RouteStep(DirectionToken.TURN_RIGHT, 1.0),
    RouteStep(DirectionToken.TURN_LEFT, 1.0),
)


def resolve_route_steps(run: RunCfg) -> List[RouteStep]:
    """Pick the route source from the run config: JSON file, inline string, or the demo."""
    if run.steps_json:
        return load_route_steps(run.steps_json)
    if run.steps:
        return parse_route_steps(run.steps)
    if run.demo_route:
        return list(DEMO_ROUTE_STEPS)
    return []


def resolve_forward(run: RunCfg) -> Vector3:
    if run.yaw_deg is not None:
        return heading_from_yaw_deg(float(run.yaw_deg))
    return Vector3(*run.forward)


def marker_meta(m: MarkerRecord, place: PlacementCfg) -> dict:
    """
    Pack one marker for the renderer.

    Arrows are lifted `arrow_lift_m` above the floor and slide along their
    heading; the destination sits on the floor with identity rotation and spins.

    Example:
        meta = marker_meta(res.markers[0], PlacementCfg())
    """
    q = marker_rotation(m.heading, m.is_destination, tilt_deg=place.arrow_tilt_deg)
    lift = 0.0 if m.is_destination else float(place.arrow_lift_m)
    meta = {
        "index": m.sequence_index,
        "kind": "destination" if m.is_destination else "arrow",
        "position_world": m.position.as_list(),
        "anchor_position_world": [m.position.x, m.position.y + lift, m.position.z],
        "heading": m.heading.as_list(),
        "yaw_deg": yaw_deg_from_heading(m.heading),
        "rotation_wxyz": quat_to_wxyz(q),
    }
    if m.is_destination:
        meta["scale"] = float(place.finish_scale)
        meta["spin_deg_s"] = float(place.finish_spin_deg_s)
    else:
        meta["scale"] = float(place.arrow_scale)
        meta["slide"] = {"cycle_s": float(place.arrow_cycle_s),
                         "max_offset_m": float(place.arrow_max_offset_m)}
    return meta


def route_meta(res: RouteResult, steps: List[RouteStep], route: RouteCfg, place: PlacementCfg) -> dict:
    return {
        "route_cfg": {
            "marker_spacing_m": route.marker_spacing_m,
            "turn_trim": route.turn_trim,
            "spacing_rounding": route.spacing_rounding,
        },
        "steps": steps_to_meta(steps),
        "corners_world": [c.as_list() for c in res.corners],
        "markers": [marker_meta(m, place) for m in res.markers],
        "diagnostics": [
            {"kind": d.kind.value, "message": d.message, "step_index": d.step_index}
            for d in res.diagnostics
        ],
    }


# -------------------- Main --------------------
def main(argv=None) -> int:
    """
    Compute AR route markers from the command line.

    Pipeline
    --------
    1) Configs: profile defaults → explicit flags (RouteCfg, PlacementCfg, RunCfg).
    2) Inputs: start anchor and forward vector stand in for the tracking
       layer; steps come from --steps, --steps-json or --demo-route.
    3) Engine: one pass per session (`place_route_once`).
    4) Outputs in --out-path:
       • markers.json : corners, marker poses + renderer hints, diagnostics
       • route_birdeye.png (with --save-birdeye)

    Quick start
    -----------
    routemark --profile arrow_markers \\
      --steps "forward:2,right:1,left:3,right:1,left:1" \\
      --start 0 0 0 --forward 0 0 -1 \\
      --save-birdeye --out-path export_route

    Exit code is 0 when markers were produced, 1 otherwise.
    """
    route, place, run = parse_configs_from_cli(argv)
    setup_logging("routemark", level=run.log_level)

    steps = resolve_route_steps(run)
    logger.info(f"[load] {len(steps)} route steps")

    session = NavigationSession()
    session.set_start_anchor(Vector3(*run.start))
    diag = DiagnosticLog("route")
    res = place_route_once(session, resolve_forward(run), steps, route, diag)

    OUT = Path(run.out_path)
    OUT.mkdir(parents=True, exist_ok=True)
    with open(OUT / "markers.json", "w") as f:
        json.dump(route_meta(res, steps, route, place), f, indent=2)
    logger.info(f"[save] {len(res.markers)} markers → {OUT / 'markers.json'}")

    if run.save_birdeye and res.markers:
        png = save_birdeye_markers_png(OUT / "route_birdeye.png", res.markers,
                                       corners=res.corners, px=run.birdeye_px)
        logger.info(f"[save] bird's-eye → {png}")

    return 0 if res.markers else 1


if __name__ == "__main__":
    raise SystemExit(main())
