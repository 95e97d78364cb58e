# --- configs & profiles -------------------------------------------------------
from dataclasses import dataclass, field, replace
from typing import List, Optional, Tuple
import argparse
from routemark.profiles import Profile, PROFILES

SPACING_ROUNDING_CHOICES = ("floor", "ceil")


@dataclass
class RouteCfg:
    """
    Route discretization policy.

    Notes
    -----
    • marker_spacing_m: target distance between markers along a segment (m).
      Deployments have used 0.2 and 0.4.
    • turn_trim: drop the marker sitting on the pivot before every
      non-forward step.
    • spacing_rounding: how L/spacing becomes a marker count per segment.
      "floor" keeps gaps >= spacing, "ceil" keeps gaps <= spacing.
    """
    marker_spacing_m: float = 0.40
    turn_trim: bool = True
    spacing_rounding: str = "floor"   # {"floor","ceil"}

    def __post_init__(self):
        if not float(self.marker_spacing_m) > 0.0:
            raise ValueError(f"marker_spacing_m must be > 0, got {self.marker_spacing_m}")
        if self.spacing_rounding not in SPACING_ROUNDING_CHOICES:
            raise ValueError(f"spacing_rounding must be one of {SPACING_ROUNDING_CHOICES}, "
                             f"got {self.spacing_rounding!r}")


@dataclass
class PlacementCfg:
    """
    Hints for the renderer that instantiates marker nodes.
    None of these change marker positions or headings.

    • arrow_tilt_deg: rotation about +X applied before yaw (lays the arrow flat).
    • arrow_lift_m: arrows float this far above the floor; the destination does not.
    • arrow_scale / finish_scale: uniform model scales.
    • finish_spin_deg_s: destination self-rotation speed.
    • arrow_cycle_s / arrow_max_offset_m: arrow slide-forward-and-back animation.
    """
    arrow_tilt_deg: float = -90.0
    arrow_lift_m: float = 0.05
    arrow_scale: float = 0.015
    finish_scale: float = 0.20
    finish_spin_deg_s: float = 60.0
    arrow_cycle_s: float = 3.0
    arrow_max_offset_m: float = 0.15


@dataclass
class RunCfg:
    """
    CLI inputs standing in for the tracking and planning collaborators.

    • steps / steps_json: route as "forward:2,right:1" or a JSON file.
    • start: anchor position (world, m).
    • forward: observer forward vector; yaw_deg overrides it when given
      (0 faces +Z, 180 faces -Z).
    """
    steps: str = ""
    steps_json: str = ""
    demo_route: bool = False
    start: List[float] = field(default_factory=lambda: [0.0, 0.0, 0.0])
    forward: List[float] = field(default_factory=lambda: [0.0, 0.0, -1.0])
    yaw_deg: Optional[float] = None
    out_path: str = "export_route"
    save_birdeye: bool = False
    birdeye_px: int = 1024
    log_level: Optional[str] = None   # None defers to ROUTEMARK_LOG_LEVEL


def _apply_profile_defaults(route: RouteCfg, place: PlacementCfg, run: RunCfg, profile: str):
    if profile in (None, "", Profile.NONE):
        return route, place, run
    bundle = PROFILES.get(profile)
    if not bundle:
        return route, place, run
    r = replace(route, **bundle.get("route", {})) if "route" in bundle else route
    p = replace(place, **bundle.get("placement", {})) if "placement" in bundle else place
    u = replace(run, **bundle.get("run", {})) if "run" in bundle else run
    return r, p, u


def _parser_with_defaults(route: RouteCfg, place: PlacementCfg, run: RunCfg) -> argparse.ArgumentParser:
    """
    Build an argparse parser using current dataclass values as defaults.
    This keeps CLI compatible while letting profiles change defaults cleanly.
    """
    p = argparse.ArgumentParser(
        prog="routemark",
        description=("Route-to-marker planner: turns directional steps into evenly spaced "
                     "AR marker poses (markers.json + optional bird's-eye PNG).")
    )

    # profile (visible in --help)
    p.add_argument("--profile", type=str, default=Profile.NONE,
                   choices=[Profile.NONE] + list(PROFILES.keys()),
                   help="Preset that overrides defaults; explicit flags still win.")

    # RouteCfg
    p.add_argument("--marker-spacing-m", type=float, default=route.marker_spacing_m)
    p.add_argument("--turn-trim", dest="turn_trim", action="store_true", default=route.turn_trim)
    p.add_argument("--no-turn-trim", dest="turn_trim", action="store_false")
    p.set_defaults(turn_trim=route.turn_trim)
    p.add_argument("--spacing-rounding", type=str, default=route.spacing_rounding,
                   choices=list(SPACING_ROUNDING_CHOICES))

    # PlacementCfg
    p.add_argument("--arrow-tilt-deg", type=float, default=place.arrow_tilt_deg)
    p.add_argument("--arrow-lift-m", type=float, default=place.arrow_lift_m)
    p.add_argument("--arrow-scale", type=float, default=place.arrow_scale)
    p.add_argument("--finish-scale", type=float, default=place.finish_scale)
    p.add_argument("--finish-spin-deg-s", type=float, default=place.finish_spin_deg_s)
    p.add_argument("--arrow-cycle-s", type=float, default=place.arrow_cycle_s)
    p.add_argument("--arrow-max-offset-m", type=float, default=place.arrow_max_offset_m)

    # RunCfg
    src = p.add_mutually_exclusive_group()
    src.add_argument("--steps", type=str, default=run.steps,
                     help='Route, e.g. "forward:2,right:1,left:3".')
    src.add_argument("--steps-json", type=str, default=run.steps_json,
                     help='JSON list of {"direction", "distance"}.')
    src.add_argument("--demo-route", action="store_true", default=run.demo_route,
                     help="Use the built-in zig-zag demo route.")
    p.add_argument("--start", type=float, nargs=3, default=run.start, metavar=("X", "Y", "Z"))
    p.add_argument("--forward", type=float, nargs=3, default=run.forward, metavar=("X", "Y", "Z"))
    p.add_argument("--yaw-deg", type=float, default=run.yaw_deg)
    p.add_argument("--out-path", type=str, default=run.out_path)
    p.add_argument("--save-birdeye", action="store_true", default=run.save_birdeye)
    p.add_argument("--birdeye-px", type=int, default=run.birdeye_px)
    p.add_argument("--log-level", type=str, default=run.log_level,
                   choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                   help="Overrides ROUTEMARK_LOG_LEVEL (default INFO).")

    return p


def parse_configs_from_cli(argv=None) -> Tuple[RouteCfg, PlacementCfg, RunCfg]:
    """
    Two-phase parse to honor --profile:
      1) read only --profile
      2) apply profile to defaults
      3) build full parser with those defaults, then parse the rest
    Explicit CLI flags always override profile/defaults.
    """
    # Phase 1: just the profile
    mini = argparse.ArgumentParser(add_help=False)
    mini.add_argument("--profile", type=str, default=Profile.NONE)
    known, _ = mini.parse_known_args(argv)

    # Start with library defaults, then profile overrides
    route, place, run = RouteCfg(), PlacementCfg(), RunCfg()
    route, place, run = _apply_profile_defaults(route, place, run, known.profile)

    # Phase 2: full parse with updated defaults
    parser = _parser_with_defaults(route, place, run)
    args = parser.parse_args(argv)

    # Rebuild dataclasses from the parsed args (explicit flags win)
    try:
        route = replace(route,
            marker_spacing_m=args.marker_spacing_m, turn_trim=args.turn_trim,
            spacing_rounding=args.spacing_rounding)
    except ValueError as e:
        parser.error(str(e))

    place = replace(place,
        arrow_tilt_deg=args.arrow_tilt_deg, arrow_lift_m=args.arrow_lift_m,
        arrow_scale=args.arrow_scale, finish_scale=args.finish_scale,
        finish_spin_deg_s=args.finish_spin_deg_s,
        arrow_cycle_s=args.arrow_cycle_s, arrow_max_offset_m=args.arrow_max_offset_m)

    run = replace(run,
        steps=args.steps, steps_json=args.steps_json, demo_route=args.demo_route,
        start=list(args.start), forward=list(args.forward), yaw_deg=args.yaw_deg,
        out_path=args.out_path, save_birdeye=args.save_birdeye, birdeye_px=args.birdeye_px,
        log_level=args.log_level)

    return route, place, run
