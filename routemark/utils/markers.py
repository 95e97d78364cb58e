# utils/markers.py
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from routemark.utils.config import RouteCfg
from routemark.utils.diagnostics import Diagnostic, DiagnosticKind, DiagnosticLog
from routemark.utils.geometry import Vector3, horizontal_heading
from routemark.utils.log import get_logger
from routemark.utils.route_path import (
    Segment,
    Waypoint,
    build_segments,
    discretize_segments,
    route_corners,
)
from routemark.utils.route_steps import RouteStep

logger = get_logger(__name__)


@dataclass(frozen=True)
class MarkerRecord:
    """
    One marker handed to the renderer.

    position is in the world frame; heading is the horizontal unit direction
    of the segment that produced it. The renderer picks the arrow or the
    destination model from `is_destination`.
    """
    position: Vector3
    heading: Vector3
    is_destination: bool
    sequence_index: int


@dataclass(frozen=True)
class RouteResult:
    markers: Tuple[MarkerRecord, ...] = ()
    corners: Tuple[Vector3, ...] = ()
    diagnostics: Tuple[Diagnostic, ...] = ()

    @property
    def destination(self) -> Optional[MarkerRecord]:
        return self.markers[-1] if self.markers else None

    def __len__(self) -> int:
        return len(self.markers)

    def __bool__(self) -> bool:
        return bool(self.markers)


def classify_markers(waypoints: Sequence[Waypoint]) -> Tuple[MarkerRecord, ...]:
    """Number the waypoints and flag the last one (and only it) as destination."""
    last = len(waypoints) - 1
    return tuple(
        MarkerRecord(position=w.position, heading=w.heading, is_destination=(i == last), sequence_index=i)
        for i, w in enumerate(waypoints)
    )


def compute_route_markers(
    start: Optional[Vector3],
    forward: Optional[Vector3],
    steps: Sequence[RouteStep],
    cfg: Optional[RouteCfg] = None,
    diag: Optional[DiagnosticLog] = None,
) -> RouteResult:
    """
    Turn a start anchor, the observer's forward vector and a list of steps
    into placed-marker records.

    Pipeline
    --------
      1) Preconditions: a start position and a usable horizontal forward
         vector (projected to Y=0 and normalized here). Missing either ->
         empty result + info diagnostic.
      2) Step interpretation -> segments (`build_segments`).
      3) Per-segment sampling at `cfg.marker_spacing_m` with optional
         turn-trim (`discretize_segments`).
      4) Classification: last waypoint is the destination.

    Never raises on input problems; inspect `RouteResult.diagnostics`.
    Deterministic: identical inputs give identical records.

    Example:
        res = compute_route_markers(
            Vector3(0, 0, 0), Vector3(0, 0, -1),
            parse_route_steps("forward:2,right:1,left:3"),
            RouteCfg(marker_spacing_m=0.4),
        )
        res.destination.position  # -> Vector3(1, 0, -5)
    """
    cfg = cfg or RouteCfg()
    diag = diag if diag is not None else DiagnosticLog("route")

    if start is None:
        diag.info(DiagnosticKind.MISSING_ANCHOR, "no start anchor yet, placement skipped")
        return RouteResult(diagnostics=tuple(diag.events))

    heading = horizontal_heading(forward)
    if heading is None:
        diag.info(DiagnosticKind.MISSING_FORWARD, "no usable forward vector, placement skipped")
        return RouteResult(diagnostics=tuple(diag.events))

    if not steps:
        diag.info(DiagnosticKind.EMPTY_RESULT, "route has no steps, nothing to place")
        return RouteResult(diagnostics=tuple(diag.events))

    segments: List[Segment] = build_segments(steps, start, heading, diag)
    waypoints = discretize_segments(
        segments, cfg.marker_spacing_m, turn_trim=cfg.turn_trim, rounding=cfg.spacing_rounding
    )
    if not waypoints:
        diag.info(DiagnosticKind.EMPTY_RESULT, "route produced no waypoints, nothing to place")
        return RouteResult(diagnostics=tuple(diag.events))

    markers = classify_markers(waypoints)
    corners = tuple(route_corners(start, segments))
    dst = markers[-1].position
    logger.info(
        f"[markers] {len(markers)} markers over {len(segments)} segments "
        f"@ {cfg.marker_spacing_m:.2f} m, destination=({dst.x:.3f}, {dst.y:.3f}, {dst.z:.3f})"
    )
    return RouteResult(markers=markers, corners=corners, diagnostics=tuple(diag.events))
