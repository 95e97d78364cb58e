from dataclasses import dataclass
from typing import Optional, Sequence

from routemark.utils.config import RouteCfg
from routemark.utils.diagnostics import DiagnosticLog
from routemark.utils.geometry import Vector3
from routemark.utils.log import get_logger
from routemark.utils.markers import RouteResult, compute_route_markers
from routemark.utils.route_steps import RouteStep

logger = get_logger(__name__)


@dataclass
class NavigationSession:
    """
    Per-session state owned by the caller (the AR view), not by the engine.

    has_start_anchor : the user picked a start point (or a floor plane was found)
    markers_placed   : markers were computed once for this session
    """
    has_start_anchor: bool = False
    markers_placed: bool = False
    start_position: Optional[Vector3] = None

    def set_start_anchor(self, position: Vector3) -> bool:
        """Record the first start anchor; later taps are ignored. Returns True if accepted."""
        if self.has_start_anchor:
            return False
        self.start_position = position
        self.has_start_anchor = True
        logger.info(f"[session] start anchor at ({position.x:.3f}, {position.y:.3f}, {position.z:.3f})")
        return True


def place_route_once(
    session: NavigationSession,
    forward: Optional[Vector3],
    steps: Sequence[RouteStep],
    cfg: Optional[RouteCfg] = None,
    diag: Optional[DiagnosticLog] = None,
) -> Optional[RouteResult]:
    """
    Run the engine at most once per session.

    Returns None when markers were already placed. Otherwise returns the
    RouteResult; `markers_placed` flips only when markers came out, so the
    caller can retry after a missing anchor or forward vector.

    Example:
        session = NavigationSession()
        session.set_start_anchor(hit_position)
        res = place_route_once(session, camera_forward, steps, RouteCfg())
    """
    if session.markers_placed:
        logger.debug("[session] markers already placed, ignoring request")
        return None
    start = session.start_position if session.has_start_anchor else None
    res = compute_route_markers(start, forward, steps, cfg, diag)
    if res.markers:
        session.markers_placed = True
    return res
