# utils/route_path.py
import math
from typing import List, NamedTuple, Optional, Sequence, Tuple

import numpy as np

from routemark.utils.diagnostics import DiagnosticLog
from routemark.utils.geometry import Vector3, horizontal_heading
from routemark.utils.route_steps import RouteStep, interpret_step

SPACING_ROUNDING = ("floor", "ceil")


class Segment(NamedTuple):
    """Straight piece of the route produced by one step (or one corner pair)."""
    start: Vector3
    end: Vector3
    heading: Vector3
    is_forward: bool
    step_index: int


class Waypoint(NamedTuple):
    position: Vector3
    heading: Vector3
    is_destination: bool = False


def segment_sample_count(length: float, spacing: float, rounding: str = "floor") -> int:
    """
    Number of intervals a segment of `length` is split into.

    floor: count = max(1, floor(L / s)); gaps land in [s, 2s) for L >= s.
    ceil : count = max(1, ceil(L / s)); gaps never exceed s.
    A zero-length segment still gets one interval (two coincident points).
    """
    if spacing <= 0.0:
        raise ValueError(f"spacing must be > 0, got {spacing}")
    ratio = float(length) / float(spacing)
    if rounding == "ceil":
        n = math.ceil(ratio - 1e-6)
    elif rounding == "floor":
        n = math.floor(ratio + 1e-6)
    else:
        raise ValueError(f"unknown spacing rounding {rounding!r}, expected one of {SPACING_ROUNDING}")
    return max(1, int(n))


def sample_segment(p0: Vector3, p1: Vector3, spacing: float, rounding: str = "floor") -> np.ndarray:
    """
    Evenly spaced points from p0 to p1, both endpoints included.
    Returns (count+1, 3) float32; first row == p0 and last row == p1 exactly.
    """
    a, b = p0.as_array(), p1.as_array()
    count = segment_sample_count(float(np.linalg.norm(b - a)), spacing, rounding)
    t = (np.arange(count + 1, dtype=np.float32) / np.float32(count))[:, None]
    return ((1.0 - t) * a[None, :] + t * b[None, :]).astype(np.float32)


def build_segments(steps: Sequence[RouteStep], start: Vector3, heading: Vector3,
                   diag: Optional[DiagnosticLog] = None) -> List[Segment]:
    """
    Walk the route once and return one Segment per usable step.

    The path state (position, heading) starts at `start` / `heading` and is
    advanced by `interpret_step`; steps with an unknown direction move
    nothing and produce no segment.
    """
    pos, h = start, heading
    segments: List[Segment] = []
    for i, step in enumerate(steps):
        h, target, skipped = interpret_step(pos, h, step, diag, step_index=i)
        if skipped:
            continue
        segments.append(Segment(pos, target, h, step.is_forward, i))
        pos = target
    return segments


def route_corners(start: Vector3, segments: Sequence[Segment]) -> List[Vector3]:
    """Polyline vertices: the start followed by every segment end."""
    return [start] + [s.end for s in segments]


def discretize_segments(segments: Sequence[Segment], spacing: float, *,
                        turn_trim: bool = True, rounding: str = "floor") -> List[Waypoint]:
    """
    Concatenate per-segment samples into one waypoint list.

    Turn-trim: before appending a segment whose step is not "forward", the
    last waypoint already in the list (the end of the previous segment, i.e.
    the pivot of the turn) is dropped so no arrow points through the corner.
    Each waypoint carries its segment's heading; none is a destination yet.
    """
    out: List[Waypoint] = []
    for seg in segments:
        pts = sample_segment(seg.start, seg.end, spacing, rounding)
        if turn_trim and not seg.is_forward and out:
            out.pop()
        out.extend(Waypoint(Vector3.from_array(p), seg.heading) for p in pts)
    return out


def discretize_polyline(corners: Sequence[Vector3], spacing: float, *,
                        rounding: str = "floor") -> Tuple[List[Segment], List[Waypoint]]:
    """
    Discretize a fixed corner list (no step interpretation, no turn-trim).

    Headings come from each segment's own direction. A zero-length segment
    inherits the previous heading; leading zero-length segments take the
    first real one. With no real segment at all, headings default to -Z.
    """
    n_seg = max(0, len(corners) - 1)
    own: List[Optional[Vector3]] = [horizontal_heading(corners[i + 1] - corners[i]) for i in range(n_seg)]
    prev_h = next((h for h in own if h is not None), Vector3(0.0, 0.0, -1.0))
    segments: List[Segment] = []
    for i, h in enumerate(own):
        h = h if h is not None else prev_h
        segments.append(Segment(corners[i], corners[i + 1], h, True, i))
        prev_h = h
    return segments, discretize_segments(segments, spacing, turn_trim=False, rounding=rounding)
