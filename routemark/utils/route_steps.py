# utils/route_steps.py
import json
import math
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import List, NamedTuple, Optional, Union

from routemark.utils.diagnostics import DiagnosticKind, DiagnosticLog
from routemark.utils.geometry import Vector3, rotate_xz


class DirectionToken(str, Enum):
    FORWARD = "forward"
    BACKWARD = "backward"
    TURN_RIGHT = "turn_right"
    TURN_LEFT = "turn_left"


# Accepted spellings, including the planning UI's Turkish labels.
_ALIASES = {
    DirectionToken.FORWARD:    ("forward", "f", "fwd", "ileri"),
    DirectionToken.BACKWARD:   ("backward", "back", "b", "geri"),
    DirectionToken.TURN_RIGHT: ("turn_right", "right", "r", "sağ", "sag"),
    DirectionToken.TURN_LEFT:  ("turn_left", "left", "l", "sol"),
}
_LOOKUP = {alias: tok for tok, names in _ALIASES.items() for alias in names}

# Heading change per token, degrees about +Y (positive = right).
_TURN_DEG = {
    DirectionToken.TURN_RIGHT: 90.0,
    DirectionToken.TURN_LEFT: -90.0,
}


def parse_direction(token) -> Optional[DirectionToken]:
    """Map a direction label to a DirectionToken; None if it is not recognized."""
    if isinstance(token, DirectionToken):
        return token
    if not isinstance(token, str):
        return None
    return _LOOKUP.get(token.strip().lower())


@dataclass(frozen=True)
class RouteStep:
    """
    One planned move: turn per `direction`, then walk `distance` meters.

    `direction` keeps whatever the planner sent when it is not a known token,
    so the interpreter can report it instead of the parser dropping it.
    """
    direction: Union[DirectionToken, str]
    distance: float = 0.0

    @property
    def token(self) -> Optional[DirectionToken]:
        return parse_direction(self.direction)

    @property
    def is_forward(self) -> bool:
        return self.token is DirectionToken.FORWARD


class StepResult(NamedTuple):
    heading: Vector3
    target: Vector3
    skipped: bool


def interpret_step(position: Vector3, heading: Vector3, step: RouteStep,
                   diag: Optional[DiagnosticLog] = None, *, step_index: Optional[int] = None) -> StepResult:
    """
    Apply one RouteStep to the current (position, heading).

    Rules
    -----
      forward    : h' = h
      backward   : h' = -h
      turn_right : h' = rotate(h, +90°)
      turn_left  : h' = rotate(h, -90°)
      unknown    : h' = h, no displacement (skipped=True), warning reported

    Target is p' = p + h' * distance. A negative, NaN or infinite distance
    is reported and treated as 0 (the step still yields a zero-length segment).
    """
    tok = step.token
    if tok is None:
        if diag is not None:
            diag.warn(DiagnosticKind.UNKNOWN_DIRECTION,
                      f"unknown direction {step.direction!r} skipped", step_index=step_index)
        return StepResult(heading, position, True)

    if tok is DirectionToken.BACKWARD:
        h_new = -heading
    elif tok in _TURN_DEG:
        h_new = rotate_xz(heading, _TURN_DEG[tok]).normalized()
    else:
        h_new = heading

    distance = float(step.distance)
    if not math.isfinite(distance):
        if diag is not None:
            diag.warn(DiagnosticKind.NON_POSITIVE_DISTANCE,
                      f"non-finite distance {distance} replaced by 0", step_index=step_index)
        distance = 0.0
    elif distance < 0.0:
        if diag is not None:
            diag.warn(DiagnosticKind.NON_POSITIVE_DISTANCE,
                      f"negative distance {distance:.3f} m replaced by 0", step_index=step_index)
        distance = 0.0
    elif distance == 0.0 and diag is not None:
        diag.info(DiagnosticKind.NON_POSITIVE_DISTANCE,
                  "zero distance, segment collapses to a point", step_index=step_index)

    target = position + h_new.scaled(distance)
    if not all(math.isfinite(c) for c in target):
        if diag is not None:
            diag.warn(DiagnosticKind.NON_POSITIVE_DISTANCE,
                      f"distance {distance:g} m overflows float32, replaced by 0", step_index=step_index)
        target = position
    return StepResult(h_new, target, False)


# --- parsing --------------------------------------------------------------------
def parse_route_steps(text: str) -> List[RouteStep]:
    """
    Parse the compact CLI form, e.g. "forward:2,right:1,left:3".

    A missing distance means 0. Unknown direction labels are kept verbatim.
    Raises ValueError if a distance is not a number.
    """
    steps: List[RouteStep] = []
    if text is None:
        return steps
    for raw in text.split(","):
        item = raw.strip()
        if not item:
            continue
        name, _, dist = item.partition(":")
        steps.append(_make_step(name.strip(), dist.strip() or 0.0, where=item))
    return steps


def load_route_steps(path) -> List[RouteStep]:
    """
    Read steps from a JSON file: [{"direction": "forward", "distance": 2.0}, ...]
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Missing route file: {path}")
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, list):
        raise ValueError(f"{path}: expected a JSON list of steps, got {type(data).__name__}")
    steps = []
    for i, item in enumerate(data):
        if not isinstance(item, dict) or "direction" not in item:
            raise ValueError(f"{path}: step {i} needs a 'direction' field")
        steps.append(_make_step(str(item["direction"]), item.get("distance", 0.0), where=f"{path}[{i}]"))
    return steps


def steps_to_meta(steps: List[RouteStep]) -> list:
    out = []
    for s in steps:
        d = s.direction.value if isinstance(s.direction, DirectionToken) else s.direction
        out.append({"direction": d, "distance": float(s.distance)})
    return out


def _make_step(name: str, dist, *, where: str) -> RouteStep:
    try:
        distance = float(dist)
    except (TypeError, ValueError):
        raise ValueError(f"bad distance in route step {where!r}: {dist!r}")
    tok = parse_direction(name)
    return RouteStep(tok if tok is not None else name, distance)
