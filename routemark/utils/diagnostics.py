import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from routemark.utils.log import get_logger

logger = get_logger(__name__)


class DiagnosticKind(str, Enum):
    UNKNOWN_DIRECTION = "unknown_direction"
    NON_POSITIVE_DISTANCE = "non_positive_distance"
    MISSING_FORWARD = "missing_forward"
    MISSING_ANCHOR = "missing_anchor"
    EMPTY_RESULT = "empty_result"


@dataclass(frozen=True)
class Diagnostic:
    kind: DiagnosticKind
    level: int
    message: str
    step_index: Optional[int] = None


class DiagnosticLog:
    """
    Collects diagnostics raised while building a route and mirrors each one
    to the module logger at its own level.

    Nothing here raises: callers inspect `events` after the run.
    """

    def __init__(self, tag: str = "route"):
        self.tag = tag
        self.events: List[Diagnostic] = []

    def report(self, kind: DiagnosticKind, message: str, *,
               level: int = logging.INFO, step_index: Optional[int] = None) -> Diagnostic:
        d = Diagnostic(kind=kind, level=level, message=message, step_index=step_index)
        self.events.append(d)
        where = f" (step {step_index})" if step_index is not None else ""
        logger.log(level, f"[{self.tag}] {message}{where}")
        return d

    def warn(self, kind: DiagnosticKind, message: str, *, step_index: Optional[int] = None) -> Diagnostic:
        return self.report(kind, message, level=logging.WARNING, step_index=step_index)

    def info(self, kind: DiagnosticKind, message: str, *, step_index: Optional[int] = None) -> Diagnostic:
        return self.report(kind, message, level=logging.INFO, step_index=step_index)

    def kinds(self) -> List[DiagnosticKind]:
        return [d.kind for d in self.events]

    def __len__(self) -> int:
        return len(self.events)
