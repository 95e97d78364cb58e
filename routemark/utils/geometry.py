import math
from dataclasses import dataclass
from typing import Iterator, Optional

import numpy as np

# Below this length a vector is treated as degenerate and left unnormalized.
EPS_LEN = 1e-6


def _f32(v) -> float:
    return float(np.float32(v))


@dataclass(frozen=True)
class Vector3:
    """
    Immutable (x, y, z) in the world frame: right-handed, +Y up, -Z forward.

    Components are stored at single precision; arithmetic goes through
    float32 numpy arrays so results match what the tracking layer reports.
    """
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def __post_init__(self):
        object.__setattr__(self, "x", _f32(self.x))
        object.__setattr__(self, "y", _f32(self.y))
        object.__setattr__(self, "z", _f32(self.z))

    # --- conversions ------------------------------------------------------
    @classmethod
    def from_array(cls, a) -> "Vector3":
        a = np.asarray(a, dtype=np.float32).reshape(-1)
        if a.size != 3:
            raise ValueError(f"Vector3 expected 3 values, got {a.size}")
        return cls(float(a[0]), float(a[1]), float(a[2]))

    def as_array(self) -> np.ndarray:
        return np.array([self.x, self.y, self.z], dtype=np.float32)

    def as_list(self) -> list:
        return [self.x, self.y, self.z]

    def __iter__(self) -> Iterator[float]:
        return iter((self.x, self.y, self.z))

    # --- arithmetic -------------------------------------------------------
    def __add__(self, other: "Vector3") -> "Vector3":
        return Vector3.from_array(self.as_array() + other.as_array())

    def __sub__(self, other: "Vector3") -> "Vector3":
        return Vector3.from_array(self.as_array() - other.as_array())

    def __neg__(self) -> "Vector3":
        return Vector3.from_array(-self.as_array())

    def scaled(self, s: float) -> "Vector3":
        return Vector3.from_array(self.as_array() * np.float32(s))

    def dot(self, other: "Vector3") -> float:
        return float(np.dot(self.as_array(), other.as_array()))

    def length(self) -> float:
        return float(np.linalg.norm(self.as_array()))

    def normalized(self) -> "Vector3":
        """Unit vector in the same direction; degenerate vectors come back unchanged."""
        n = self.length()
        if n < EPS_LEN:
            return self
        return Vector3.from_array(self.as_array() / np.float32(n))

    def is_close(self, other: "Vector3", tol: float = 1e-5) -> bool:
        return bool(np.allclose(self.as_array(), other.as_array(), atol=tol, rtol=0.0))


ZERO = Vector3(0.0, 0.0, 0.0)


def rotate_xz(v: Vector3, angle_deg: float) -> Vector3:
    """
    Rotate `v` about the vertical axis by `angle_deg` in the X-Z plane.

        x' = x cos(t) - z sin(t)
        z' = x sin(t) + z cos(t)

    Y is dropped to 0. Positive angles turn right when facing -Z:
    rotate_xz((0,0,-1), 90) == (1,0,0).
    """
    t = math.radians(angle_deg)
    c, s = math.cos(t), math.sin(t)
    x, z = float(v.x), float(v.z)
    return Vector3(x * c - z * s, 0.0, x * s + z * c)


def horizontal_heading(v: Optional[Vector3]) -> Optional[Vector3]:
    """
    Project `v` onto the ground plane (Y=0) and normalize.
    Returns None when there is no usable horizontal direction.
    """
    if v is None:
        return None
    flat = Vector3(v.x, 0.0, v.z)
    n = flat.length()
    if not math.isfinite(n) or n < EPS_LEN:
        return None
    return flat.normalized()


def yaw_deg_from_heading(h: Vector3) -> float:
    """
    Yaw about +Y in degrees for a horizontal heading.
    0 faces +Z, +90 faces +X (atan2(dx, dz)).
    """
    return math.degrees(math.atan2(float(h.x), float(h.z)))


def heading_from_yaw_deg(yaw_deg: float) -> Vector3:
    """Inverse of `yaw_deg_from_heading`."""
    t = math.radians(yaw_deg)
    return Vector3(math.sin(t), 0.0, math.cos(t))
