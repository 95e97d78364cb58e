import math
from typing import Optional

import numpy as np
import quaternion as nq

from routemark.utils.geometry import Vector3, horizontal_heading, yaw_deg_from_heading

X_AXIS = np.array([1.0, 0.0, 0.0], dtype=np.float64)
Y_AXIS = np.array([0.0, 1.0, 0.0], dtype=np.float64)


def quat_from_angle_axis(theta: float, axis) -> nq.quaternion:
    """
    Quaternion rotating by `theta` radians about `axis` (normalized here).
    Same convention as the tracking platform's axis-angle constructor.
    """
    axis = np.asarray(axis, dtype=np.float64).reshape(3)
    n = float(np.linalg.norm(axis))
    if n == 0.0:
        return nq.one
    return nq.from_rotation_vector(axis / n * float(theta))


def _quat_xyzw_to_R(x: float, y: float, z: float, w: float) -> np.ndarray:
    """
    Convert a quaternion given in **(x, y, z, w)** order to a 3×3 rotation matrix.

    Robust to zero-norm (returns I).
    """
    n = x * x + y * y + z * z + w * w
    if n == 0.0:
        return np.eye(3, dtype=np.float32)
    s = 2.0 / n
    xx, yy, zz = x * x, y * y, z * z
    xy, xz, yz = x * y, x * z, y * z
    wx, wy, wz = w * x, w * y, w * z
    return np.array([
        [1.0 - s * (yy + zz),     s * (xy - wz),         s * (xz + wy)],
        [    s * (xy + wz),   1.0 - s * (xx + zz),       s * (yz - wx)],
        [    s * (xz - wy),       s * (yz + wx),     1.0 - s * (xx + yy)],
    ], dtype=np.float32)


def rotmat_from_quat(q) -> np.ndarray:
    """
    Return a 3×3 rotation matrix from a numpy-quaternion, an object exposing
    (x, y, z, w) fields, or a 4-vector in (x, y, z, w) order as the AR
    platform reports poses.
    """
    if isinstance(q, nq.quaternion):
        return np.array(nq.as_rotation_matrix(q), dtype=np.float32)

    if all(hasattr(q, a) for a in ("x", "y", "z", "w")):
        return _quat_xyzw_to_R(float(q.x), float(q.y), float(q.z), float(q.w))

    arr = np.array(q, dtype=np.float64).ravel()
    if arr.size == 4:
        x, y, z, w = map(float, arr)
        return _quat_xyzw_to_R(x, y, z, w)

    raise ValueError(f"rotmat_from_quat: unsupported rotation {q!r}")


def rotate_vec3_from_quat_axis(v3, q) -> np.ndarray:
    """
    Rotate a 3D vector `v3` by quaternion `q`.
    Returns a (3,) float32 numpy array.
    """
    v3 = np.asarray(v3, dtype=np.float64).reshape(-1)
    if v3.size != 3:
        raise ValueError(f"rotate_vec3_from_quat_axis expected 3 values, got {v3.size}")
    R = rotmat_from_quat(q)
    return (R.astype(np.float64) @ v3).astype(np.float32)


def forward_from_camera_rotation(q) -> Optional[Vector3]:
    """
    Horizontal forward direction of a camera whose orientation is `q`.

    The camera looks down its local -Z axis; that axis is taken to world,
    projected onto the ground plane and normalized. Returns None when the
    camera points straight up or down (no horizontal component).
    """
    fwd = rotate_vec3_from_quat_axis((0.0, 0.0, -1.0), q)
    return horizontal_heading(Vector3.from_array(fwd))


def marker_rotation(heading: Vector3, is_destination: bool, *, tilt_deg: float = -90.0) -> nq.quaternion:
    """
    Orientation of a placed marker.

    Directional markers: tilt about +X by `tilt_deg` (lays a forward-pointing
    arrow model flat), then yaw about +Y by atan2(h.x, h.z); the product is
    q = Ry * Rx so the tilt is applied first.
    The destination marker keeps the identity orientation.
    """
    if is_destination:
        return nq.one
    yaw = yaw_deg_from_heading(heading)
    q_tilt = quat_from_angle_axis(math.radians(tilt_deg), X_AXIS)
    q_yaw = quat_from_angle_axis(math.radians(yaw), Y_AXIS)
    return q_yaw * q_tilt


def quat_to_wxyz(q: nq.quaternion) -> list:
    return [float(q.w), float(q.x), float(q.y), float(q.z)]
