"""
Unit quaternions for rigid rotations.

Quaternions are stored as ``(w, x, y, z)`` numpy arrays in either float32 or
float64. Every constructor normalizes its input, so products and casts stay
unit length.
"""

import logging
import math
from typing import Optional

import numpy as np

from occsketch.cad_types import Vector, VectorLike, as_unit_vector, as_vector
from occsketch.config import (
    NEAR_ANTIPARALLEL_TOLERANCE,
    NORM_TOLERANCE,
    PARALLEL_TOLERANCE,
    resolve_dtype,
)

logger = logging.getLogger(__name__)


class UnitQuaternion:
    __slots__ = ("_coords",)

    def __init__(self, w: float, x: float, y: float, z: float, dtype=None):
        coords = np.asarray([w, x, y, z], dtype=resolve_dtype(dtype))
        norm = float(np.linalg.norm(coords))
        if norm == 0.0 or not math.isfinite(norm):
            raise ValueError(f"Cannot build a unit quaternion from {coords.tolist()}")
        coords = coords / coords.dtype.type(norm)
        coords.flags.writeable = False
        self._coords = coords

    @classmethod
    def identity(cls, dtype=None) -> "UnitQuaternion":
        return cls(1.0, 0.0, 0.0, 0.0, dtype=dtype)

    @classmethod
    def from_axis_angle(cls, axis: VectorLike, angle: float, dtype=None) -> "UnitQuaternion":
        """Rotation of ``angle`` radians about ``axis`` (right-hand rule)."""
        axis_unit = as_unit_vector(axis, dtype=np.float64)
        half = 0.5 * angle
        s = math.sin(half)
        return cls(
            math.cos(half), axis_unit.x * s, axis_unit.y * s, axis_unit.z * s, dtype=dtype
        )

    @classmethod
    def from_rotation_matrix(cls, matrix, dtype=None) -> "UnitQuaternion":
        """Convert a proper 3x3 rotation matrix (basis vectors as columns)."""
        m = np.asarray(matrix, dtype=np.float64)
        if m.shape != (3, 3):
            raise ValueError(f"Expected a 3x3 matrix, got shape {m.shape}")
        trace = m[0, 0] + m[1, 1] + m[2, 2]
        if trace > 0.0:
            s = 2.0 * math.sqrt(trace + 1.0)
            w = 0.25 * s
            x = (m[2, 1] - m[1, 2]) / s
            y = (m[0, 2] - m[2, 0]) / s
            z = (m[1, 0] - m[0, 1]) / s
        elif m[0, 0] > m[1, 1] and m[0, 0] > m[2, 2]:
            s = 2.0 * math.sqrt(1.0 + m[0, 0] - m[1, 1] - m[2, 2])
            w = (m[2, 1] - m[1, 2]) / s
            x = 0.25 * s
            y = (m[0, 1] + m[1, 0]) / s
            z = (m[0, 2] + m[2, 0]) / s
        elif m[1, 1] > m[2, 2]:
            s = 2.0 * math.sqrt(1.0 + m[1, 1] - m[0, 0] - m[2, 2])
            w = (m[0, 2] - m[2, 0]) / s
            x = (m[0, 1] + m[1, 0]) / s
            y = 0.25 * s
            z = (m[1, 2] + m[2, 1]) / s
        else:
            s = 2.0 * math.sqrt(1.0 + m[2, 2] - m[0, 0] - m[1, 1])
            w = (m[1, 0] - m[0, 1]) / s
            x = (m[0, 2] + m[2, 0]) / s
            y = (m[1, 2] + m[2, 1]) / s
            z = 0.25 * s
        return cls(w, x, y, z, dtype=dtype)

    @classmethod
    def rotation_between(
        cls, a: VectorLike, b: VectorLike, dtype=None
    ) -> Optional["UnitQuaternion"]:
        """
        Shortest-arc rotation taking direction ``a`` onto direction ``b``.

        Returns None when ``a`` and ``b`` are antiparallel, since any axis
        perpendicular to them gives an equally short rotation. Nearly
        antiparallel pairs are handled as a half turn followed by a small
        correction, which is accurate but only approximately the shortest arc.
        """
        dtype = resolve_dtype(dtype)
        ua = np.asarray(as_unit_vector(a, dtype=np.float64))
        ub = np.asarray(as_unit_vector(b, dtype=np.float64))
        axis = np.cross(ua, ub)
        sin_angle = float(np.linalg.norm(axis))
        cos_angle = float(np.dot(ua, ub))

        if sin_angle <= PARALLEL_TOLERANCE:
            if cos_angle < 0.0:
                return None
            return cls.identity(dtype=dtype)

        if cos_angle < 0.0 and sin_angle < NEAR_ANTIPARALLEL_TOLERANCE:
            # The cross product carries too little signal here to fix the axis.
            # Flip ``a`` with a half turn first, then take the short arc from -a.
            flip = cls._half_turn_about_perpendicular(ua)
            rest = cls.rotation_between(-ua, ub, dtype=np.float64)
            return (rest * flip).cast(dtype)

        axis = axis / sin_angle
        half = 0.5 * math.atan2(sin_angle, cos_angle)
        s = math.sin(half)
        return cls(math.cos(half), axis[0] * s, axis[1] * s, axis[2] * s, dtype=dtype)

    @classmethod
    def _half_turn_about_perpendicular(cls, direction: np.ndarray) -> "UnitQuaternion":
        # Gram-Schmidt the canonical axis least aligned with ``direction``
        basis = np.eye(3)[int(np.argmin(np.abs(direction)))]
        perpendicular = basis - np.dot(basis, direction) * direction
        perpendicular = perpendicular / np.linalg.norm(perpendicular)
        return cls(0.0, *perpendicular.tolist(), dtype=np.float64)

    @property
    def dtype(self) -> np.dtype:
        return self._coords.dtype

    @property
    def w(self) -> float:
        return float(self._coords[0])

    @property
    def x(self) -> float:
        return float(self._coords[1])

    @property
    def y(self) -> float:
        return float(self._coords[2])

    @property
    def z(self) -> float:
        return float(self._coords[3])

    @property
    def coords(self) -> np.ndarray:
        """Read-only ``(w, x, y, z)`` array."""
        return self._coords

    def norm(self) -> float:
        return float(np.linalg.norm(self._coords.astype(np.float64)))

    def inverse(self) -> "UnitQuaternion":
        w, x, y, z = self._coords.tolist()
        return UnitQuaternion(w, -x, -y, -z, dtype=self.dtype)

    def angle(self) -> float:
        """Rotation angle in radians, in ``[0, pi]``."""
        w = min(1.0, abs(self.w))
        return 2.0 * math.acos(w)

    def rotate(self, vector: VectorLike) -> Vector:
        """Apply the rotation to a 3D vector or point."""
        v = np.asarray(as_vector(vector, dtype=self.dtype))
        q = self._coords
        u = q[1:]
        t = 2.0 * np.cross(u, v)
        rotated = v + q[0] * t + np.cross(u, t)
        return rotated.astype(self.dtype, copy=False).view(Vector)

    def to_rotation_matrix(self) -> np.ndarray:
        w, x, y, z = self._coords.astype(np.float64).tolist()
        return np.array(
            [
                [1 - 2 * (y * y + z * z), 2 * (x * y - w * z), 2 * (x * z + w * y)],
                [2 * (x * y + w * z), 1 - 2 * (x * x + z * z), 2 * (y * z - w * x)],
                [2 * (x * z - w * y), 2 * (y * z + w * x), 1 - 2 * (x * x + y * y)],
            ],
            dtype=self.dtype,
        )

    def cast(self, dtype) -> "UnitQuaternion":
        """Convert to another float precision, renormalizing the result."""
        dtype = resolve_dtype(dtype)
        if dtype == self.dtype:
            return self
        raw = self._coords.astype(dtype)
        if abs(float(np.linalg.norm(raw.astype(np.float64))) - 1.0) > NORM_TOLERANCE:
            logger.debug(f"Quaternion denormalized by cast to {dtype}, renormalizing")
        return UnitQuaternion(*raw.tolist(), dtype=dtype)

    def __mul__(self, other):
        if isinstance(other, UnitQuaternion):
            w1, x1, y1, z1 = self._coords.astype(np.float64).tolist()
            w2, x2, y2, z2 = other._coords.astype(np.float64).tolist()
            return UnitQuaternion(
                w1 * w2 - x1 * x2 - y1 * y2 - z1 * z2,
                w1 * x2 + x1 * w2 + y1 * z2 - z1 * y2,
                w1 * y2 - x1 * z2 + y1 * w2 + z1 * x2,
                w1 * z2 + x1 * y2 - y1 * x2 + z1 * w2,
                dtype=self.dtype,
            )
        if isinstance(other, (np.ndarray, tuple, list)):
            return self.rotate(other)
        return NotImplemented

    def is_close(self, other: "UnitQuaternion", tol: float = 1e-9) -> bool:
        """Rotation equality; ``q`` and ``-q`` describe the same rotation."""
        a = self._coords.astype(np.float64)
        b = other._coords.astype(np.float64)
        return bool(np.allclose(a, b, atol=tol, rtol=0.0) or np.allclose(a, -b, atol=tol, rtol=0.0))

    def to_json(self):
        return {"w": self.w, "x": self.x, "y": self.y, "z": self.z}

    @staticmethod
    def from_json(json_data, dtype=None) -> "UnitQuaternion":
        return UnitQuaternion(
            json_data["w"], json_data["x"], json_data["y"], json_data["z"], dtype=dtype
        )

    def __repr__(self):
        return f"UnitQuaternion(w={self.w}, x={self.x}, y={self.y}, z={self.z}, dtype={self.dtype})"
