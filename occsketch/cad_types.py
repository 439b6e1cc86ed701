import math
from typing import Sequence, Tuple, Union

import numpy as np

from occsketch.config import resolve_dtype


class Vector(np.ndarray):
    """A 3D vector or point backed by a numpy array."""

    def __new__(cls, x: float, y: float, z: float = 0, dtype=None) -> "Vector":
        return np.asarray([x, y, z], dtype=resolve_dtype(dtype)).view(cls)

    def normalize(self) -> "Vector":
        norm = float(np.linalg.norm(np.asarray(self)))
        if norm == 0.0 or not math.isfinite(norm):
            raise ValueError(f"Cannot normalize vector {self.to_tuple()}")
        return self / norm

    def length(self) -> float:
        return float(np.linalg.norm(np.asarray(self)))

    def dot(self, other: "VectorLike") -> float:
        return float(np.dot(np.asarray(self), np.asarray(other)))

    @property
    def x(self):
        return float(self[0])

    @property
    def y(self):
        return float(self[1])

    @property
    def z(self):
        return float(self[2])

    def to_tuple(self) -> Tuple[float, float, float]:
        return (self.x, self.y, self.z)

    def to_json(self):
        return {
            "x": float(self.x),
            "y": float(self.y),
            "z": float(self.z),
        }

    @staticmethod
    def from_json(json_data, dtype=None):
        return Vector(json_data["x"], json_data["y"], json_data["z"], dtype=dtype)

    def __repr__(self):
        if self.shape != (3,):
            return repr(np.asarray(self))
        return f"Vector({self.x}, {self.y}, {self.z})"

    __str__ = __repr__


VectorLike = Union[Tuple[float, float], Tuple[float, float, float], Sequence[float], Vector]


def as_vector(value: VectorLike, dtype=None) -> Vector:
    """Coerce a 2- or 3-component sequence into a finite ``Vector``.

    Two-component input is treated as a point on the local plane (z = 0).
    """
    arr = np.asarray(value, dtype=resolve_dtype(dtype)).reshape(-1)
    if arr.shape == (2,):
        arr = np.append(arr, arr.dtype.type(0))
    if arr.shape != (3,):
        raise ValueError(
            f"Expected a 2D or 3D vector, got {arr.shape[0]} components"
        )
    if not np.all(np.isfinite(arr)):
        raise ValueError(f"Vector components must be finite, got {arr.tolist()}")
    return arr.copy().view(Vector)


def as_unit_vector(value: VectorLike, dtype=None) -> Vector:
    """Coerce a direction into a unit ``Vector``; zero-length input is rejected."""
    vec = as_vector(value, dtype=dtype)
    if vec.length() == 0.0:
        raise ValueError("Direction vector must be non-zero")
    return vec.normalize()


def frozen(vec: Vector) -> Vector:
    """Return a read-only copy of ``vec``."""
    out = np.array(vec, copy=True).view(Vector)
    out.flags.writeable = False
    return out


X_NORMAL = frozen(Vector(1.0, 0.0, 0.0))
Y_NORMAL = frozen(Vector(0.0, 1.0, 0.0))
Z_NORMAL = frozen(Vector(0.0, 0.0, 1.0))
BASE_NORMAL = Z_NORMAL
