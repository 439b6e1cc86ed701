"""
Rigid transforms (translation + rotation) with constant-time inversion.

A ``TandR`` applies its rotation first and its translation second. Its
inverse flips that order instead of folding both parts into one canonical
form, so ``t.inverse().transform_point(t.transform_point(p)) == p``.
"""

import logging
from dataclasses import dataclass, field, replace
from functools import lru_cache
from typing import Any, Dict

import numpy as np

from occsketch.cad_types import (
    X_NORMAL,
    Z_NORMAL,
    Vector,
    VectorLike,
    as_unit_vector,
    as_vector,
    frozen,
)
from occsketch.config import DEFAULT_DTYPE, ROUND_TRIP_TOLERANCE, resolve_dtype
from occsketch.quaternion import UnitQuaternion

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def inter_quat() -> UnitQuaternion:
    """Rotation taking the Z axis onto the X axis.

    Used as a fixed intermediate step when a rotation between two
    antiparallel directions is requested. Computed once per process.
    """
    return UnitQuaternion.rotation_between(Z_NORMAL, X_NORMAL, dtype=np.float64)


def _half_turn_perpendicular_to(direction: np.ndarray, dtype) -> UnitQuaternion:
    # 180 degrees about the first canonical axis not parallel to ``direction``
    for axis in (X_NORMAL, Z_NORMAL):
        perpendicular = np.cross(direction, np.asarray(axis))
        if np.linalg.norm(perpendicular) > 1e-6:
            return UnitQuaternion.from_axis_angle(perpendicular, np.pi, dtype=dtype)
    raise AssertionError("unreachable: no axis perpendicular to a unit vector")


@dataclass(frozen=True, eq=False)
class TandR:
    """
    Translation and rotation.

    Attributes:
        translation: Offset applied after (or, when ``inverse_order`` is set,
            before) the rotation
        rotation: Unit quaternion
        inverse_order: If False, points are rotated then translated; if True,
            translated then rotated
    """

    translation: Vector = field(
        default_factory=lambda: frozen(Vector(0.0, 0.0, 0.0, dtype=DEFAULT_DTYPE))
    )
    rotation: UnitQuaternion = field(
        default_factory=lambda: UnitQuaternion.identity(dtype=DEFAULT_DTYPE)
    )
    inverse_order: bool = False

    def __post_init__(self):
        if not isinstance(self.rotation, UnitQuaternion):
            raise TypeError(
                f"rotation must be a UnitQuaternion, got {type(self.rotation).__name__}"
            )
        translation = frozen(as_vector(self.translation, dtype=self.rotation.dtype))
        object.__setattr__(self, "translation", translation)

    @classmethod
    def new(cls, translation: VectorLike, rotation: UnitQuaternion) -> "TandR":
        return cls(translation=translation, rotation=rotation)

    @classmethod
    def identity(cls, dtype=None) -> "TandR":
        dtype = resolve_dtype(dtype)
        return cls(
            translation=Vector(0.0, 0.0, 0.0, dtype=dtype),
            rotation=UnitQuaternion.identity(dtype=dtype),
        )

    # "do nothing" transform
    noop = identity

    @classmethod
    def from_rotation_between(cls, a: VectorLike, b: VectorLike, dtype=None) -> "TandR":
        """
        Transform whose rotation takes unit vector ``a`` onto ``b``.

        Never fails: when ``a`` and ``b`` are antiparallel the rotation is
        built in two steps through the cached Z-to-X rotation, giving the
        same answer every time for the same input.
        """
        dtype = resolve_dtype(dtype)
        rotation = UnitQuaternion.rotation_between(a, b, dtype=dtype)
        if rotation is None:
            quat_1 = inter_quat().cast(dtype)
            inter_norm = quat_1.rotate(as_unit_vector(a, dtype=np.float64))
            quat_2 = UnitQuaternion.rotation_between(inter_norm, b, dtype=dtype)
            if quat_2 is None:
                # ``a`` lies on the intermediate rotation axis, which leaves it in place
                quat_2 = _half_turn_perpendicular_to(np.asarray(inter_norm, dtype=np.float64), dtype)
            rotation = quat_2 * quat_1
            logger.debug(
                f"Antiparallel rotation requested from {np.asarray(a).tolist()} "
                f"to {np.asarray(b).tolist()}, used intermediate axis"
            )
        return cls(translation=Vector(0.0, 0.0, 0.0, dtype=dtype), rotation=rotation)

    @property
    def dtype(self) -> np.dtype:
        return self.rotation.dtype

    def with_translation(self, translation: VectorLike) -> "TandR":
        """Copy of this transform with the translation replaced."""
        return replace(self, translation=translation)

    def transform_point(self, point: VectorLike) -> Vector:
        p = as_vector(point, dtype=self.dtype)
        if self.inverse_order:
            return self.rotation.rotate(p + self.translation)
        return (self.rotation.rotate(p) + self.translation).view(Vector)

    def transform_tandr(self, other: "TandR") -> "TandR":
        """Express ``other`` (given in this transform's frame) in the parent frame."""
        other = other.cast(self.dtype)
        return replace(
            other,
            rotation=self.rotation * other.rotation,
            translation=self.translation + self.rotation.rotate(other.translation),
        )

    compose = transform_tandr

    def rotate_normal(self, normal: VectorLike) -> Vector:
        """Rotate a direction; translation does not apply to normals."""
        return self.rotation.rotate(normal)

    def inverse(self) -> "TandR":
        return TandR(
            translation=-np.asarray(self.translation),
            rotation=self.rotation.inverse(),
            inverse_order=not self.inverse_order,
        )

    def cast(self, dtype) -> "TandR":
        """Same transform at a different float precision."""
        dtype = resolve_dtype(dtype)
        if dtype == self.dtype:
            return self
        return TandR(
            translation=np.asarray(self.translation).astype(dtype),
            rotation=self.rotation.cast(dtype),
            inverse_order=self.inverse_order,
        )

    def is_close(self, other: "TandR", tol: float = ROUND_TRIP_TOLERANCE) -> bool:
        return (
            self.inverse_order == other.inverse_order
            and bool(
                np.allclose(
                    np.asarray(self.translation, dtype=np.float64),
                    np.asarray(other.translation, dtype=np.float64),
                    atol=tol,
                    rtol=0.0,
                )
            )
            and self.rotation.is_close(other.rotation, tol=tol)
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TandR):
            return NotImplemented
        return self.is_close(other)

    __hash__ = None

    def to_json(self) -> Dict[str, Any]:
        return {
            "translation": self.translation.to_json(),
            "rotation": self.rotation.to_json(),
            "inverse": bool(self.inverse_order),
            "dtype": self.dtype.name,
        }

    @staticmethod
    def from_json(json_data: Dict[str, Any]) -> "TandR":
        dtype = json_data.get("dtype")
        return TandR(
            translation=Vector.from_json(json_data["translation"], dtype=dtype),
            rotation=UnitQuaternion.from_json(json_data["rotation"], dtype=dtype),
            inverse_order=bool(json_data.get("inverse", False)),
        )
