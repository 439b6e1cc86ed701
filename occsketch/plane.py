"""
Named and custom drawing-plane orientations.

A plane is an orientation only: every variant resolves to a ``TandR`` with
zero translation whose rotation takes the base normal (Z) onto the plane's
normal.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Union

import numpy as np

from occsketch.cad_types import (
    BASE_NORMAL,
    X_NORMAL,
    Y_NORMAL,
    Vector,
    VectorLike,
    as_unit_vector,
)
from occsketch.quaternion import UnitQuaternion
from occsketch.transform import TandR


class Plane(Enum):
    XY = "XY"
    YZ = "YZ"
    ZX = "ZX"
    XZ = "XZ"
    YX = "YX"
    ZY = "ZY"

    @classmethod
    def from_name(cls, name: str) -> "Plane":
        try:
            return cls[name.upper()]
        except KeyError:
            raise ValueError(
                f"Unknown plane: {name}, expected one of {[p.name for p in cls]}"
            ) from None

    def transform(self) -> TandR:
        if self is Plane.XY:
            return TandR.identity()
        target = _PLANE_NORMALS[self]
        return TandR.from_rotation_between(BASE_NORMAL, target)

    def transform_point(self, point: VectorLike) -> Vector:
        return self.transform().transform_point(point)


_PLANE_NORMALS = {
    Plane.YZ: X_NORMAL,
    Plane.ZX: Y_NORMAL,
    Plane.YX: -BASE_NORMAL,
    Plane.ZY: -X_NORMAL,
    Plane.XZ: -Y_NORMAL,
}


@dataclass(frozen=True, eq=False)
class CustomPlane:
    """
    Plane given by its local x direction and its normal.

    The two directions need not be unit length or exactly perpendicular;
    the y axis is ``normal x x_dir`` and the x axis is re-derived from it.
    """

    x_dir: VectorLike
    normal_dir: VectorLike

    def basis(self):
        """Return the orthonormal ``(x, y, z)`` axes of this plane."""
        x_axis = np.asarray(as_unit_vector(self.x_dir, dtype=np.float64))
        z_axis = np.asarray(as_unit_vector(self.normal_dir, dtype=np.float64))
        y_axis = np.cross(z_axis, x_axis)
        y_norm = np.linalg.norm(y_axis)
        if y_norm < 1e-9:
            raise ValueError(
                f"x_dir {x_axis.tolist()} is parallel to normal_dir {z_axis.tolist()}"
            )
        y_axis = y_axis / y_norm
        x_axis = np.cross(y_axis, z_axis)
        return (
            x_axis.view(Vector),
            y_axis.view(Vector),
            z_axis.view(Vector),
        )

    def transform(self) -> TandR:
        x_axis, y_axis, z_axis = self.basis()
        matrix = np.column_stack([x_axis, y_axis, z_axis])
        return TandR(rotation=UnitQuaternion.from_rotation_matrix(matrix))

    def transform_point(self, point: VectorLike) -> Vector:
        return self.transform().transform_point(point)


PlaneLike = Union[Plane, CustomPlane, str]


def resolve_plane(plane: PlaneLike) -> Union[Plane, CustomPlane]:
    if isinstance(plane, str):
        return Plane.from_name(plane)
    if isinstance(plane, (Plane, CustomPlane)):
        return plane
    raise TypeError(f"Expected a Plane, CustomPlane or plane name, got {type(plane).__name__}")
