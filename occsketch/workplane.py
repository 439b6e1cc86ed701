"""
Workplane module - a placed 2D drawing frame in world space.

A workplane is a single rigid transform. Local coordinates ``(x, y, 0)``
lie in the plane, local ``z`` points along the plane normal, and
``to_world_pos`` / ``to_local_pos`` convert between the two spaces.
"""

import copy
from typing import TYPE_CHECKING, Any, Dict, Optional

from occsketch.cad_types import (
    X_NORMAL,
    Y_NORMAL,
    Z_NORMAL,
    Vector,
    VectorLike,
    as_vector,
)
from occsketch.plane import CustomPlane, Plane, PlaneLike, resolve_plane
from occsketch.primitives import Edge, Wire
from occsketch.quaternion import UnitQuaternion
from occsketch.transform import TandR

if TYPE_CHECKING:
    from occsketch.sketch import Sketch


class Workplane:
    """
    A coordinate frame for 2D sketching, stored as one ``TandR``.

    Frame queries (``origin``, ``normal``, ``x_dir``, ``y_dir``) are derived
    from the transform every time they are asked for.
    """

    def __init__(self, x_dir: VectorLike, normal_dir: VectorLike):
        """
        Create a workplane through the world origin from two directions.

        Args:
            x_dir: Local x axis direction
            normal_dir: Plane normal (local z axis)
        """
        self.transform = CustomPlane(x_dir=x_dir, normal_dir=normal_dir).transform()

    # ========== Factory methods for standard planes ==========

    @classmethod
    def from_transform(cls, transform: TandR) -> "Workplane":
        workplane = cls.__new__(cls)
        workplane.transform = transform
        return workplane

    @classmethod
    def from_plane(cls, plane: PlaneLike) -> "Workplane":
        """Create a workplane from a ``Plane``, ``CustomPlane`` or plane name ("XY", ...)."""
        return cls.from_transform(resolve_plane(plane).transform())

    @classmethod
    def xy(cls) -> "Workplane":
        return cls.from_plane(Plane.XY)

    @classmethod
    def yz(cls) -> "Workplane":
        return cls.from_plane(Plane.YZ)

    @classmethod
    def zx(cls) -> "Workplane":
        return cls.from_plane(Plane.ZX)

    @classmethod
    def xz(cls) -> "Workplane":
        return cls.from_plane(Plane.XZ)

    @classmethod
    def zy(cls) -> "Workplane":
        return cls.from_plane(Plane.ZY)

    @classmethod
    def yx(cls) -> "Workplane":
        return cls.from_plane(Plane.YX)

    # ========== Frame queries ==========

    def origin(self) -> Vector:
        return self.transform.translation.copy()

    def normal(self) -> Vector:
        return self.transform.rotate_normal(Z_NORMAL)

    def x_dir(self) -> Vector:
        return self.transform.rotate_normal(X_NORMAL)

    def y_dir(self) -> Vector:
        return self.transform.rotate_normal(Y_NORMAL)

    # ========== In-place frame changes ==========

    def set_rotation(self, rotation: UnitQuaternion) -> None:
        self.transform = TandR(
            translation=self.transform.translation,
            rotation=rotation.cast(self.transform.dtype),
            inverse_order=self.transform.inverse_order,
        )

    def rotate_by(self, rotation: UnitQuaternion) -> None:
        """Pre-compose ``rotation``, so it acts about world axes. The origin stays put."""
        self.set_rotation(rotation.cast(self.transform.dtype) * self.transform.rotation)

    def set_translation(self, position: VectorLike) -> None:
        self.transform = self.transform.with_translation(position)

    def translate_by(self, offset: VectorLike) -> None:
        """Move the origin by a world-space offset."""
        offset = as_vector(offset, dtype=self.transform.dtype)
        self.transform = self.transform.with_translation(self.transform.translation + offset)

    # ========== Derived workplanes ==========

    def copy(self) -> "Workplane":
        return copy.copy(self)

    def transformed(self, transform: TandR) -> "Workplane":
        """New workplane moved by ``transform.translation`` then rotated by ``transform.rotation``."""
        new = self.copy()
        new.translate_by(transform.translation)
        new.rotate_by(transform.rotation)
        return new

    def translated(self, offset: VectorLike) -> "Workplane":
        """
        New workplane whose origin sits at ``offset`` given in this
        workplane's local coordinates.

        Unlike ``translate_by`` the offset follows the plane's own axes.
        """
        new = self.copy()
        new.set_translation(self.to_world_pos(offset))
        return new

    def rotated(self, rotation: UnitQuaternion) -> "Workplane":
        new = self.copy()
        new.rotate_by(rotation)
        return new

    # ========== Coordinate conversion ==========

    def to_world_pos(self, position: VectorLike) -> Vector:
        return self.transform.transform_point(position)

    def to_local_pos(self, position: VectorLike) -> Vector:
        return self.transform.inverse().transform_point(position)

    # ========== Profiles ==========

    def rect(self, width: float, height: float) -> Wire:
        """
        Rectangle centred on the origin, as a closed wire.

        Edges run top, right, bottom, left, starting at the top-left corner.
        """
        half_width = width / 2.0
        half_height = height / 2.0

        p1 = self.to_world_pos((-half_width, half_height, 0.0))
        p2 = self.to_world_pos((half_width, half_height, 0.0))
        p3 = self.to_world_pos((half_width, -half_height, 0.0))
        p4 = self.to_world_pos((-half_width, -half_height, 0.0))

        top = Edge.segment(p1, p2)
        right = Edge.segment(p2, p3)
        bottom = Edge.segment(p3, p4)
        left = Edge.segment(p4, p1)

        return Wire.from_edges([top, right, bottom, left])

    def circle(self, x: float, y: float, radius: float) -> Wire:
        """Circle of ``radius`` centred on local ``(x, y)``, as a closed wire."""
        center = self.to_world_pos((x, y, 0.0))
        circle = Edge.circle(center, self.normal(), radius)
        return Wire.from_edges([circle])

    def sketch(self) -> "Sketch":
        """Start a sketch with its cursor on this workplane's origin."""
        from occsketch.sketch import Sketch

        cursor = self.to_world_pos((0.0, 0.0, 0.0))
        return Sketch(cursor, self.copy())

    # ========== Serialization ==========

    def to_json(self) -> Dict[str, Any]:
        """Convert coordinate system to JSON representation."""
        return {
            "origin": self.origin().to_json(),
            "x_dir": self.x_dir().to_json(),
            "y_dir": self.y_dir().to_json(),
            "normal": self.normal().to_json(),
            "transform": self.transform.to_json(),
        }

    @classmethod
    def from_json(cls, json_data: Dict[str, Any]) -> "Workplane":
        """Create a workplane from JSON representation.

        The stored transform wins when present; otherwise the frame is rebuilt
        from ``origin``, ``x_dir`` and ``normal``.
        """
        if "transform" in json_data:
            return cls.from_transform(TandR.from_json(json_data["transform"]))
        workplane = cls(
            Vector.from_json(json_data["x_dir"]), Vector.from_json(json_data["normal"])
        )
        workplane.set_translation(Vector.from_json(json_data["origin"]))
        return workplane

    def is_close(self, other: "Workplane", tol: Optional[float] = None) -> bool:
        if tol is None:
            return self.transform.is_close(other.transform)
        return self.transform.is_close(other.transform, tol=tol)

    def __repr__(self):
        return (
            f"Workplane(origin={self.origin().to_tuple()}, x_dir={self.x_dir().to_tuple()}, "
            f"normal={self.normal().to_tuple()})"
        )
