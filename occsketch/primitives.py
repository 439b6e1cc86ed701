"""
Edges and wires backed by OpenCASCADE (OCP).

This is the only module that talks to the kernel. Everything it builds is
already in world coordinates; workplanes and sketches do the local-to-world
conversion before calling in here.
"""

import logging
from typing import Iterable, List, Sequence

from OCP.BRep import BRep_Tool
from OCP.BRepAdaptor import BRepAdaptor_Curve
from OCP.BRepBuilderAPI import (
    BRepBuilderAPI_EdgeError,
    BRepBuilderAPI_MakeEdge,
    BRepBuilderAPI_MakeWire,
    BRepBuilderAPI_WireError,
)
from OCP.GC import GC_MakeArcOfCircle
from OCP.GeomAbs import GeomAbs_Circle, GeomAbs_Line
from OCP.gp import gp_Ax2, gp_Circ, gp_Dir, gp_Pnt
from OCP.TopoDS import TopoDS_Edge, TopoDS_Wire
from OCP.TopTools import TopTools_ListOfShape

from occsketch.cad_types import Vector, VectorLike, as_vector
from occsketch.exceptions import EdgeError, WireError

logger = logging.getLogger(__name__)


def _to_pnt(point: VectorLike) -> gp_Pnt:
    p = as_vector(point)
    return gp_Pnt(p.x, p.y, p.z)


def _from_pnt(pnt: gp_Pnt) -> Vector:
    return Vector(pnt.X(), pnt.Y(), pnt.Z())


_EDGE_ERRORS = {
    BRepBuilderAPI_EdgeError.BRepBuilderAPI_PointProjectionFailed: "Point projection failed",
    BRepBuilderAPI_EdgeError.BRepBuilderAPI_ParameterOutOfRange: "Parameter out of range",
    BRepBuilderAPI_EdgeError.BRepBuilderAPI_DifferentPointsOnClosedCurve: "Different points on a closed curve",
    BRepBuilderAPI_EdgeError.BRepBuilderAPI_PointWithInfiniteParameter: "Point with infinite parameter",
    BRepBuilderAPI_EdgeError.BRepBuilderAPI_DifferentsPointAndParameter: "Point and parameter disagree",
    BRepBuilderAPI_EdgeError.BRepBuilderAPI_LineThroughIdenticPoints: "Line through identical points",
}

_WIRE_ERRORS = {
    BRepBuilderAPI_WireError.BRepBuilderAPI_EmptyWire: "Empty wire - no edges provided",
    BRepBuilderAPI_WireError.BRepBuilderAPI_DisconnectedWire: "Disconnected wire - edges don't connect to form a continuous path",
    BRepBuilderAPI_WireError.BRepBuilderAPI_NonManifoldWire: "Non-manifold wire - more than two edges meet at a vertex",
}


def _finish_edge(builder: BRepBuilderAPI_MakeEdge, what: str) -> TopoDS_Edge:
    if not builder.IsDone():
        error_code = builder.Error()
        reason = _EDGE_ERRORS.get(error_code, f"Unknown error code: {error_code}")
        logger.warning(f"Edge construction failed for {what}: {reason}")
        raise EdgeError(f"Edge construction failed for {what}: {reason}")
    return builder.Edge()


class Edge:
    """A single world-space curve (line segment, circular arc or circle)."""

    def __init__(self, wrapped: TopoDS_Edge):
        self.wrapped = wrapped

    @classmethod
    def segment(cls, start: VectorLike, end: VectorLike) -> "Edge":
        """Straight segment from ``start`` to ``end``."""
        builder = BRepBuilderAPI_MakeEdge(_to_pnt(start), _to_pnt(end))
        return cls(_finish_edge(builder, f"segment {as_vector(start).to_tuple()} -> {as_vector(end).to_tuple()}"))

    @classmethod
    def arc(cls, p1: VectorLike, p2: VectorLike, p3: VectorLike) -> "Edge":
        """Circular arc starting at ``p1``, passing through ``p2`` and ending at ``p3``."""
        what = f"arc through {as_vector(p1).to_tuple()}, {as_vector(p2).to_tuple()}, {as_vector(p3).to_tuple()}"
        arc_maker = GC_MakeArcOfCircle(_to_pnt(p1), _to_pnt(p2), _to_pnt(p3))
        if not arc_maker.IsDone():
            logger.warning(f"Arc construction failed for {what}")
            raise EdgeError(
                f"Arc construction failed for {what}: "
                f"the points are collinear or coincident"
            )
        return cls(_finish_edge(BRepBuilderAPI_MakeEdge(arc_maker.Value()), what))

    @classmethod
    def circle(cls, center: VectorLike, normal: VectorLike, radius: float) -> "Edge":
        """Full circle of ``radius`` around ``center`` in the plane normal to ``normal``."""
        if not radius > 0:
            raise EdgeError(f"Circle radius must be positive, got {radius}")
        n = as_vector(normal)
        if n.length() == 0.0:
            raise EdgeError("Circle normal must be non-zero")
        axis = gp_Ax2(_to_pnt(center), gp_Dir(n.x, n.y, n.z))
        circle_gp = gp_Circ(axis, float(radius))
        return cls(_finish_edge(BRepBuilderAPI_MakeEdge(circle_gp), f"circle of radius {radius}"))

    def _adaptor(self) -> BRepAdaptor_Curve:
        return BRepAdaptor_Curve(self.wrapped)

    def start_point(self) -> Vector:
        adaptor = self._adaptor()
        return _from_pnt(adaptor.Value(adaptor.FirstParameter()))

    def end_point(self) -> Vector:
        adaptor = self._adaptor()
        return _from_pnt(adaptor.Value(adaptor.LastParameter()))

    def curve_type(self) -> str:
        curve_type = self._adaptor().GetType()
        if curve_type == GeomAbs_Line:
            return "line"
        if curve_type == GeomAbs_Circle:
            return "circle"
        return "other"

    def _circle(self):
        adaptor = self._adaptor()
        if adaptor.GetType() != GeomAbs_Circle:
            raise ValueError(f"Edge is a {self.curve_type()}, not a circle or arc")
        return adaptor.Circle()

    def center(self) -> Vector:
        return _from_pnt(self._circle().Location())

    def normal(self) -> Vector:
        direction = self._circle().Axis().Direction()
        return Vector(direction.X(), direction.Y(), direction.Z())

    def radius(self) -> float:
        return self._circle().Radius()

    def is_closed(self) -> bool:
        return BRep_Tool.IsClosed_s(self.wrapped)

    def __repr__(self):
        return (
            f"Edge({self.curve_type()}, start={self.start_point().to_tuple()}, "
            f"end={self.end_point().to_tuple()})"
        )


class Wire:
    """An ordered, connected sequence of edges."""

    def __init__(self, wrapped: TopoDS_Wire, edges: Sequence[Edge]):
        self.wrapped = wrapped
        self._edges = list(edges)

    @classmethod
    def from_edges(cls, edges: Iterable[Edge]) -> "Wire":
        """Assemble ``edges`` (in order) into a wire.

        Raises:
            WireError: if there are no edges or the kernel rejects them
        """
        edges = list(edges)
        num_edges = len(edges)

        if num_edges == 0:
            raise WireError("Cannot create wire: no edges in sketch")

        occ_edges_list = TopTools_ListOfShape()
        for edge in edges:
            occ_edges_list.Append(edge.wrapped)

        wire_builder = BRepBuilderAPI_MakeWire()
        wire_builder.Add(occ_edges_list)
        wire_builder.Build()

        if not wire_builder.IsDone():
            error_code = wire_builder.Error()
            error_msg = _WIRE_ERRORS.get(error_code, f"Unknown error code: {error_code}")
            logger.warning(f"Wire construction failed with {num_edges} edge(s): {error_msg}")
            raise WireError(
                f"Wire construction failed with {num_edges} edge(s): {error_msg}\n"
                f"This usually means:\n"
                f"  1. The edges are not properly connected (gaps between them)\n"
                f"  2. More than two edges share a vertex"
            )

        logger.debug(f"Assembled wire from {num_edges} edge(s)")
        return cls(wire_builder.Wire(), edges)

    def edges(self) -> List[Edge]:
        """Edges in drawing order."""
        return list(self._edges)

    def is_closed(self) -> bool:
        return BRep_Tool.IsClosed_s(self.wrapped)

    def __len__(self) -> int:
        return len(self._edges)

    def __iter__(self):
        return iter(self._edges)

    def __repr__(self):
        return f"Wire({len(self._edges)} edge(s), closed={self.is_closed()})"
