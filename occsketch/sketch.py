"""
Sketch module - a cursor-driven profile builder bound to one workplane.

Drawing commands take local 2D coordinates; the cursor and every edge are
kept in world space. Each command starts its edge at the current cursor,
so consecutive edges always share an end point.
"""

import logging
from typing import TYPE_CHECKING, List, Optional, Tuple

from occsketch.cad_types import Vector, VectorLike, as_vector
from occsketch.exceptions import SketchError
from occsketch.primitives import Edge, Wire

if TYPE_CHECKING:
    from occsketch.workplane import Workplane

logger = logging.getLogger(__name__)

Point2D = Tuple[float, float]


class Sketch:
    """
    Builds a wire edge by edge.

    Create one with ``Workplane.sketch()``. Every method except ``wire`` and
    ``close`` returns the sketch itself so calls can be chained::

        wire = Workplane.xy().sketch().move_to(0, 0).line_to(5, 0).line_to(5, 5).close()

    Once ``wire`` or ``close`` has returned, the sketch is spent and any
    further call raises ``SketchError``.
    """

    def __init__(self, cursor: VectorLike, workplane: "Workplane"):
        self._cursor = as_vector(cursor)
        self._workplane = workplane
        self._first_point: Optional[Vector] = None
        self._edges: List[Edge] = []
        self._finished = False

    # ========== State ==========

    @property
    def workplane(self) -> "Workplane":
        return self._workplane

    @property
    def cursor(self) -> Vector:
        """Current pen position in world coordinates."""
        return self._cursor.copy()

    @property
    def first_point(self) -> Optional[Vector]:
        return None if self._first_point is None else self._first_point.copy()

    @property
    def edges(self) -> List[Edge]:
        return list(self._edges)

    def local_cursor(self) -> Vector:
        """Current pen position in the workplane's local coordinates."""
        return self._workplane.to_local_pos(self._cursor)

    def _check_open(self) -> None:
        if self._finished:
            raise SketchError(
                "Sketch has already been turned into a wire; start a new one with Workplane.sketch()"
            )

    def _add_edge(self, edge: Edge) -> None:
        if self._first_point is None:
            self._first_point = edge.start_point()
        self._edges.append(edge)

    def _world(self, x: float, y: float) -> Vector:
        return self._workplane.to_world_pos((x, y, 0.0))

    def _segment_to(self, new_point: Vector) -> "Sketch":
        new_edge = Edge.segment(self._cursor, new_point)
        self._cursor = new_point
        self._add_edge(new_edge)
        return self

    # ========== Drawing commands ==========

    def move_to(self, x: float, y: float) -> "Sketch":
        """Move the cursor to local ``(x, y)`` without drawing."""
        self._check_open()
        self._cursor = self._world(x, y)
        return self

    def line_to(self, x: float, y: float) -> "Sketch":
        """Draw a segment from the cursor to local ``(x, y)``."""
        self._check_open()
        return self._segment_to(self._world(x, y))

    def line_dx(self, dx: float) -> "Sketch":
        """Draw a segment ``dx`` along the workplane's x axis."""
        return self.line_dx_dy(dx, 0.0)

    def line_dy(self, dy: float) -> "Sketch":
        """Draw a segment ``dy`` along the workplane's y axis."""
        return self.line_dx_dy(0.0, dy)

    def line_dx_dy(self, dx: float, dy: float) -> "Sketch":
        """Draw a segment offset by ``(dx, dy)`` in local coordinates from the cursor."""
        self._check_open()
        cursor = self.local_cursor()
        return self._segment_to(self._world(cursor.x + dx, cursor.y + dy))

    def arc(self, p1: Point2D, p2: Point2D, p3: Point2D) -> "Sketch":
        """
        Draw a circular arc from local ``p1`` through ``p2`` to ``p3``.

        The cursor ends on ``p3``. ``p1`` is taken as given, so for a
        connected profile it should equal the current cursor; see
        ``three_point_arc``.

        Raises:
            EdgeError: if the three points are collinear or coincident
        """
        self._check_open()
        (x1, y1), (x2, y2), (x3, y3) = p1, p2, p3
        world_1 = self._world(x1, y1)
        world_2 = self._world(x2, y2)
        world_3 = self._world(x3, y3)

        new_arc = Edge.arc(world_1, world_2, world_3)
        self._cursor = world_3
        self._add_edge(new_arc)
        return self

    def three_point_arc(self, p2: Point2D, p3: Point2D) -> "Sketch":
        """Draw an arc from the cursor through local ``p2`` to local ``p3``."""
        self._check_open()
        cursor = self.local_cursor()
        return self.arc((cursor.x, cursor.y), p2, p3)

    # ========== Finishing ==========

    def wire(self) -> Wire:
        """Assemble the edges drawn so far into an open wire."""
        self._check_open()
        wire = Wire.from_edges(self._edges)
        self._finished = True
        logger.debug(f"Sketch finished as open wire with {len(self._edges)} edge(s)")
        return wire

    def close(self) -> Wire:
        """
        Draw a segment from the cursor back to the first point and return the
        closed wire.

        Raises:
            SketchError: if nothing has been drawn yet
            EdgeError, WireError: if the kernel rejects the closing segment or
                the wire; the sketch is left unchanged
        """
        self._check_open()
        if self._first_point is None:
            raise SketchError(
                "Cannot close sketch: no edges have been drawn, so there is no first point to close to"
            )
        closing = Edge.segment(self._cursor, self._first_point)
        # Nothing is committed unless the closed wire assembles
        wire = Wire.from_edges(self._edges + [closing])
        self._edges.append(closing)
        self._cursor = self._first_point.copy()
        self._finished = True
        logger.debug(f"Sketch closed with {len(self._edges)} edge(s)")
        return wire

    def __len__(self) -> int:
        return len(self._edges)

    def __repr__(self):
        return f"Sketch(cursor={self._cursor.to_tuple()}, edges={len(self._edges)})"
