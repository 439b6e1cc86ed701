"""
Unit tests for the OCP-backed Edge and Wire wrappers.
"""

import math

import numpy.testing as npt
import pytest

from occsketch.exceptions import EdgeError, WireError
from occsketch.primitives import Edge, Wire


class TestEdges:
    def test_segment_end_points(self):
        edge = Edge.segment((0.0, 0.0, 0.0), (3.0, 4.0, 0.0))
        assert edge.curve_type() == "line"
        npt.assert_allclose(edge.start_point(), [0.0, 0.0, 0.0], atol=1e-9)
        npt.assert_allclose(edge.end_point(), [3.0, 4.0, 0.0], atol=1e-9)

    def test_segment_between_identical_points_fails(self):
        with pytest.raises(EdgeError, match="identical points"):
            Edge.segment((1.0, 1.0, 1.0), (1.0, 1.0, 1.0))

    def test_arc_through_three_points(self):
        edge = Edge.arc((1.0, 0.0, 0.0), (0.0, 1.0, 0.0), (-1.0, 0.0, 0.0))
        assert edge.curve_type() == "circle"
        npt.assert_allclose(edge.start_point(), [1.0, 0.0, 0.0], atol=1e-9)
        npt.assert_allclose(edge.end_point(), [-1.0, 0.0, 0.0], atol=1e-9)
        npt.assert_allclose(edge.center(), [0.0, 0.0, 0.0], atol=1e-9)
        assert math.isclose(edge.radius(), 1.0, abs_tol=1e-9)

    def test_collinear_arc_fails(self):
        with pytest.raises(EdgeError, match="collinear"):
            Edge.arc((0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (2.0, 0.0, 0.0))

    def test_circle(self):
        edge = Edge.circle((1.0, 2.0, 3.0), (0.0, 0.0, 1.0), 0.5)
        assert edge.curve_type() == "circle"
        assert edge.is_closed()
        npt.assert_allclose(edge.center(), [1.0, 2.0, 3.0], atol=1e-9)
        npt.assert_allclose(edge.normal(), [0.0, 0.0, 1.0], atol=1e-9)
        assert math.isclose(edge.radius(), 0.5)

    @pytest.mark.parametrize("radius", [0.0, -1.0])
    def test_circle_needs_positive_radius(self, radius):
        with pytest.raises(EdgeError, match="radius"):
            Edge.circle((0.0, 0.0, 0.0), (0.0, 0.0, 1.0), radius)

    def test_circle_needs_normal(self):
        with pytest.raises(EdgeError, match="normal"):
            Edge.circle((0.0, 0.0, 0.0), (0.0, 0.0, 0.0), 1.0)

    def test_line_has_no_center(self):
        edge = Edge.segment((0.0, 0.0, 0.0), (1.0, 0.0, 0.0))
        with pytest.raises(ValueError, match="not a circle"):
            edge.center()


class TestWires:
    def test_open_wire(self):
        edges = [
            Edge.segment((0.0, 0.0, 0.0), (1.0, 0.0, 0.0)),
            Edge.segment((1.0, 0.0, 0.0), (1.0, 1.0, 0.0)),
        ]
        wire = Wire.from_edges(edges)
        assert len(wire) == 2
        assert not wire.is_closed()
        assert wire.edges() == edges

    def test_closed_wire(self):
        edges = [
            Edge.segment((0.0, 0.0, 0.0), (1.0, 0.0, 0.0)),
            Edge.segment((1.0, 0.0, 0.0), (1.0, 1.0, 0.0)),
            Edge.segment((1.0, 1.0, 0.0), (0.0, 0.0, 0.0)),
        ]
        assert Wire.from_edges(edges).is_closed()

    def test_empty_wire_fails(self):
        with pytest.raises(WireError, match="no edges"):
            Wire.from_edges([])

    def test_disconnected_wire_fails(self):
        edges = [
            Edge.segment((0.0, 0.0, 0.0), (1.0, 0.0, 0.0)),
            Edge.segment((5.0, 5.0, 0.0), (6.0, 5.0, 0.0)),
        ]
        with pytest.raises(WireError):
            Wire.from_edges(edges)

    def test_errors_are_value_errors(self):
        with pytest.raises(ValueError):
            Wire.from_edges([])
