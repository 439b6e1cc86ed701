"""
occsketch - workplanes and 2D sketches over OpenCASCADE.

This package provides rigid transforms, named drawing planes and a fluent
sketch builder that turns local 2D drawing commands into world-space wires.
"""

import logging

__version__ = "0.1.0"

from .cad_types import Vector
from .exceptions import EdgeError, OccSketchError, SketchError, WireError
from .plane import CustomPlane, Plane
from .primitives import Edge, Wire
from .quaternion import UnitQuaternion
from .sketch import Sketch
from .transform import TandR
from .workplane import Workplane

logging.getLogger(__name__).addHandler(logging.NullHandler())

# Define what gets imported with "from occsketch import *"
__all__ = [
    # Transforms
    "TandR",
    "UnitQuaternion",
    "Vector",
    # Planes and sketching
    "Plane",
    "CustomPlane",
    "Workplane",
    "Sketch",
    # Kernel wrappers
    "Edge",
    "Wire",
    # Errors
    "OccSketchError",
    "SketchError",
    "EdgeError",
    "WireError",
]
