"""Errors raised by occsketch."""


class OccSketchError(Exception):
    """Base class for all occsketch errors."""


class SketchError(OccSketchError, ValueError):
    """A sketch was asked to do something its state does not allow."""


class EdgeError(OccSketchError, ValueError):
    """The geometry kernel could not build an edge."""


class WireError(OccSketchError, ValueError):
    """The geometry kernel could not assemble a wire."""
