"""
Package-wide numeric settings.

The default float dtype can be overridden with the ``OCCSKETCH_DTYPE``
environment variable (``float32`` or ``float64``) before the package is
imported. Any other value makes the import fail with ``ValueError``.
"""

import os

import numpy as np

SUPPORTED_DTYPES = {
    "float32": np.float32,
    "float64": np.float64,
}

DTYPE_ENV_VAR = "OCCSKETCH_DTYPE"

# |a x b| at or below this (for unit a, b) means a and b are parallel
PARALLEL_TOLERANCE = 1e-12

# Below this |a x b|, an obtuse pair is rotated in two steps through -a
NEAR_ANTIPARALLEL_TOLERANCE = 1e-6

# Drift from unit length, after a precision cast, that is worth logging
NORM_TOLERANCE = 1e-6

ROUND_TRIP_TOLERANCE = 1e-9


def resolve_dtype(dtype=None):
    """Return a numpy float dtype, falling back to ``DEFAULT_DTYPE``."""
    if dtype is None:
        return np.dtype(DEFAULT_DTYPE)
    if isinstance(dtype, str):
        if dtype not in SUPPORTED_DTYPES:
            raise ValueError(
                f"Unsupported dtype '{dtype}', expected one of {sorted(SUPPORTED_DTYPES)}"
            )
        return np.dtype(SUPPORTED_DTYPES[dtype])
    resolved = np.dtype(dtype)
    if resolved not in (np.dtype(np.float32), np.dtype(np.float64)):
        raise ValueError(f"Unsupported dtype '{resolved}', expected float32 or float64")
    return resolved


def dtype_from_env(environ=None):
    """Read the default dtype from ``OCCSKETCH_DTYPE``, float64 when unset."""
    if environ is None:
        environ = os.environ
    return resolve_dtype(environ.get(DTYPE_ENV_VAR, "float64").strip().lower())


DEFAULT_DTYPE = dtype_from_env()
