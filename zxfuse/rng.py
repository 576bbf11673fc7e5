"""
Default random number generator.

Functions that draw random numbers take an optional
:class:`numpy.random.Generator`; when none is given they share a
thread-local default created on first use.
"""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from numpy.random import Generator

_rng_local = threading.local()


def ensure_rng(rng: Generator | None = None) -> Generator:
    """
    Return ``rng``, or the thread-local default generator if it is None.

    Parameters
    ----------
    rng : Generator | None, optional
        A random number generator.

    Returns
    -------
    Generator
        A random number generator instance.
    """
    if rng is not None:
        return rng
    stored: Generator | None = getattr(_rng_local, "rng", None)
    if stored is None:
        stored = np.random.default_rng()
        _rng_local.rng = stored
    return stored
