"""Pytest configuration and fixtures for grid plot tests."""

import sys
from pathlib import Path

import numpy as np
import pytest

# Add src directory to path for imports
src_path = Path(__file__).parent.parent / 'src'
sys.path.insert(0, str(src_path))

from gridlines.polygon import StripPolygon  # noqa: E402
from gridlines.samples import ViewBounds  # noqa: E402


@pytest.fixture
def identity_map():
    """Evaluator that returns its input unchanged."""
    return lambda zp: np.asarray(zp, dtype=complex)


@pytest.fixture
def reciprocal_map():
    """Evaluator z -> 1/z, singular at the origin."""

    def evaluate(zp):
        with np.errstate(divide='ignore', invalid='ignore'):
            return 1.0 / np.asarray(zp, dtype=complex)

    return evaluate


@pytest.fixture
def wide_view():
    return ViewBounds(-10.0, 10.0, -10.0, 10.0)


@pytest.fixture
def channel_polygon():
    """Unbounded channel: both strip ends map to infinite vertices."""
    return StripPolygon(
        vertices=[np.inf, 0.0, np.inf, 2.0 + 1.0j],
        angles=[-1.0, 0.0, -1.0, 0.0],
        prevertices=[-np.inf, 0.0, np.inf, 2.0 + 1.0j],
    )
