"""Initial coarse sampling of grid lines."""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

import numpy as np

from gridlines.samples import GridLine, Sample, SampleState
from shared.constants import (
    HORIZONTAL_MIN_HALF_EXTENT,
    SEED_POINT_COUNT,
    STRIP_IM_MAX,
    STRIP_IM_MIN,
    LineOrientation,
)

if TYPE_CHECKING:
    from gridlines.polygon import StripPolygon


def seed_vertical_line(x: float, count: int = SEED_POINT_COUNT) -> GridLine:
    """Вертикальная линия Re z = x: count точек x + i*t, t равномерно на [0, 1]."""
    ts = np.linspace(STRIP_IM_MIN, STRIP_IM_MAX, count)
    samples = [Sample(t=float(t), z=complex(x, float(t))) for t in ts]
    return GridLine(LineOrientation.VERTICAL, float(x), samples)


def horizontal_extent(polygon: StripPolygon) -> tuple[float, float]:
    """Отрезок [x1, x2] затравки горизонтальных линий: охватывает [-5, 5]."""
    minre, maxre = polygon.finite_real_extent()
    return (
        min(-HORIZONTAL_MIN_HALF_EXTENT, minre),
        max(HORIZONTAL_MIN_HALF_EXTENT, maxre),
    )


def seed_horizontal_line(
    y: float,
    x1: float,
    x2: float,
    w_left: complex,
    w_right: complex,
    count: int = SEED_POINT_COUNT,
) -> GridLine:
    """
    Горизонтальная линия Im z = y.

    Первая и последняя точки являются несобственными концами (-inf + iy, +inf + iy)
    с заранее известными образами w_left и w_right; между ними count
    равномерно расположенных точек на [x1, x2], ожидающих вычисления.
    """
    y = float(y)
    left = Sample(
        t=-math.inf,
        z=complex(-math.inf, y),
        w=complex(w_left),
        state=SampleState.IMPROPER,
    )
    right = Sample(
        t=math.inf,
        z=complex(math.inf, y),
        w=complex(w_right),
        state=SampleState.IMPROPER,
    )
    interior = [
        Sample(t=float(x), z=complex(float(x), y))
        for x in np.linspace(x1, x2, count)
    ]
    return GridLine(LineOrientation.HORIZONTAL, y, [left, *interior, right])
