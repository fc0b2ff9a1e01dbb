"""Placement of grid lines from counts or explicit coordinates."""

from __future__ import annotations

import logging
import math
import numbers
from collections.abc import Sequence
from dataclasses import dataclass, field

import numpy as np

from shared.constants import DEFAULT_LINE_COUNT, STRIP_IM_MAX, STRIP_IM_MIN

logger = logging.getLogger(__name__)

GridRequest = int | float | Sequence[float] | None


class InvalidGridSpecError(ValueError):
    """Grid request that cannot be turned into line positions."""


@dataclass
class GridPlan:
    re: list[float] = field(default_factory=list)
    im: list[float] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.re) + len(self.im)


def _is_count(value: object) -> bool:
    return isinstance(value, numbers.Integral) and not isinstance(value, bool)


def _is_empty(value: GridRequest) -> bool:
    if value is None:
        return True
    if isinstance(value, np.ndarray):
        return value.size == 0
    if isinstance(value, (str, bytes)):
        return False
    return isinstance(value, Sequence) and len(value) == 0


def _coordinates(value: GridRequest, name: str) -> list[float]:
    """Явный список координат (одно число даёт список из одного элемента)."""
    if isinstance(value, np.ndarray):
        items: object = value.ravel().tolist()
    elif isinstance(value, numbers.Real):
        items = [value]
    else:
        items = value
    if isinstance(items, (str, bytes)) or not isinstance(items, Sequence):
        msg = f'{name}: expected a count or a list of numbers, got {value!r}'
        raise InvalidGridSpecError(msg)
    result: list[float] = []
    for v in items:
        if isinstance(v, bool) or not isinstance(v, numbers.Real):
            msg = f'{name}: not a real number: {v!r}'
            raise InvalidGridSpecError(msg)
        fv = float(v)
        if not math.isfinite(fv):
            msg = f'{name}: coordinate must be finite, got {fv}'
            raise InvalidGridSpecError(msg)
        result.append(fv)
    return result


def _count(value: int, name: str) -> int:
    if value < 0:
        msg = f'{name}: line count must be non-negative, got {value}'
        raise InvalidGridSpecError(msg)
    return int(value)


def vertical_positions(count: int, minre: float, maxre: float) -> list[float]:
    """
    count вертикальных линий, охватывающих [minre, maxre].

    Линии равномерно распределены по отрезку, расширенному на один шаг
    с каждой стороны; одна линия ставится в середину.
    """
    if count == 0:
        return []
    if count == 1:
        return [0.5 * (minre + maxre)]
    step = (maxre - minre) / (count - 1)
    return [float(x) for x in np.linspace(minre - step, maxre + step, count)]


def horizontal_positions(count: int) -> list[float]:
    """count внутренних точек равномерного разбиения [0, 1] на count + 1 часть."""
    if count == 0:
        return []
    ys = np.linspace(STRIP_IM_MIN, STRIP_IM_MAX, count + 2)[1:-1]
    return [float(y) for y in ys]


def plan_grid(
    extent: tuple[float, float],
    re: GridRequest = None,
    im: GridRequest = None,
) -> GridPlan:
    """
    Переводит запрос сетки в конкретные координаты линий.

    Args:
        extent: (minre, maxre) конечных прообразов вершин.
        re: Число вертикальных линий или список их вещественных частей.
        im: Число горизонтальных линий или список их мнимых частей
            (в пределах [0, 1]).

    Raises:
        InvalidGridSpecError: отрицательное число линий, нечисловые или
            бесконечные координаты, мнимая часть вне полосы.

    """
    if _is_empty(re) and _is_empty(im):
        re = DEFAULT_LINE_COUNT
        im = DEFAULT_LINE_COUNT
    minre, maxre = extent

    if _is_empty(re):
        re_list: list[float] = []
    elif _is_count(re):
        re_list = vertical_positions(_count(re, 're'), minre, maxre)  # type: ignore[arg-type]
    else:
        re_list = _coordinates(re, 're')

    if _is_empty(im):
        im_list: list[float] = []
    elif _is_count(im):
        im_list = horizontal_positions(_count(im, 'im'))  # type: ignore[arg-type]
    else:
        im_list = _coordinates(im, 'im')
        bad = [y for y in im_list if not (STRIP_IM_MIN <= y <= STRIP_IM_MAX)]
        if bad:
            msg = (
                f'im: imaginary parts must lie in [{STRIP_IM_MIN}, {STRIP_IM_MAX}],'
                f' got {bad}'
            )
            raise InvalidGridSpecError(msg)

    logger.debug('Grid plan: %d vertical, %d horizontal', len(re_list), len(im_list))
    return GridPlan(re=re_list, im=im_list)
