"""Samples, grid lines and the viewing window."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

from shared.constants import (
    MIN_POINTS_FOR_LINE,
    STRIP_IM_MAX,
    STRIP_IM_MIN,
    LineOrientation,
)

if TYPE_CHECKING:
    from collections.abc import Iterable


class SampleState(str, Enum):
    PENDING = 'pending'
    RESOLVED = 'resolved'
    UNDEFINED = 'undefined'
    IMPROPER = 'improper'


class LineStatus(str, Enum):
    SEEDED = 'seeded'
    ITERATING = 'iterating'
    RESOLVED = 'resolved'


@dataclass(eq=False)
class Sample:
    """
    Точка линии сетки: прообраз z и его образ w.

    t: монотонная координата вдоль линии (Im z для вертикальных линий,
    Re z для горизонтальных). У несобственных концов горизонтальной линии
    t = ±inf, а образ w задан заранее и никогда не вычисляется.
    """

    t: float
    z: complex
    w: complex | None = None
    state: SampleState = SampleState.PENDING

    @property
    def is_pending(self) -> bool:
        return self.state is SampleState.PENDING

    @property
    def has_finite_image(self) -> bool:
        if self.state not in (SampleState.RESOLVED, SampleState.IMPROPER):
            return False
        return self.w is not None and _is_finite(self.w)

    def resolve(self, w: complex) -> None:
        """Присваивает образ; нечисловой или бесконечный образ даёт undefined."""
        if not self.is_pending:
            msg = f'Sample at t={self.t} is already {self.state.value}'
            raise ValueError(msg)
        if _is_finite(w):
            self.w = complex(w)
            self.state = SampleState.RESOLVED
        else:
            self.w = None
            self.state = SampleState.UNDEFINED


@dataclass(eq=False)
class GridLine:
    """Одна линия сетки: упорядоченная по t последовательность точек."""

    orientation: LineOrientation
    coordinate: float
    samples: list[Sample] = field(default_factory=list)
    status: LineStatus = LineStatus.SEEDED
    iterations: int = 0
    budget_exhausted: bool = False

    @property
    def sample_count(self) -> int:
        return len(self.samples)

    def pending(self) -> list[Sample]:
        return [s for s in self.samples if s.is_pending]

    def image_points(self) -> list[complex]:
        """Все конечные образы по порядку, без учёта разрывов."""
        return [s.w for s in self.samples if s.has_finite_image]  # type: ignore[misc]

    def image_runs(self) -> list[list[complex]]:
        """
        Образ линии в виде непрерывных кусков.

        Точка, в которой отображение не определено, разрывает ломаную.
        Несобственный конец с бесконечным образом просто отбрасывается.
        """
        runs: list[list[complex]] = []
        current: list[complex] = []
        for s in self.samples:
            if s.has_finite_image:
                current.append(s.w)  # type: ignore[arg-type]
            elif s.state is SampleState.UNDEFINED:
                if current:
                    runs.append(current)
                current = []
        if current:
            runs.append(current)
        return runs

    @property
    def is_degenerate(self) -> bool:
        return len(self.image_points()) < MIN_POINTS_FOR_LINE

    def domain_segment(self) -> tuple[complex, complex] | None:
        """Концы линии в канонической области (для второй панели)."""
        if self.orientation is LineOrientation.VERTICAL:
            return (
                complex(self.coordinate, STRIP_IM_MIN),
                complex(self.coordinate, STRIP_IM_MAX),
            )
        finite = [s.z for s in self.samples if s.state is not SampleState.IMPROPER]
        if not finite:
            return None
        return finite[0], finite[-1]


@dataclass(frozen=True)
class ViewBounds:
    """Прямоугольное окно просмотра в плоскости образа."""

    xmin: float
    xmax: float
    ymin: float
    ymax: float

    def __post_init__(self) -> None:
        if not (self.xmin < self.xmax and self.ymin < self.ymax):
            msg = f'Empty view bounds: {self}'
            raise ValueError(msg)

    @property
    def width(self) -> float:
        return self.xmax - self.xmin

    @property
    def height(self) -> float:
        return self.ymax - self.ymin

    @property
    def diagonal(self) -> float:
        return math.hypot(self.width, self.height)

    def contains(self, w: complex | None) -> bool:
        if w is None or not _is_finite(w):
            return False
        return (
            self.xmin <= w.real <= self.xmax and self.ymin <= w.imag <= self.ymax
        )

    @classmethod
    def from_points(
        cls,
        points: Iterable[complex],
        margin: float,
        fallback_half_size: float = 1.0,
    ) -> ViewBounds:
        """
        Окно по габариту конечных точек с припуском margin * диагональ.

        Если точек нет или габарит вырожден, строится квадрат со стороной
        2 * fallback_half_size вокруг центра.
        """
        finite = [p for p in points if _is_finite(p)]
        if not finite:
            h = fallback_half_size
            return cls(-h, h, -h, h)
        xs = [p.real for p in finite]
        ys = [p.imag for p in finite]
        x0, x1, y0, y1 = min(xs), max(xs), min(ys), max(ys)
        pad = margin * math.hypot(x1 - x0, y1 - y0)
        if pad <= 0:
            pad = fallback_half_size
        return cls(x0 - pad, x1 + pad, y0 - pad, y1 + pad)


def _is_finite(w: complex) -> bool:
    return math.isfinite(w.real) and math.isfinite(w.imag)
