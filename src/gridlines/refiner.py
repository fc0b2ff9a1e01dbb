"""
Adaptive refinement of grid line images.

Each pass evaluates every pending sample in a single evaluator call, then
bisects (in the line parameter) every segment whose image is longer than
``max_len``. A segment is exempt from the length test when either endpoint is
undefined, improper or still pending, when either image lies outside the
viewing window, or when it is shorter than ``min_len``. Samples are only ever
inserted, never removed or recomputed.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import numpy as np

from gridlines.evaluator import evaluate_points
from gridlines.samples import GridLine, LineStatus, Sample, SampleState
from shared.progress import check_cancelled

if TYPE_CHECKING:
    import threading

    from gridlines.evaluator import MapEvaluator
    from gridlines.samples import ViewBounds
    from render.sink import RenderSink

logger = logging.getLogger(__name__)


def segment_length(a: Sample, b: Sample, view: ViewBounds) -> float | None:
    """
    Clipped image length of segment a-b, or None when it is exempt.

    Only segments between two resolved samples whose images both lie inside
    ``view`` are measured.
    """
    if a.state is not SampleState.RESOLVED or b.state is not SampleState.RESOLVED:
        return None
    if not (view.contains(a.w) and view.contains(b.w)):
        return None
    return abs(b.w - a.w)  # type: ignore[operator]


def long_segments(
    line: GridLine,
    min_len: float,
    max_len: float,
    view: ViewBounds,
) -> list[int]:
    """Индексы i сегментов (samples[i], samples[i+1]), требующих деления."""
    result: list[int] = []
    samples = line.samples
    for i in range(len(samples) - 1):
        length = segment_length(samples[i], samples[i + 1], view)
        if length is None or length < min_len:
            continue
        if length > max_len:
            result.append(i)
    return result


def insert_midpoints(line: GridLine, indices: list[int]) -> list[Sample]:
    """Вставляет по одной ожидающей точке в середину каждого сегмента."""
    if not indices:
        return []
    split = set(indices)
    merged: list[Sample] = []
    added: list[Sample] = []
    samples = line.samples
    for i, s in enumerate(samples):
        merged.append(s)
        if i in split:
            nxt = samples[i + 1]
            mid = Sample(t=0.5 * (s.t + nxt.t), z=0.5 * (s.z + nxt.z))
            merged.append(mid)
            added.append(mid)
    line.samples[:] = merged
    return added


def resolve_pending(line: GridLine, evaluator: MapEvaluator) -> list[Sample]:
    """Вычисляет все ожидающие точки линии одним вызовом вычислителя."""
    pending = line.pending()
    if not pending:
        return []
    zp = np.array([s.z for s in pending], dtype=complex)
    wp = evaluate_points(evaluator, zp)
    for s, w in zip(pending, wp):
        s.resolve(complex(w))
    return pending


class AdaptiveRefiner:
    """
    Refinement policy shared by all lines of one plot.

    Holds only read-only thresholds; each ``refine`` call owns the line it
    works on, so lines may be refined independently.
    """

    def __init__(
        self,
        min_len: float,
        max_len: float,
        max_iterations: int,
        view: ViewBounds,
    ) -> None:
        if max_iterations < 1:
            msg = f'max_iterations must be >= 1, got {max_iterations}'
            raise ValueError(msg)
        if not (0 <= min_len < max_len):
            msg = f'Expected 0 <= min_len < max_len, got {min_len}, {max_len}'
            raise ValueError(msg)
        self.min_len = float(min_len)
        self.max_len = float(max_len)
        self.max_iterations = int(max_iterations)
        self.view = view

    def long_segments(self, line: GridLine) -> list[int]:
        return long_segments(line, self.min_len, self.max_len, self.view)

    def refine(
        self,
        line: GridLine,
        evaluator: MapEvaluator,
        sink: RenderSink | None = None,
        cancel_event: threading.Event | None = None,
    ) -> GridLine:
        """
        Уточняет линию до выполнения критерия длины или исчерпания проходов.

        На последнем разрешённом проходе новые точки не вставляются, поэтому
        завершённая линия никогда не содержит ожидающих точек. Исчерпание
        лимита не является ошибкой: линия возвращается как есть с флагом
        budget_exhausted.

        Raises:
            CancelledError: если выставлен флаг отмены (проверяется перед
                каждым проходом). Линия остаётся в частично уточнённом виде.

        """
        if line.status is LineStatus.RESOLVED:
            return line
        line.status = LineStatus.ITERATING
        while True:
            check_cancelled(cancel_event)
            new = resolve_pending(line, evaluator)
            line.iterations += 1
            if sink is not None:
                sink.line_updated(line, new)

            long = self.long_segments(line)
            if not long:
                break
            if line.iterations >= self.max_iterations:
                line.budget_exhausted = True
                logger.debug(
                    '%s line %.6g: budget of %d passes exhausted, '
                    '%d segments still longer than %.3g',
                    line.orientation.value,
                    line.coordinate,
                    self.max_iterations,
                    len(long),
                    self.max_len,
                )
                break
            insert_midpoints(line, long)

        line.status = LineStatus.RESOLVED
        if line.is_degenerate:
            logger.debug(
                '%s line %.6g is degenerate: %d finite image points',
                line.orientation.value,
                line.coordinate,
                len(line.image_points()),
            )
        logger.debug(
            '%s line %.6g resolved: %d samples after %d passes',
            line.orientation.value,
            line.coordinate,
            line.sample_count,
            line.iterations,
        )
        return line


def refine_line(
    line: GridLine,
    evaluator: MapEvaluator,
    min_len: float,
    max_len: float,
    max_iterations: int,
    view_bounds: ViewBounds,
    sink: RenderSink | None = None,
    cancel_event: threading.Event | None = None,
) -> GridLine:
    """Функциональная обёртка над AdaptiveRefiner.refine()."""
    refiner = AdaptiveRefiner(min_len, max_len, max_iterations, view_bounds)
    return refiner.refine(line, evaluator, sink=sink, cancel_event=cancel_event)
