"""Image of a cartesian grid under a Schwarz-Christoffel strip map."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from domain.models import PlotOptions
from gridlines.planner import GridRequest, plan_grid
from gridlines.refiner import AdaptiveRefiner
from gridlines.seeder import (
    horizontal_extent,
    seed_horizontal_line,
    seed_vertical_line,
)
from render.sink import NullSink
from shared.progress import CancelledError, ConsoleProgress

if TYPE_CHECKING:
    import threading

    from domain.models import GridProfile
    from gridlines.evaluator import MapEvaluator
    from gridlines.polygon import StripPolygon
    from gridlines.samples import GridLine, ViewBounds
    from render.sink import RenderSink

logger = logging.getLogger(__name__)


@dataclass
class GridPlotResult:
    """Готовые линии и фактически использованные координаты сетки."""

    vertical: list[GridLine] = field(default_factory=list)
    horizontal: list[GridLine] = field(default_factory=list)
    re: list[float] = field(default_factory=list)
    im: list[float] = field(default_factory=list)
    cancelled: bool = False

    @property
    def lines(self) -> list[GridLine]:
        return [*self.vertical, *self.horizontal]


def plot_grid(
    polygon: StripPolygon,
    evaluator: MapEvaluator,
    re: GridRequest = None,
    im: GridRequest = None,
    options: PlotOptions | None = None,
    view: ViewBounds | None = None,
    sink: RenderSink | None = None,
    cancel_event: threading.Event | None = None,
) -> GridPlotResult:
    """
    Адаптивно строит образы вертикальных и горизонтальных линий полосы.

    Сначала обрабатываются все вертикальные линии, затем горизонтальные;
    каждая линия уточняется независимо. Длины сегментов задаются долями
    диагонали окна просмотра (по умолчанию окно вокруг конечных вершин
    многоугольника).

    Args:
        polygon: Многоугольник и прообразы его вершин.
        evaluator: Вычислитель отображения (пакет точек -> пакет образов).
        re: Число вертикальных линий или их вещественные части.
        im: Число горизонтальных линий или их мнимые части.
        options: Параметры уточнения.
        view: Окно просмотра, по которому отсекаются сегменты.
        sink: Приёмник линий (отрисовка, предпросмотр).
        cancel_event: Флаг отмены; проверяется между проходами уточнения.

    Returns:
        GridPlotResult: линии и использованные координаты. При отмене
        возвращаются уже построенные линии (включая частично уточнённую)
        с флагом cancelled.

    Raises:
        InvalidGridSpecError: некорректный запрос сетки (до начала
            построения).

    """
    options = options or PlotOptions()
    sink = sink or NullSink()
    view = view or polygon.default_view()

    plan = plan_grid(polygon.finite_real_extent(), re, im)
    result = GridPlotResult(re=list(plan.re), im=list(plan.im))

    min_len, max_len = options.absolute_lengths(view.diagonal)
    refiner = AdaptiveRefiner(min_len, max_len, options.max_refinements, view)
    logger.info(
        'Plotting grid: %d vertical, %d horizontal lines; '
        'segment length %.4g..%.4g, up to %d passes',
        len(plan.re),
        len(plan.im),
        min_len,
        max_len,
        options.max_refinements,
    )

    progress = (
        ConsoleProgress(plan.total, label='Линии сетки')
        if options.show_progress and plan.total
        else None
    )
    start = time.monotonic()
    sink.plot_started(polygon, view)

    x1, x2 = horizontal_extent(polygon)
    w_left, w_right = polygon.end_images()
    jobs: list[tuple[list[GridLine], GridLine]] = []
    jobs.extend((result.vertical, seed_vertical_line(x)) for x in plan.re)
    jobs.extend(
        (result.horizontal, seed_horizontal_line(y, x1, x2, w_left, w_right))
        for y in plan.im
    )

    try:
        for target, line in jobs:
            target.append(line)
            sink.line_started(line)
            refiner.refine(line, evaluator, sink=sink, cancel_event=cancel_event)
            sink.line_finished(line)
            if progress is not None:
                progress.step_sync()
    except CancelledError:
        result.cancelled = True
        logger.info(
            'Grid plot cancelled after %d of %d lines',
            len(result.lines),
            len(jobs),
        )
    finally:
        if progress is not None:
            progress.close()

    sink.plot_finished(result)
    elapsed = time.monotonic() - start
    samples = sum(line.sample_count for line in result.lines)
    exhausted = sum(1 for line in result.lines if line.budget_exhausted)
    logger.info(
        'Grid plot done in %.2fs: %d lines, %d samples, %d hit the pass limit',
        elapsed,
        len(result.lines),
        samples,
        exhausted,
    )
    return result


def plot_profile(
    polygon: StripPolygon,
    evaluator: MapEvaluator,
    profile: GridProfile,
    view: ViewBounds | None = None,
    sink: RenderSink | None = None,
    cancel_event: threading.Event | None = None,
) -> GridPlotResult:
    """Строит сетку по загруженному профилю (запрос линий и PlotOptions)."""
    return plot_grid(
        polygon,
        evaluator,
        re=profile.vertical_lines,
        im=profile.horizontal_lines,
        options=profile.plot,
        view=view,
        sink=sink,
        cancel_event=cancel_event,
    )
