"""Raster rendering of grid line images with Pillow."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from PIL import Image, ImageDraw

from gridlines.samples import ViewBounds
from gridlines.seeder import horizontal_extent
from render.compose import save_image
from shared.constants import (
    MIN_POINTS_FOR_LINE,
    PREVERTEX_COLOR,
    PREVERTEX_MARKER_RADIUS_PX,
    PREVIEW_POINT_COLOR,
    PREVIEW_POINT_RADIUS_PX,
    STRIP_IM_MAX,
    STRIP_IM_MIN,
    LineOrientation,
)
from shared.progress import publish_preview_image

if TYPE_CHECKING:
    from collections.abc import Iterable

    from domain.models import RenderSettings
    from gridlines.plot import GridPlotResult
    from gridlines.polygon import StripPolygon
    from gridlines.samples import GridLine, Sample

logger = logging.getLogger(__name__)

# Припуск по Im z вокруг полосы на канонической панели
STRIP_PANEL_MARGIN = 0.25

# Запас вокруг панели при отсечении отрезков (px)
GUARD_PAD_PX = 8


@dataclass(frozen=True)
class PanelTransform:
    """
    Мировые координаты -> пиксели одной панели.

    Масштаб одинаков по обеим осям (конформность сохраняет углы), окно
    центрируется в панели; ось Y направлена вверх.
    """

    view: ViewBounds
    left_px: int
    width_px: int
    height_px: int

    @property
    def scale(self) -> float:
        return min(self.width_px / self.view.width, self.height_px / self.view.height)

    def to_pixel(self, w: complex) -> tuple[float, float]:
        s = self.scale
        cx = 0.5 * (self.view.xmin + self.view.xmax)
        cy = 0.5 * (self.view.ymin + self.view.ymax)
        x = self.left_px + 0.5 * self.width_px + (w.real - cx) * s
        y = 0.5 * self.height_px - (w.imag - cy) * s
        return x, y

    def inside(self, x: float, y: float) -> bool:
        return (
            self.left_px <= x <= self.left_px + self.width_px
            and 0 <= y <= self.height_px
        )

    def guard_rect(self) -> tuple[float, float, float, float]:
        """Панель с небольшим запасом; всё, что дальше, отсекается."""
        pad = GUARD_PAD_PX
        return (
            self.left_px - pad,
            -pad,
            self.left_px + self.width_px + pad,
            self.height_px + pad,
        )


def clip_segment(
    p0: tuple[float, float],
    p1: tuple[float, float],
    rect: tuple[float, float, float, float],
) -> tuple[tuple[float, float], tuple[float, float]] | None:
    """Отсечение отрезка прямоугольником (Лян-Барски); None, если отрезок вне него."""
    x0, y0 = p0
    dx, dy = p1[0] - x0, p1[1] - y0
    rx0, ry0, rx1, ry1 = rect
    t0, t1 = 0.0, 1.0
    for p, q in ((-dx, x0 - rx0), (dx, rx1 - x0), (-dy, y0 - ry0), (dy, ry1 - y0)):
        if p == 0:
            if q < 0:
                return None
            continue
        r = q / p
        if p < 0:
            t0 = max(t0, r)
        else:
            t1 = min(t1, r)
        if t0 > t1:
            return None
    return (x0 + t0 * dx, y0 + t0 * dy), (x0 + t1 * dx, y0 + t1 * dy)


def clip_polyline(
    xy: list[tuple[float, float]],
    rect: tuple[float, float, float, float],
) -> list[list[tuple[float, float]]]:
    """Разбивает ломаную на куски, лежащие внутри rect."""
    runs: list[list[tuple[float, float]]] = []
    current: list[tuple[float, float]] = []
    for a, b in zip(xy, xy[1:]):
        clipped = clip_segment(a, b, rect)
        if clipped is None:
            if len(current) >= MIN_POINTS_FOR_LINE:
                runs.append(current)
            current = []
            continue
        ca, cb = clipped
        if current and current[-1] == ca:
            current.append(cb)
        else:
            if len(current) >= MIN_POINTS_FOR_LINE:
                runs.append(current)
            current = [ca, cb]
    if len(current) >= MIN_POINTS_FOR_LINE:
        runs.append(current)
    return runs


class GridImageSink:
    """
    Draws the polygon and the grid lines onto a Pillow image.

    The left panel shows the physical plane (images ``w``); with
    ``dual_panel`` the right panel shows the canonical strip with the
    prevertices and the domain segment of every finished line.
    """

    def __init__(self, settings: RenderSettings) -> None:
        self.settings = settings
        self.image = Image.new('RGB', settings.image_size, settings.background_color)
        self._draw = ImageDraw.Draw(self.image)
        self._physical: PanelTransform | None = None
        self._canonical: PanelTransform | None = None
        self._preview_points: list[complex] = []

    def plot_started(self, polygon: StripPolygon, view: ViewBounds) -> None:
        s = self.settings
        self._physical = PanelTransform(view, 0, s.width_px, s.height_px)
        for piece in polygon.outline(ray_length=view.diagonal):
            self._polyline(self._physical, piece, s.polygon_color, s.polygon_width_px)
        if s.dual_panel:
            self._canonical = PanelTransform(
                self._strip_view(polygon), s.width_px, s.width_px, s.height_px
            )
            self._draw_strip(polygon)

    def line_started(self, line: GridLine) -> None:
        self._preview_points = []

    def line_updated(self, line: GridLine, new_samples: list[Sample]) -> None:
        if not self.settings.live_preview or self._physical is None:
            return
        self._preview_points.extend(s.w for s in new_samples if s.has_finite_image)  # type: ignore[misc]
        preview = self.image.copy()
        draw = ImageDraw.Draw(preview)
        r = PREVIEW_POINT_RADIUS_PX
        for w in self._preview_points:
            x, y = self._physical.to_pixel(w)
            if not self._physical.inside(x, y):
                continue
            draw.ellipse((x - r, y - r, x + r, y + r), fill=PREVIEW_POINT_COLOR)
        publish_preview_image(preview)

    def line_finished(self, line: GridLine) -> None:
        if self._physical is None:
            return
        s = self.settings
        for run in line.image_runs():
            self._polyline(self._physical, run, s.line_color, s.line_width_px)
        if self._canonical is not None:
            seg = line.domain_segment()
            if seg is not None:
                self._polyline(self._canonical, list(seg), s.line_color, s.line_width_px)
        self._preview_points = []

    def plot_finished(self, result: GridPlotResult) -> None:
        if self.settings.output_path:
            save_image(self.image, Path(self.settings.output_path))

    def _polyline(
        self,
        panel: PanelTransform,
        points: Iterable[complex],
        color: tuple[int, int, int],
        width: int,
    ) -> None:
        xy = [panel.to_pixel(w) for w in points]
        if len(xy) < MIN_POINTS_FOR_LINE:
            # Вырожденная линия: одна точка
            if xy and panel.inside(*xy[0]):
                self._draw.point(xy[0], fill=color)
            return
        for run in clip_polyline(xy, panel.guard_rect()):
            self._draw.line(run, fill=color, width=width)

    def _strip_view(self, polygon: StripPolygon) -> ViewBounds:
        x1, x2 = horizontal_extent(polygon)
        m = STRIP_PANEL_MARGIN
        return ViewBounds(x1, x2, STRIP_IM_MIN - m, STRIP_IM_MAX + m)

    def _draw_strip(self, polygon: StripPolygon) -> None:
        panel = self._canonical
        if panel is None:
            return
        s = self.settings
        v = panel.view
        for y in (STRIP_IM_MIN, STRIP_IM_MAX):
            self._polyline(
                panel,
                [complex(v.xmin, y), complex(v.xmax, y)],
                s.polygon_color,
                s.polygon_width_px,
            )
        r = PREVERTEX_MARKER_RADIUS_PX
        for z in polygon.prevertices:
            if not panel.view.contains(complex(z)):
                continue
            x, y = panel.to_pixel(complex(z))
            self._draw.ellipse((x - r, y - r, x + r, y + r), fill=PREVERTEX_COLOR)


def render_grid(
    result: GridPlotResult,
    polygon: StripPolygon,
    view: ViewBounds,
    settings: RenderSettings,
) -> Image.Image:
    """Рисует уже построенную сетку без повторного вычисления отображения."""
    sink = GridImageSink(settings.model_copy(update={'live_preview': False}))
    sink.plot_started(polygon, view)
    for line in result.lines:
        sink.line_finished(line)
    sink.plot_finished(result)
    logger.debug(
        'Rendered %d vertical and %d horizontal lines',
        sum(1 for ln in result.lines if ln.orientation is LineOrientation.VERTICAL),
        sum(1 for ln in result.lines if ln.orientation is LineOrientation.HORIZONTAL),
    )
    return sink.image
