"""Consumers of grid lines as they are refined."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from gridlines.plot import GridPlotResult
    from gridlines.polygon import StripPolygon
    from gridlines.samples import GridLine, Sample, ViewBounds


class RenderSink(Protocol):
    """
    Приёмник линий сетки.

    Получает и образ (w), и прообраз (z) каждой точки, поэтому синхронное
    отображение физической и канонической панелей остаётся заботой приёмника.
    Вызовы line_updated носят рекомендательный характер (показ прогресса).
    """

    def plot_started(self, polygon: StripPolygon, view: ViewBounds) -> None: ...

    def line_started(self, line: GridLine) -> None: ...

    def line_updated(self, line: GridLine, new_samples: list[Sample]) -> None: ...

    def line_finished(self, line: GridLine) -> None: ...

    def plot_finished(self, result: GridPlotResult) -> None: ...


class NullSink:
    """Приёмник, который ничего не рисует."""

    def plot_started(self, polygon: StripPolygon, view: ViewBounds) -> None:
        pass

    def line_started(self, line: GridLine) -> None:
        pass

    def line_updated(self, line: GridLine, new_samples: list[Sample]) -> None:
        pass

    def line_finished(self, line: GridLine) -> None:
        pass

    def plot_finished(self, result: GridPlotResult) -> None:
        pass
