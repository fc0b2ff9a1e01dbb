"""Adaptive images of cartesian grid lines under a strip map."""
from gridlines.evaluator import FunctionEvaluator, MapEvaluator
from gridlines.planner import GridPlan, InvalidGridSpecError, plan_grid
from gridlines.plot import GridPlotResult, plot_grid, plot_profile
from gridlines.polygon import StripPolygon
from gridlines.refiner import AdaptiveRefiner, long_segments, refine_line
from gridlines.samples import (
    GridLine,
    LineStatus,
    Sample,
    SampleState,
    ViewBounds,
)
from gridlines.seeder import (
    horizontal_extent,
    seed_horizontal_line,
    seed_vertical_line,
)

__all__ = [
    'AdaptiveRefiner',
    'FunctionEvaluator',
    'GridLine',
    'GridPlan',
    'GridPlotResult',
    'InvalidGridSpecError',
    'LineStatus',
    'MapEvaluator',
    'Sample',
    'SampleState',
    'StripPolygon',
    'ViewBounds',
    'horizontal_extent',
    'long_segments',
    'plan_grid',
    'plot_grid',
    'plot_profile',
    'refine_line',
    'seed_horizontal_line',
    'seed_vertical_line',
]
