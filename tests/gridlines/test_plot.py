"""Tests for gridlines.plot module."""

import threading
from unittest.mock import MagicMock, patch

import numpy as np
import pytest

from domain.models import GridProfile, PlotOptions
from gridlines.evaluator import FunctionEvaluator
from gridlines.plot import GridPlotResult, plot_grid, plot_profile
from gridlines.planner import InvalidGridSpecError
from gridlines.samples import LineStatus, ViewBounds
from shared.constants import LineOrientation


class RecordingSink:
    """Collects every call the plotter makes."""

    def __init__(self):
        self.events = []

    def plot_started(self, polygon, view):
        self.events.append(('plot_started', None))

    def line_started(self, line):
        self.events.append(('line_started', line.orientation))

    def line_updated(self, line, new_samples):
        self.events.append(('line_updated', len(new_samples)))

    def line_finished(self, line):
        self.events.append(('line_finished', line.status))

    def plot_finished(self, result):
        self.events.append(('plot_finished', result.cancelled))

    def names(self):
        return [name for name, _ in self.events]


class TestPlotGrid:
    def test_vertical_lines_before_horizontal(self, channel_polygon, identity_map):
        sink = RecordingSink()
        plot_grid(channel_polygon, identity_map, re=2, im=2, sink=sink)
        started = [arg for name, arg in sink.events if name == 'line_started']
        assert started == [
            LineOrientation.VERTICAL,
            LineOrientation.VERTICAL,
            LineOrientation.HORIZONTAL,
            LineOrientation.HORIZONTAL,
        ]
        assert sink.names()[0] == 'plot_started'
        assert sink.names()[-1] == 'plot_finished'

    def test_returns_used_coordinates(self, channel_polygon, identity_map):
        result = plot_grid(channel_polygon, identity_map, re=3, im=[0.5])
        assert result.re == pytest.approx([-1.0, 1.0, 3.0])
        assert result.im == [0.5]
        assert [line.coordinate for line in result.vertical] == pytest.approx(
            [-1.0, 1.0, 3.0]
        )
        assert len(result.lines) == 4
        assert not result.cancelled

    def test_default_grid(self, channel_polygon, identity_map):
        result = plot_grid(channel_polygon, identity_map)
        assert len(result.vertical) == 10
        assert len(result.horizontal) == 10
        assert all(line.status is LineStatus.RESOLVED for line in result.lines)
        assert all(line.pending() == [] for line in result.lines)

    def test_invalid_request_before_any_evaluation(self, channel_polygon):
        evaluator = MagicMock()
        sink = MagicMock()
        with pytest.raises(InvalidGridSpecError):
            plot_grid(channel_polygon, evaluator, re=-1, im=2, sink=sink)
        evaluator.assert_not_called()
        sink.plot_started.assert_not_called()

    def test_lines_use_shared_map_data(self, channel_polygon):
        """One evaluator instance serves every line of the plot."""
        data = {'shift': 1.0}
        calls = []

        def strip_map(zp, params):
            calls.append(params)
            return np.asarray(zp) + params['shift']

        evaluator = FunctionEvaluator(strip_map, data)
        plot_grid(channel_polygon, evaluator, re=2, im=1)
        assert calls
        assert all(p is data for p in calls)

    def test_explicit_view_controls_lengths(self, channel_polygon, identity_map):
        """A larger window raises the absolute segment bound."""
        options = PlotOptions(min_len_fraction=0.001, max_len_fraction=0.01)
        small = plot_grid(
            channel_polygon,
            identity_map,
            re=[1.0],
            im=0,
            options=options,
            view=ViewBounds(-1.0, 3.0, -1.0, 2.0),
        )
        large = plot_grid(
            channel_polygon,
            identity_map,
            re=[1.0],
            im=0,
            options=options,
            view=ViewBounds(-100.0, 100.0, -100.0, 100.0),
        )
        assert small.vertical[0].sample_count > large.vertical[0].sample_count

    def test_empty_grid(self, channel_polygon, identity_map):
        sink = RecordingSink()
        result = plot_grid(channel_polygon, identity_map, re=0, im=0, sink=sink)
        assert result.lines == []
        assert sink.names() == ['plot_started', 'plot_finished']


class TestCancellation:
    def test_partial_result_on_cancel(self, channel_polygon, identity_map):
        event = threading.Event()

        class CancelAfterFirst(RecordingSink):
            def line_finished(self, line):
                super().line_finished(line)
                event.set()

        sink = CancelAfterFirst()
        result = plot_grid(
            channel_polygon, identity_map, re=2, im=2, sink=sink, cancel_event=event
        )
        assert isinstance(result, GridPlotResult)
        assert result.cancelled
        assert len(result.vertical) == 2
        assert result.horizontal == []
        assert result.vertical[0].status is LineStatus.RESOLVED
        assert result.vertical[1].status is LineStatus.ITERATING
        assert sink.events[-1] == ('plot_finished', True)


class TestProgress:
    def test_progress_steps_per_line(self, channel_polygon, identity_map):
        with patch('gridlines.plot.ConsoleProgress') as progress_cls:
            plot_grid(
                channel_polygon,
                identity_map,
                re=2,
                im=3,
                options=PlotOptions(show_progress=True),
            )
        progress_cls.assert_called_once()
        assert progress_cls.call_args.args[0] == 5
        bar = progress_cls.return_value
        assert bar.step_sync.call_count == 5
        bar.close.assert_called_once()

    def test_no_progress_by_default(self, channel_polygon, identity_map):
        with patch('gridlines.plot.ConsoleProgress') as progress_cls:
            plot_grid(channel_polygon, identity_map, re=1, im=1)
        progress_cls.assert_not_called()


class TestPlotProfile:
    """Tests for plot_profile function."""

    def test_profile_grid_request_used(self, channel_polygon, identity_map):
        """Line requests and plot options come from the profile."""
        profile = GridProfile(
            vertical_lines=[0.5, 1.5],
            horizontal_lines=3,
            plot=PlotOptions(max_refinements=1),
        )
        result = plot_profile(channel_polygon, identity_map, profile)
        assert result.re == [0.5, 1.5]
        assert result.im == pytest.approx([0.25, 0.5, 0.75])
        assert all(line.iterations == 1 for line in result.lines)

    def test_empty_profile_uses_default_grid(self, channel_polygon, identity_map):
        result = plot_profile(channel_polygon, identity_map, GridProfile())
        assert len(result.vertical) == 10
        assert len(result.horizontal) == 10

    def test_invalid_profile_request(self, channel_polygon):
        evaluator = MagicMock()
        with pytest.raises(InvalidGridSpecError):
            plot_profile(channel_polygon, evaluator, GridProfile(horizontal_lines=[2.0]))
        evaluator.assert_not_called()
