"""Tests for domain.models module."""

import pytest
from pydantic import ValidationError

from domain.models import GridProfile, PlotOptions, RenderSettings
from shared.constants import MAX_LEN_FRACTION, MAX_REFINEMENTS, MIN_LEN_FRACTION


class TestPlotOptions:
    """Tests for PlotOptions validators."""

    def test_defaults(self):
        """Defaults should come from constants."""
        opts = PlotOptions()
        assert opts.min_len_fraction == MIN_LEN_FRACTION
        assert opts.max_len_fraction == MAX_LEN_FRACTION
        assert opts.max_refinements == MAX_REFINEMENTS
        assert opts.show_progress is False

    def test_absolute_lengths(self):
        """Fractions scale with the view diagonal."""
        opts = PlotOptions(min_len_fraction=0.01, max_len_fraction=0.1)
        assert opts.absolute_lengths(50.0) == pytest.approx((0.5, 5.0))

    def test_fraction_from_string(self):
        """Numeric strings from config files should be accepted."""
        assert PlotOptions(max_len_fraction='0.2').max_len_fraction == 0.2

    @pytest.mark.parametrize('value', [0.0, -0.1, 1.5])
    def test_fraction_out_of_range(self, value):
        """Fractions outside (0, 1] should raise ValueError."""
        with pytest.raises(ValueError):
            PlotOptions(min_len_fraction=value)

    def test_min_not_below_max(self):
        """min_len_fraction must be smaller than max_len_fraction."""
        with pytest.raises(ValidationError):
            PlotOptions(min_len_fraction=0.1, max_len_fraction=0.1)

    def test_zero_refinements_rejected(self):
        """At least one evaluation pass is required."""
        with pytest.raises(ValidationError):
            PlotOptions(max_refinements=0)

    def test_extra_fields_ignored(self):
        """Unknown profile keys should not fail validation."""
        opts = PlotOptions(unknown_key=1)
        assert not hasattr(opts, 'unknown_key')


class TestRenderSettings:
    """Tests for RenderSettings validators."""

    def test_panel_size_clamped(self):
        """Panel size should be clamped to [16, 16384]."""
        s = RenderSettings(width_px=1, height_px=100000)
        assert s.width_px == 16
        assert s.height_px == 16384

    def test_image_size(self):
        """Dual panel doubles the width."""
        assert RenderSettings(width_px=300, height_px=200).image_size == (300, 200)
        dual = RenderSettings(width_px=300, height_px=200, dual_panel=True)
        assert dual.image_size == (600, 200)

    def test_color_from_list(self):
        """Colors loaded from TOML arrays become tuples."""
        s = RenderSettings(line_color=[10, 20, 30])
        assert s.line_color == (10, 20, 30)

    def test_color_channel_out_of_range(self):
        """Channels outside [0, 255] should raise ValueError."""
        with pytest.raises(ValueError):
            RenderSettings(background_color=(0, 0, 256))

    def test_line_width_positive(self):
        with pytest.raises(ValidationError):
            RenderSettings(line_width_px=0)


class TestGridProfile:
    """Tests for GridProfile model."""

    def test_defaults(self):
        """Empty profile leaves the grid request to the planner."""
        profile = GridProfile()
        assert profile.vertical_lines is None
        assert profile.horizontal_lines is None
        assert isinstance(profile.plot, PlotOptions)
        assert isinstance(profile.render, RenderSettings)

    def test_counts_and_coordinates(self):
        """Counts stay integers, coordinate lists stay floats."""
        profile = GridProfile(vertical_lines=5, horizontal_lines=[0.25, 0.75])
        assert profile.vertical_lines == 5
        assert isinstance(profile.vertical_lines, int)
        assert profile.horizontal_lines == [0.25, 0.75]

    def test_nested_sections(self):
        """Nested dicts are validated into section models."""
        profile = GridProfile.model_validate(
            {
                'plot': {'max_refinements': 4},
                'render': {'dual_panel': True},
            }
        )
        assert profile.plot.max_refinements == 4
        assert profile.render.dual_panel is True
