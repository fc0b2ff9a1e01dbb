"""Domain layer - plot settings and profiles."""
from domain.models import GridProfile, PlotOptions, RenderSettings
from domain.profiles import (
    delete_profile,
    ensure_profiles_dir,
    list_profiles,
    load_profile,
    save_profile,
)

__all__ = [
    'GridProfile',
    'PlotOptions',
    'RenderSettings',
    'delete_profile',
    'ensure_profiles_dir',
    'list_profiles',
    'load_profile',
    'save_profile',
]
