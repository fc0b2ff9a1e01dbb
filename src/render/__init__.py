# Модуль рендеринга сетки
from render.compose import build_save_kwargs, save_image
from render.image_sink import GridImageSink, render_grid
from render.sink import NullSink, RenderSink

__all__ = [
    'GridImageSink',
    'NullSink',
    'RenderSink',
    'build_save_kwargs',
    'render_grid',
    'save_image',
]
