from pydantic import BaseModel, Field, field_validator, model_validator

from shared.constants import (
    BACKGROUND_COLOR,
    GRID_LINE_COLOR,
    GRID_LINE_WIDTH_PX,
    MAX_LEN_FRACTION,
    MAX_REFINEMENTS,
    MIN_LEN_FRACTION,
    POLYGON_COLOR,
    POLYGON_LINE_WIDTH_PX,
    RENDER_HEIGHT_PX,
    RENDER_WIDTH_PX,
)

# Ограничения на размер одной панели (px)
MIN_PANEL_PX = 16
MAX_PANEL_PX = 16384

# Значение канала цвета
COLOR_CHANNEL_MAX = 255


class PlotOptions(BaseModel):
    """Параметры адаптивного построения линий сетки."""

    model_config = {
        'extra': 'ignore',  # игнорировать лишние поля из профилей
    }

    # Минимальная длина сегмента (доля диагонали окна просмотра)
    min_len_fraction: float = MIN_LEN_FRACTION
    # Максимальная длина сегмента (доля диагонали окна просмотра)
    max_len_fraction: float = MAX_LEN_FRACTION
    # Максимальное число проходов вычисления отображения на одну линию
    max_refinements: int = Field(default=MAX_REFINEMENTS, ge=1)
    # Показывать консольный прогресс по линиям
    show_progress: bool = False

    @field_validator('min_len_fraction', 'max_len_fraction')
    @classmethod
    def validate_fractions(cls, v: float | str) -> float:
        fv = float(v)
        if not (0.0 < fv <= 1.0):
            msg = 'Значение должно быть в диапазоне (0.0, 1.0]'
            raise ValueError(msg)
        return fv

    @model_validator(mode='after')
    def validate_order(self) -> 'PlotOptions':
        if self.min_len_fraction >= self.max_len_fraction:
            msg = 'min_len_fraction должен быть меньше max_len_fraction'
            raise ValueError(msg)
        return self

    def absolute_lengths(self, diagonal: float) -> tuple[float, float]:
        """(min_len, max_len) в единицах плоскости образа."""
        return diagonal * self.min_len_fraction, diagonal * self.max_len_fraction


class RenderSettings(BaseModel):
    """Установки растрового вывода сетки."""

    model_config = {
        'extra': 'ignore',
    }

    # Размер одной панели (px)
    width_px: int = RENDER_WIDTH_PX
    height_px: int = RENDER_HEIGHT_PX
    # Рисовать вторую панель с канонической областью (полосой)
    dual_panel: bool = False
    # Публиковать промежуточный предпросмотр после каждого прохода
    live_preview: bool = False

    background_color: tuple[int, int, int] = BACKGROUND_COLOR
    line_color: tuple[int, int, int] = GRID_LINE_COLOR
    polygon_color: tuple[int, int, int] = POLYGON_COLOR
    line_width_px: int = Field(default=GRID_LINE_WIDTH_PX, ge=1)
    polygon_width_px: int = Field(default=POLYGON_LINE_WIDTH_PX, ge=1)

    # Путь к итоговому файлу (PNG или JPEG); пустая строка: не сохранять
    output_path: str = ''

    @field_validator('width_px', 'height_px')
    @classmethod
    def validate_panel_size(cls, v: int | str) -> int:
        iv = int(v)
        # Допускаем размеры от 16 до 16384 px
        iv = max(iv, MIN_PANEL_PX)
        return min(iv, MAX_PANEL_PX)

    @field_validator('background_color', 'line_color', 'polygon_color')
    @classmethod
    def validate_color(cls, v: tuple[int, int, int]) -> tuple[int, int, int]:
        if any(not (0 <= c <= COLOR_CHANNEL_MAX) for c in v):
            msg = 'Каналы цвета должны быть в диапазоне [0, 255]'
            raise ValueError(msg)
        return v

    @property
    def image_size(self) -> tuple[int, int]:
        panels = 2 if self.dual_panel else 1
        return self.width_px * panels, self.height_px


class GridProfile(BaseModel):
    """Профиль построения: запрос сетки и установки построения и вывода."""

    model_config = {
        'extra': 'ignore',
    }

    # Число вертикальных линий или список их Re z; None: по умолчанию
    vertical_lines: int | float | list[float] | None = None
    # Число горизонтальных линий или список их Im z; None: по умолчанию
    horizontal_lines: int | float | list[float] | None = None

    plot: PlotOptions = Field(default_factory=PlotOptions)
    render: RenderSettings = Field(default_factory=RenderSettings)
