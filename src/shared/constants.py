import sys
import threading
from enum import Enum

# --- Затравочная дискретизация линий сетки

# Число равномерно расположенных точек при затравке линии
SEED_POINT_COUNT = 15

# Вертикальные линии идут по всей ширине полосы: Im z от 0 до 1
STRIP_IM_MIN = 0.0
STRIP_IM_MAX = 1.0

# Минимальный охват горизонтальных линий по Re z (±5)
HORIZONTAL_MIN_HALF_EXTENT = 5.0

# Число линий каждой ориентации, если сетка не задана
DEFAULT_LINE_COUNT = 10

# --- Адаптивное уточнение (доли диагонали окна просмотра)

# Сегмент короче этой доли никогда не делится
MIN_LEN_FRACTION = 0.01

# Сегмент длиннее этой доли делится пополам
MAX_LEN_FRACTION = 0.08

# Максимальное число проходов вычисления отображения на одну линию
MAX_REFINEMENTS = 10

# --- Окно просмотра

# Припуск вокруг конечных вершин многоугольника (доля диагонали)
VIEW_MARGIN_RATIO = 0.1

# Полуразмер окна, если у многоугольника нет протяжённости
VIEW_FALLBACK_HALF_SIZE = 1.0

# --- Растровый вывод

# Размер одной панели по умолчанию (px)
RENDER_WIDTH_PX = 800
RENDER_HEIGHT_PX = 800

# Цвета (RGB)
BACKGROUND_COLOR = (255, 255, 255)
GRID_LINE_COLOR = (0, 0, 0)
POLYGON_COLOR = (0, 0, 255)
PREVERTEX_COLOR = (255, 0, 0)
PREVIEW_POINT_COLOR = (128, 128, 128)

# Толщина линий сетки и контура (px)
GRID_LINE_WIDTH_PX = 1
POLYGON_LINE_WIDTH_PX = 2

# Радиус точки на промежуточном предпросмотре (px)
PREVIEW_POINT_RADIUS_PX = 1

# Радиус маркера прообраза вершины на канонической панели (px)
PREVERTEX_MARKER_RADIUS_PX = 3

# Минимальное количество точек для рисования линии (draw.line требует >= 2)
MIN_POINTS_FOR_LINE = 2

# Каталог профилей относительно корня проекта
PROFILES_DIR = 'configs/profiles'

# Имя каталога приложения в пользовательском APPDATA
APP_DIR_NAME = 'SCGridPlot'


class LineOrientation(str, Enum):
    VERTICAL = 'vertical'
    HORIZONTAL = 'horizontal'


class SingleLineRenderer:
    """Потокобезопасный рендерер для вывода в одну строку."""

    def __init__(self, *, single_line: bool = True) -> None:
        self.single_line = single_line
        self._last_len = 0
        self._lock = threading.Lock()

    def clear_line(self) -> None:
        """Полностью очистить текущую строку прогресса."""
        with self._lock:
            if self.single_line and self._last_len > 0:
                sys.stdout.write('\r' + ' ' * self._last_len + '\r')
                sys.stdout.flush()
                self._last_len = 0

    def write_line(self, msg: str) -> None:
        """Перерисовать текущую строку прогресса."""
        with self._lock:
            if self.single_line:
                pad = max(0, self._last_len - len(msg))
                sys.stdout.write('\r' + msg + (' ' * pad))
            else:
                sys.stdout.write('\r' + msg)
            sys.stdout.flush()
            self._last_len = len(msg)


# Экземпляр по умолчанию (можно передать свой при создании классов)
DEFAULT_WRITER = SingleLineRenderer()
