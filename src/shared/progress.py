import contextlib
import logging
import threading
import time
from collections.abc import Callable

from shared.constants import DEFAULT_WRITER, SingleLineRenderer

logger = logging.getLogger(__name__)

__all__ = [
    'CancelledError',
    'ConsoleProgress',
    'SingleLineRenderer',
    'check_cancelled',
    'cleanup_all_progress_resources',
    'clear_cancel_event',
    'publish_preview_image',
    'set_cancel_event',
    'set_preview_image_callback',
    'set_progress_callback',
]


class CancelledError(Exception):
    """Операция прервана пользователем."""


# Глобальные колбэки для интеграции с GUI (опционально)
class _CbStore:
    progress: Callable[[int, int, str], None] | None = None
    preview_image: Callable[[object], None] | None = None
    cancel_event: threading.Event | None = None


def set_progress_callback(cb: Callable[[int, int, str], None] | None) -> None:
    """Устанавливает глобальный колбэк прогресса: (done, total, label)."""
    _CbStore.progress = cb


def set_preview_image_callback(cb: Callable[[object], None] | None) -> None:
    """Устанавливает колбэк предпросмотра (получает PIL.Image)."""
    _CbStore.preview_image = cb


def has_preview_image_callback() -> bool:
    return _CbStore.preview_image is not None


def publish_preview_image(img: object) -> bool:
    """
    Публикует изображение предпросмотра в GUI, если колбэк установлен.

    Возвращает True, если колбэк был установлен и вызван без исключений.
    Тип img: PIL.Image.Image (используем object во избежание жёсткой зависимости).
    """
    cb = _CbStore.preview_image
    if cb is not None:
        try:
            cb(img)
        except Exception:
            logger.warning('Preview callback failed', exc_info=True)
            return False
        else:
            return True
    return False


def set_cancel_event(event: threading.Event | None) -> None:
    """Устанавливает общий для процесса флаг отмены."""
    _CbStore.cancel_event = event


def clear_cancel_event() -> None:
    _CbStore.cancel_event = None


def check_cancelled(event: threading.Event | None = None) -> None:
    """
    Бросает CancelledError, если выставлен флаг отмены.

    Проверяется переданный event, а при его отсутствии общий флаг,
    установленный через set_cancel_event().
    """
    ev = event if event is not None else _CbStore.cancel_event
    if ev is not None and ev.is_set():
        raise CancelledError('Operation cancelled')


def cleanup_all_progress_resources() -> None:
    """Очистка всех глобальных колбэков и флага отмены."""
    _CbStore.progress = None
    _CbStore.preview_image = None
    _CbStore.cancel_event = None


class ConsoleProgress:
    """Прогресс-бар для пошаговых операций."""

    def __init__(
        self,
        total: int,
        label: str = 'Прогресс',
        writer: SingleLineRenderer | None = None,
    ) -> None:
        self.total = max(1, int(total))
        self.done = 0
        self.start = time.monotonic()
        self.label = label
        self._writer = writer or DEFAULT_WRITER
        self._writer.clear_line()
        self._render()  # показать 0%

    def _format_eta(self, remaining: float) -> str:
        if remaining is None or remaining == float('inf'):
            return '--:--'
        m, s = divmod(int(remaining), 60)
        h, m = divmod(m, 60)
        if h > 0:
            return f'{h:02d}:{m:02d}:{s:02d}'
        return f'{m:02d}:{s:02d}'

    def _render(self) -> None:
        elapsed = max(1e-6, time.monotonic() - self.start)
        rps = self.done / elapsed
        remaining = (self.total - self.done) / rps if rps > 0 else float('inf')
        bar_len = 30
        filled = int(bar_len * self.done / self.total)
        bar = '█' * filled + '░' * (bar_len - filled)
        msg = (
            f'{self.label}: [{bar}] {self.done}/{self.total} | {rps:4.1f}/s | ETA'
            f' {self._format_eta(remaining)}'
        )
        self._writer.write_line(msg)
        # Сообщаем GUI о прогрессе
        if _CbStore.progress is not None:
            with contextlib.suppress(Exception):
                _CbStore.progress(self.done, self.total, self.label)

    def step_sync(self, n: int = 1) -> None:
        self.done = min(self.total, self.done + n)
        self._render()

    def close(self) -> None:
        self._writer.clear_line()
