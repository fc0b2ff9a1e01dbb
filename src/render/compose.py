from __future__ import annotations

import contextlib
import logging
import os
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from pathlib import Path

    from PIL import Image

logger = logging.getLogger(__name__)


def build_save_kwargs(out_path: Path, quality: int = 95) -> dict[str, Any]:
    """Build PIL.Image.save kwargs from the output file extension."""
    if out_path.suffix.lower() in ('.jpg', '.jpeg'):
        q = max(10, min(100, int(quality)))
        return {
            'format': 'JPEG',
            'quality': q,
            'subsampling': 0,
            'optimize': True,
        }
    return {'format': 'PNG', 'optimize': True}


def save_image(
    img: Image.Image, out_path: Path, *, save_kwargs: dict[str, Any] | None = None
) -> None:
    """Save an image and fsync to ensure data is written."""
    if save_kwargs is None:
        save_kwargs = build_save_kwargs(out_path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    tmp_rgb = img.convert('RGB') if img.mode != 'RGB' else img.copy()
    try:
        tmp_rgb.save(out_path, **save_kwargs)
    finally:
        with contextlib.suppress(Exception):
            tmp_rgb.close()
    fd = os.open(out_path, os.O_RDONLY)
    try:
        os.fsync(fd)
    finally:
        os.close(fd)
    logger.info('Image saved: %s (%dx%d)', out_path, img.width, img.height)
