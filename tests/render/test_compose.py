"""Tests for render.compose module."""

from pathlib import Path
from unittest.mock import patch

from PIL import Image

from render.compose import build_save_kwargs, save_image


class TestBuildSaveKwargs:
    """Tests for build_save_kwargs function."""

    def test_png_by_default(self):
        """Unknown or PNG extension should give PNG kwargs."""
        assert build_save_kwargs(Path('grid.png'))['format'] == 'PNG'
        assert build_save_kwargs(Path('grid.bmp'))['format'] == 'PNG'

    def test_jpeg_extension(self):
        """JPEG extensions are case-insensitive."""
        kwargs = build_save_kwargs(Path('GRID.JPEG'), quality=80)
        assert kwargs['format'] == 'JPEG'
        assert kwargs['quality'] == 80

    def test_quality_clamped(self):
        """Quality should be clamped to [10, 100]."""
        assert build_save_kwargs(Path('a.jpg'), quality=500)['quality'] == 100
        assert build_save_kwargs(Path('a.jpg'), quality=1)['quality'] == 10


class TestSaveImage:
    """Tests for save_image function."""

    def test_save_png(self, tmp_path):
        """Should write a readable PNG and create parent directories."""
        img = Image.new('RGB', (30, 20), color='red')
        path = tmp_path / 'nested' / 'grid.png'
        save_image(img, path)
        with Image.open(path) as saved:
            assert saved.size == (30, 20)
            assert saved.format == 'PNG'

    def test_rgba_converted(self, tmp_path):
        """Non-RGB images are converted before saving as JPEG."""
        img = Image.new('RGBA', (10, 10), color=(0, 0, 255, 128))
        path = tmp_path / 'grid.jpg'
        save_image(img, path)
        with Image.open(path) as saved:
            assert saved.mode == 'RGB'

    def test_explicit_kwargs(self, tmp_path):
        """Explicit save kwargs should be passed to PIL unchanged."""
        img = Image.new('RGB', (10, 10))
        path = tmp_path / 'grid.png'
        with patch.object(Image.Image, 'save') as mock_save, patch('os.fsync'):
            path.touch()
            save_image(img, path, save_kwargs={'format': 'PNG', 'compress_level': 1})
        mock_save.assert_called_once_with(path, format='PNG', compress_level=1)
