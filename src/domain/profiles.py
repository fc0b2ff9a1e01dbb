import logging
import os
from pathlib import Path

import tomlkit

from domain.models import GridProfile
from shared.constants import APP_DIR_NAME, PROFILES_DIR

logger = logging.getLogger(__name__)


def _user_profiles_dir() -> Path:
    """
    Determine profiles directory.

    1) If <project_root>/configs/profiles exists, use it (useful for run-from-repo setups).
    2) Otherwise, fall back to user APPDATA directory: %APPDATA%/SCGridPlot/configs/profiles
       or ~/AppData/Roaming/SCGridPlot/configs/profiles when APPDATA is not set.
    """
    project_root = Path(__file__).resolve().parent.parent.parent
    local_profiles = project_root / PROFILES_DIR
    if local_profiles.exists():
        return local_profiles

    return (
        Path(os.getenv('APPDATA') or (Path.home() / 'AppData' / 'Roaming'))
        / APP_DIR_NAME
        / PROFILES_DIR
    )


def ensure_profiles_dir() -> Path:
    profiles_dir = _user_profiles_dir()
    profiles_dir.mkdir(parents=True, exist_ok=True)
    return profiles_dir


def list_profiles() -> list[str]:
    """Список имён профилей без расширения."""
    folder = ensure_profiles_dir()
    return sorted(p.stem for p in folder.glob('*.toml') if p.is_file())


def profile_path(name: str) -> Path:
    """Путь к файлу профиля по имени."""
    return ensure_profiles_dir() / f'{name}.toml'


def load_profile(name_or_path: str) -> GridProfile:
    """
    Загрузка и валидация профиля TOML -> GridProfile.

    Поддерживает как имя профиля (без .toml) из каталога profiles,
    так и абсолютный/относительный путь до TOML файла.
    """
    p = Path(name_or_path)
    path = (
        p if p.suffix.lower() == '.toml' and p.exists() else profile_path(name_or_path)
    )
    if not path.exists():
        msg = f'Профиль не найден: {path}'
        raise FileNotFoundError(msg)
    text = path.read_text(encoding='utf-8')
    data = tomlkit.parse(text).unwrap()
    profile = GridProfile.model_validate(data)
    logger.info(
        'Profile %s loaded: vertical=%s horizontal=%s max_refinements=%d',
        path.name,
        profile.vertical_lines,
        profile.horizontal_lines,
        profile.plot.max_refinements,
    )
    return profile


def _drop_none(data: dict) -> dict:
    # TOML не умеет хранить None
    return {
        k: _drop_none(v) if isinstance(v, dict) else v
        for k, v in data.items()
        if v is not None
    }


def save_profile(name: str, profile: GridProfile) -> Path:
    """Сохранение профиля в TOML (без атомарности и бэкапов)."""
    path = profile_path(name)
    data = _drop_none(profile.model_dump(mode='json'))
    text = tomlkit.dumps(data)
    path.write_text(text, encoding='utf-8')
    logger.info('Profile saved: %s', path)
    return path


def delete_profile(name: str) -> None:
    """Удаление файла профиля, если он существует."""
    path = profile_path(name)
    if path.exists():
        path.unlink()
