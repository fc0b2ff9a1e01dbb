"""Map evaluator contract and the adapter for plain numpy callables."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Protocol

import numpy as np

if TYPE_CHECKING:
    from collections.abc import Callable

logger = logging.getLogger(__name__)


class MapEvaluator(Protocol):
    """
    Вычислитель конформного отображения.

    Получает одномерный массив конечных точек канонической области и
    возвращает массив образов той же длины. NaN (или любое бесконечное
    значение) означает, что образ точки не определён.
    """

    def __call__(self, zp: np.ndarray) -> np.ndarray: ...


class FunctionEvaluator:
    """
    Adapts ``func(zp, *map_data, **options)`` to the MapEvaluator contract.

    ``map_data`` is the opaque bundle of precomputed map parameters
    (prevertices, constant, quadrature data); it is passed through unchanged
    and never copied, so one instance may serve every grid line.
    """

    def __init__(
        self,
        func: Callable[..., Any],
        *map_data: Any,
        **options: Any,
    ) -> None:
        self.func = func
        self.map_data = map_data
        self.options = options

    def __call__(self, zp: np.ndarray) -> np.ndarray:
        zp = np.asarray(zp, dtype=complex).ravel()
        if zp.size == 0:
            return np.empty(0, dtype=complex)
        try:
            wp = self._call(zp)
        except (ArithmeticError, ValueError) as e:
            logger.warning(
                'Batch map evaluation failed (%s); retrying %d points one by one',
                e,
                zp.size,
            )
            wp = self._pointwise(zp)
        if wp.shape != zp.shape:
            msg = f'Map returned {wp.shape[0]} images for {zp.shape[0]} points'
            raise ValueError(msg)
        wp[~np.isfinite(wp)] = np.nan
        return wp

    def _call(self, zp: np.ndarray) -> np.ndarray:
        with np.errstate(all='ignore'):
            result = self.func(zp, *self.map_data, **self.options)
        # Копия: результат может совпадать с массивом из map_data
        return np.array(result, dtype=complex).ravel()

    def _pointwise(self, zp: np.ndarray) -> np.ndarray:
        wp = np.full(zp.shape, np.nan, dtype=complex)
        for i, z in enumerate(zp):
            try:
                value = self._call(np.array([z]))
            except (ArithmeticError, ValueError):
                logger.debug('Map undefined at z=%s', z)
                continue
            if value.size == 1:
                wp[i] = value[0]
        return wp


def evaluate_points(evaluator: MapEvaluator, zp: np.ndarray) -> np.ndarray:
    """
    Один пакетный вызов вычислителя с проверкой контракта.

    Несовпадение длины результата считается нарушением контракта
    (ValueError), а не «неопределёнными» образами.
    """
    zp = np.asarray(zp, dtype=complex).ravel()
    wp = np.asarray(evaluator(zp), dtype=complex).ravel()
    if wp.shape != zp.shape:
        msg = (
            f'Evaluator returned {wp.shape[0]} images for {zp.shape[0]} points'
        )
        raise ValueError(msg)
    return wp
