"""Polygon description for the Schwarz-Christoffel strip map."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

import numpy as np

from gridlines.samples import ViewBounds
from shared.constants import (
    HORIZONTAL_MIN_HALF_EXTENT,
    VIEW_FALLBACK_HALF_SIZE,
    VIEW_MARGIN_RATIO,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class StripPolygon:
    """
    Polygon and its strip-map data.

    Attributes:
        vertices: Polygon vertices ``w`` (``inf`` marks an unbounded vertex).
        angles: Turning angles ``beta`` (interior angle is ``pi * (beta + 1)``).
        prevertices: Prevertices ``z`` on the strip boundary; the strip ends
            are ``-inf`` and ``+inf``.
        constant: Multiplicative constant of the map.

    """

    vertices: np.ndarray
    angles: np.ndarray
    prevertices: np.ndarray
    constant: complex = 1.0

    def __post_init__(self) -> None:
        w = np.asarray(self.vertices, dtype=complex).ravel()
        beta = np.asarray(self.angles, dtype=float).ravel()
        z = np.asarray(self.prevertices, dtype=complex).ravel()
        if not (len(w) == len(beta) == len(z)):
            msg = (
                'vertices, angles and prevertices must have equal length: '
                f'{len(w)}, {len(beta)}, {len(z)}'
            )
            raise ValueError(msg)
        object.__setattr__(self, 'vertices', w)
        object.__setattr__(self, 'angles', beta)
        object.__setattr__(self, 'prevertices', z)

    def finite_real_extent(self) -> tuple[float, float]:
        """(minre, maxre) конечных прообразов; без них (-5, 5)."""
        z = self.prevertices
        finite = z[np.isfinite(z)]
        if finite.size == 0:
            return -HORIZONTAL_MIN_HALF_EXTENT, HORIZONTAL_MIN_HALF_EXTENT
        re = finite.real
        return float(re.min()), float(re.max())

    def end_images(self) -> tuple[complex, complex]:
        """
        Образы левого (-inf) и правого (+inf) концов полосы.

        Если конец полосы не является прообразом вершины, образ не определён
        (NaN).
        """
        z = self.prevertices
        infinite = np.isinf(z)
        left = self.vertices[infinite & (z.real < 0)]
        right = self.vertices[infinite & (z.real > 0)]
        nan = complex(math.nan, math.nan)
        wl = complex(left[0]) if left.size else nan
        wr = complex(right[0]) if right.size else nan
        return wl, wr

    def default_view(self, margin: float = VIEW_MARGIN_RATIO) -> ViewBounds:
        return ViewBounds.from_points(
            (complex(v) for v in self.vertices),
            margin,
            VIEW_FALLBACK_HALF_SIZE,
        )

    def edge_directions(self) -> list[float | None]:
        """
        Направление (аргумент) каждого ребра k: w[k] -> w[k+1].

        Для рёбер между конечными вершинами берётся arg разности; остальные
        восстанавливаются по углам поворота: arg_k = arg_{k-1} - pi * beta_k.
        """
        w = self.vertices
        n = len(w)
        dirs: list[float | None] = [None] * n
        for k in range(n):
            a, b = w[k], w[(k + 1) % n]
            if np.isfinite(a) and np.isfinite(b) and a != b:
                dirs[k] = float(np.angle(b - a))
        if all(d is None for d in dirs):
            return dirs
        # Два прохода вперёд и назад заполняют все пропуски по кругу
        for _ in range(2):
            for k in range(n):
                prev = dirs[k - 1]
                if dirs[k] is None and prev is not None:
                    dirs[k] = prev - math.pi * float(self.angles[k])
            for k in range(n - 1, -1, -1):
                nxt = dirs[(k + 1) % n]
                if dirs[k] is None and nxt is not None:
                    dirs[k] = nxt + math.pi * float(self.angles[(k + 1) % n])
        return dirs

    def outline(self, ray_length: float) -> list[list[complex]]:
        """
        Ломаные для отрисовки контура многоугольника.

        Рёбра между конечными вершинами рисуются как есть; ребро, идущее
        в бесконечную вершину (или из неё), рисуется лучом длины ray_length.
        """
        w = self.vertices
        n = len(w)
        dirs = self.edge_directions()
        pieces: list[list[complex]] = []
        for k in range(n):
            a, b = w[k], w[(k + 1) % n]
            a_fin, b_fin = bool(np.isfinite(a)), bool(np.isfinite(b))
            if a_fin and b_fin:
                pieces.append([complex(a), complex(b)])
                continue
            d = dirs[k]
            if d is None or a_fin == b_fin:
                continue
            step = ray_length * complex(math.cos(d), math.sin(d))
            if a_fin:
                pieces.append([complex(a), complex(a) + step])
            else:
                pieces.append([complex(b) - step, complex(b)])
        logger.debug('Polygon outline: %d pieces for %d vertices', len(pieces), n)
        return pieces
