"""Parallel sampling of a full pixel grid."""

from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Optional

import numpy as np

from .progress import NullProgress, ProgressReporter
from .sampler import SampleConfig, sample_pixel, view_center, view_offset


@dataclass(frozen=True)
class SampleResult:
    """Escape values for every pixel, indexed ``grid[x, y]``; NaN marks a bounded orbit."""

    x_res: int
    y_res: int
    grid: np.ndarray

    def value(self, x: int, y: int) -> Optional[float]:
        value = self.grid[x, y]
        if np.isnan(value):
            return None
        return float(value)

    @property
    def diverged(self) -> np.ndarray:
        return ~np.isnan(self.grid)


class ProgressCounter:
    """Shared pixel counter that forwards increments to a reporter under a lock."""

    def __init__(self, reporter: ProgressReporter) -> None:
        self._reporter = reporter
        self._lock = threading.Lock()
        self._count = 0

    @property
    def count(self) -> int:
        with self._lock:
            return self._count

    def increment(self, count: int) -> None:
        with self._lock:
            self._count += count
            self._reporter.increment(count)


def sample_grid(config: SampleConfig, progress: Optional[ProgressReporter] = None) -> SampleResult:
    """Sample every pixel of the configured window on a pool of ``config.workers`` threads.

    Work is split by column: the task for column ``x`` is the only writer of
    ``grid[x, :]``, so the grid itself needs no locking. Progress is reported
    once per finished column. Blocks until every column is done and re-raises
    the first exception raised by a worker.
    """

    counter = ProgressCounter(progress if progress is not None else NullProgress())
    center = view_center(config)
    offset = view_offset(config)
    grid = np.full((config.x_res, config.y_res), np.nan, dtype=np.float64)

    def fill_column(x: int) -> None:
        column = grid[x]
        for y in range(config.y_res):
            value = sample_pixel(config, center, offset, x, y)
            column[y] = np.nan if value is None else value
        counter.increment(config.y_res)

    # TODO: degree of parallelism follows x_res; split tall images into row blocks too
    with ThreadPoolExecutor(max_workers=config.workers) as executor:
        for _ in executor.map(fill_column, range(config.x_res)):
            pass

    grid.flags.writeable = False
    return SampleResult(x_res=config.x_res, y_res=config.y_res, grid=grid)
