"""Progress reporting for long sampling passes."""

from __future__ import annotations

from typing import Protocol

from tqdm import tqdm

BAR_FORMAT = "{desc} [{elapsed}] [{bar}] {n_fmt}/{total_fmt}"


class ProgressReporter(Protocol):
    def increment(self, count: int) -> None: ...

    def set_message(self, text: str) -> None: ...

    def finish(self) -> None: ...


class NullProgress:
    """Reporter that discards every update."""

    def increment(self, count: int) -> None:
        pass

    def set_message(self, text: str) -> None:
        pass

    def finish(self) -> None:
        pass


class ProgressBar:
    """Terminal progress bar backed by ``tqdm``."""

    def __init__(self, total: int) -> None:
        self._bar = tqdm(total=total, bar_format=BAR_FORMAT, ascii=" >#")

    def increment(self, count: int) -> None:
        self._bar.update(count)

    def set_message(self, text: str) -> None:
        self._bar.set_description_str(text)

    def finish(self) -> None:
        self._bar.close()


def build_progress_bar(total: int) -> ProgressBar:
    """Construct a progress bar sized for ``total`` pixels."""

    return ProgressBar(total)
