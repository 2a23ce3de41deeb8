from __future__ import annotations

import sys
from typing import Any

from tqdm import tqdm
from tqdm.std import tqdm as TqdmType

"""Progress display with tqdm (TTY only).

Stdout carries the output document, so the bar is drawn on stderr and only when stderr
is a terminal. In CI / redirected runs no bar is created at all.
"""

__all__ = [
    "ProgressTracker",
    "is_tty_enabled",
]


def is_tty_enabled() -> bool:
    """True if stderr is a TTY and a progress bar should be displayed."""
    return sys.stderr.isatty()


class ProgressTracker:
    """Single tqdm bar over a known number of steps (languages, sheets, ...)."""

    def __init__(self, total: int, *, description: str = "Processing", unit: str = "item") -> None:
        self.total = total
        self.description = description
        self.current = 0

        self.enabled = is_tty_enabled()
        self.pbar: TqdmType[Any] | None
        if self.enabled:
            self.pbar = tqdm(
                total=total,
                desc=description,
                unit=unit,
                file=sys.stderr,
                leave=False,
                ncols=80,
                ascii=True,
            )
        else:
            self.pbar = None

    def advance(self, label: str | None = None) -> None:
        """Mark one step done; ``label`` is shown as the bar postfix."""
        self.current += 1
        if self.pbar is not None:
            if label:
                self.pbar.set_postfix_str(label, refresh=False)
            self.pbar.update(1)

    def close(self) -> None:
        if self.pbar is not None:
            self.pbar.close()
            self.pbar = None

    def __enter__(self) -> ProgressTracker:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
