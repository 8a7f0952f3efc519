"""Progress reporting helpers."""

from typing import Callable, Optional

from tqdm import tqdm

# (percent 0-100, human readable message)
ProgressCallback = Callable[[float, str], None]


class TqdmProgress:
    """Adapt parser progress callbacks onto a percentage tqdm bar."""

    def __init__(self, desc: str, disable: bool = False):
        self.bar = tqdm(total=100, desc=desc, unit="%", disable=disable)
        self._last = 0.0

    def __call__(self, progress: float, message: str) -> None:
        # Callbacks are monotonic per parse, but never move the bar backwards
        progress = max(min(progress, 100.0), self._last)
        self.bar.update(progress - self._last)
        self.bar.set_postfix_str(message[:50])
        self._last = progress

    def close(self) -> None:
        self.bar.close()

    def __enter__(self) -> "TqdmProgress":
        return self

    def __exit__(self, *exc) -> None:
        self.close()


def scaled_progress(
    callback: Optional[ProgressCallback], index: int, total: int, label: str
) -> Optional[ProgressCallback]:
    """
    Map a single file's 0-100 progress into its slice of a multi-file run.

    Args:
        callback: Overall progress callback (may be None)
        index: Zero-based position of the current file
        total: Number of files in the run
        label: Prefix for messages, e.g. the file name

    Returns:
        Callback for the single file, or None when no overall callback is set
    """
    if callback is None:
        return None

    def _report(progress: float, message: str) -> None:
        overall = (index / total) * 100 + progress / total
        callback(overall, f"[{index + 1}/{total}] {label}: {message}")

    return _report
