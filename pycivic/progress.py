"""Rich progress display for batch operations."""

from typing import Optional

from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TaskID,
    TextColumn,
    TimeElapsedColumn,
)

from .batch import ProgressCallback


class BatchProgressDisplay:
    """Progress bar advanced once per processed item.

    Use as a context manager and pass :meth:`callback` to a
    :class:`~pycivic.batch.DocumentBatch` operation. When disabled, the
    callbacks do nothing.
    """

    def __init__(self, enabled: bool = True) -> None:
        self.enabled = enabled
        self._progress: Optional[Progress] = None

    def callback(self, description: str) -> Optional[ProgressCallback]:
        """Create a task and return the function that advances it.

        Args:
            description: Task label, e.g. "Uploading files"

        Returns:
            function(done, total), or None when the display is disabled
        """
        if self._progress is None:
            return None
        progress = self._progress
        task: TaskID = progress.add_task(description, total=None)

        def advance(done: int, total: int) -> None:
            progress.update(task, completed=done, total=total)

        return advance

    def __enter__(self) -> "BatchProgressDisplay":
        if self.enabled:
            self._progress = Progress(
                SpinnerColumn(),
                TextColumn("[bold blue]{task.description}"),
                BarColumn(),
                MofNCompleteColumn(),
                TimeElapsedColumn(),
                refresh_per_second=4,
            )
            self._progress.__enter__()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if self._progress is not None:
            self._progress.__exit__(exc_type, exc_val, exc_tb)
            self._progress = None
