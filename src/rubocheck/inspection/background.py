"""Background execution of RuboCop tasks on a thread pool."""

import concurrent.futures
import threading
from collections.abc import Iterable

from rubocheck.inspection.result import RubocopResult
from rubocheck.inspection.task import RubocopTask


class BackgroundRunner:
    """Runs tasks off the caller's thread.

    One task is one unit of work; futures resolve to the task's result
    (None when the run was skipped or failed, never an exception).
    """

    def __init__(self, max_workers: int | None = None) -> None:
        self._executor = concurrent.futures.ThreadPoolExecutor(
            max_workers=max_workers,
            thread_name_prefix="rubocop",
        )
        self._active: set[RubocopTask] = set()
        self._lock = threading.Lock()

    def submit(self, task: RubocopTask) -> concurrent.futures.Future[RubocopResult | None]:
        """Schedule ``task`` and return a future for its result."""
        with self._lock:
            self._active.add(task)
        future = self._executor.submit(task.execute)
        future.add_done_callback(lambda _: self._discard(task))
        return future

    def run_all(self, tasks: Iterable[RubocopTask]) -> list[RubocopResult | None]:
        """Run tasks in parallel and return results in submission order."""
        futures = [self.submit(task) for task in tasks]
        return [future.result() for future in futures]

    def active_tasks(self) -> list[RubocopTask]:
        with self._lock:
            return list(self._active)

    def cancel_all(self) -> None:
        """Cancel every task that has not finished yet."""
        for task in self.active_tasks():
            task.cancel()

    def shutdown(self, wait: bool = True, cancel: bool = False) -> None:
        if cancel:
            self.cancel_all()
        self._executor.shutdown(wait=wait, cancel_futures=cancel)

    def __enter__(self) -> "BackgroundRunner":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.shutdown(wait=True)

    def _discard(self, task: RubocopTask) -> None:
        with self._lock:
            self._active.discard(task)
