from __future__ import annotations

import logging

from PySide6.QtCore import QObject, QThread, Signal, Slot

logger = logging.getLogger(__name__)


class TaskWorker(QThread):
    succeeded = Signal(object, object)   # worker, result
    failed = Signal(object, object)      # worker, exception

    def __init__(self, fn, on_success, on_failure):
        super().__init__()
        self.fn = fn
        self.on_success = on_success
        self.on_failure = on_failure

    def run(self):
        try:
            result = self.fn()
        except Exception as exc:
            self.failed.emit(self, exc)
            return
        self.succeeded.emit(self, result)


class ThreadedTaskRunner(QObject):
    """Runs blocking calls on a QThread and hands results back on the UI thread."""

    # callbacks run on the thread that owns this runner, never on the worker

    def __init__(self, parent=None):
        super().__init__(parent)
        self._workers: set[TaskWorker] = set()

    def run(self, fn, on_success, on_failure) -> None:
        worker = TaskWorker(fn, on_success, on_failure)
        worker.succeeded.connect(self._on_succeeded)
        worker.failed.connect(self._on_failed)
        worker.finished.connect(self._on_finished)
        self._workers.add(worker)
        worker.start()

    @Slot(object, object)
    def _on_succeeded(self, worker, result):
        worker.on_success(result)

    @Slot(object, object)
    def _on_failed(self, worker, exc):
        worker.on_failure(exc)

    @Slot()
    def _on_finished(self):
        done = [w for w in self._workers if w.isFinished()]
        for worker in done:
            self._workers.discard(worker)
            worker.deleteLater()

    def shutdown(self, wait_ms: int = 3000) -> None:
        """Stop every worker before the shared HTTP client is closed."""
        for worker in list(self._workers):
            worker.requestInterruption()
            if not worker.wait(wait_ms):
                logger.warning("Completion request still running at shutdown; terminating it")
                worker.terminate()
                worker.wait(500)
            if worker.isFinished():
                self._workers.discard(worker)
