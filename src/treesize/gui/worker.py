"""
Background computation for the window: one SizeTreeWorker per Calculate click,
run on the global QThreadPool.
"""
from PySide6.QtCore import QRunnable, QObject, Signal, SignalInstance, QMutex, QMutexLocker
from treesize.core.models import TraversalParams
from treesize.commands import SizeTreeCommand


class WorkerSignals(QObject):
    progress = Signal(str, int, object)  # stage, entries seen, total (always None)
    finished = Signal(object, object)    # size_tree, stats
    error = Signal(str)


class SizeTreeWorker(QRunnable):
    """
    Computes one size tree off the GUI thread.

    A traversal cannot be interrupted halfway, so dropping a worker (new
    Calculate click, Cancel, window close) only discards what it would report.
    Every signal goes through _emit, which checks the drop flag under the same
    lock stop() takes; nothing is emitted after stop() returns.
    """
    def __init__(self, params: TraversalParams):
        super().__init__()
        self.params = params
        self.command = SizeTreeCommand()
        self.signals = WorkerSignals()
        self._dropped = False
        self._lock = QMutex()
        self.setAutoDelete(True)

    def stop(self):
        with QMutexLocker(self._lock):
            self._dropped = True

    @property
    def dropped(self) -> bool:
        with QMutexLocker(self._lock):
            return self._dropped

    def _emit(self, signal: SignalInstance, *args) -> bool:
        """Emit unless the worker was dropped. Returns whether it emitted."""
        with QMutexLocker(self._lock):
            if self._dropped:
                return False
            signal.emit(*args)
            return True

    def report_progress(self, stage: str, current: int, total=None):
        self._emit(self.signals.progress, stage, current, total)

    def run(self):
        if self.dropped:
            return

        try:
            tree, stats = self.command.execute(self.params, progress_callback=self.report_progress)
        except Exception as e:
            self._emit(self.signals.error, f"{type(e).__name__}: {e}")
            return

        self._emit(self.signals.finished, tree, stats)
