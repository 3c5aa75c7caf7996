"""Helper classes for running playback in a background thread.

Playback is a coroutine; the Qt event loop must keep running while it
waits between elements.  A :class:`Job` wraps a callable (plain or
``async``) in a ``QRunnable`` so it can be submitted to the global
``QThreadPool``.  Coroutine functions get a private event loop via
:func:`asyncio.run` on the worker thread.

Example usage::

    from PyQt6.QtCore import QThreadPool
    from .async_job import Job

    job = Job(engine.play_text, "cq cq de test")
    job.signals.error.connect(show_error)
    job.signals.finished.connect(enable_play_button)
    QThreadPool.globalInstance().start(job)
"""

from __future__ import annotations

import asyncio
import inspect
import logging

from PyQt6.QtCore import QObject, QRunnable, pyqtSignal, pyqtSlot

logger = logging.getLogger(__name__)


class JobSignals(QObject):
    """Defines the signals available from a running job.

    ``result``
        Emitted with the return value when the job completes successfully.

    ``error``
        Emitted with a string representation of the exception if the
        callable raises.

    ``finished``
        Emitted when the job is finished, regardless of success or
        failure.
    """

    result = pyqtSignal(object)
    error = pyqtSignal(str)
    finished = pyqtSignal()


class Job(QRunnable):
    """Wraps a callable or coroutine function for a ``QThreadPool``.

    :param fn: Callable to execute.  If it is a coroutine function the
        coroutine is driven to completion with :func:`asyncio.run`.
    :param args: Positional arguments to pass to ``fn``.
    :param kwargs: Keyword arguments to pass to ``fn``.
    """

    def __init__(self, fn, *args, **kwargs) -> None:
        super().__init__()
        self.fn = fn
        self.args = args
        self.kwargs = kwargs
        self.signals = JobSignals()

    @pyqtSlot()
    def run(self) -> None:
        try:
            if inspect.iscoroutinefunction(self.fn):
                result = asyncio.run(self.fn(*self.args, **self.kwargs))
            else:
                result = self.fn(*self.args, **self.kwargs)
        except Exception as exc:
            logger.exception("Background job failed")
            self.signals.error.emit(str(exc))
        else:
            self.signals.result.emit(result)
        finally:
            self.signals.finished.emit()
