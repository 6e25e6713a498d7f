import threading
import traceback
from typing import Any, Callable, Optional

from debug_logging import log_debug, log_error


class Worker(threading.Thread):
    """
    Generic worker thread for running bridge calls off the caller's thread.

    Bridge calls block on the elevated shell (consent prompt, slow curl).
    The caller starts a Worker and either waits with its own timeout or gets
    the outcome through the callbacks.

    Note: There is no cancellation. A worker whose command is stuck keeps
    running after wait() times out; its callbacks still fire when it finishes
    unless stop() was called.
    """

    def __init__(self, task_func: Callable[..., Any], *args,
                 on_result: Optional[Callable[[Any], None]] = None,
                 on_error: Optional[Callable[[str, str], None]] = None,
                 **kwargs):
        super().__init__(name=f"worker-{getattr(task_func, '__name__', 'task')}", daemon=True)
        self.task_func = task_func
        self.args = args
        self.kwargs = kwargs
        self.on_result = on_result
        self.on_error = on_error # (error_message, details)
        self.result: Any = None
        self.error: Optional[BaseException] = None
        self._done = threading.Event()
        self._is_running = True

    def run(self):
        name = getattr(self.task_func, '__name__', 'task')
        log_debug("WORKER", f"Starting task: {name}...")
        try:
            self.result = self.task_func(*self.args, **self.kwargs)
        except Exception as e:
            self.error = e
            error_trace = traceback.format_exc()
            log_error("WORKER", f"Error in worker thread ({name}): {e}\n{error_trace}")
            if self._is_running and self.on_error:
                self.on_error(f"Error during '{name}': {e}", error_trace)
            return
        finally:
            self._done.set()

        if not self._is_running:
            log_debug("WORKER", f"Task aborted: {name}")
            return
        log_debug("WORKER", f"Task completed: {name}")
        if self.on_result:
            self.on_result(self.result)

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until the task finished; False if `timeout` elapsed first."""
        return self._done.wait(timeout)

    def stop(self):
        """Suppress callbacks; the underlying shell command is not interrupted."""
        self._is_running = False


def run_with_timeout(task_func: Callable[..., Any], *args, timeout: Optional[float] = None, **kwargs):
    """
    Run task_func on a Worker and wait for it.

    Returns:
        (finished, result). finished is False when the timeout elapsed; the
        task keeps running in the background in that case.

    Raises:
        Whatever task_func raised, re-raised on the calling thread
    """
    worker = Worker(task_func, *args, **kwargs)
    worker.start()
    if not worker.wait(timeout):
        worker.stop()
        return False, None
    if worker.error is not None:
        raise worker.error
    return True, worker.result
