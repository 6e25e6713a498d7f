import threading
import time

import pytest

from worker import Worker, run_with_timeout


def test_run_with_timeout_returns_result() -> None:
    assert run_with_timeout(lambda a, b: a + b, 2, 3, timeout=1) == (True, 5)


def test_run_with_timeout_gives_up_on_slow_task() -> None:
    release = threading.Event()

    finished, result = run_with_timeout(release.wait, 5, timeout=0.05)

    assert (finished, result) == (False, None)
    release.set()


def test_run_with_timeout_reraises_task_error() -> None:
    def boom():
        raise ValueError("bad")

    with pytest.raises(ValueError, match="bad"):
        run_with_timeout(boom, timeout=1)


def test_callbacks_fire_on_completion() -> None:
    results = []
    errors = []
    done = threading.Event()

    def on_result(value):
        results.append(value)
        done.set()

    Worker(lambda: "ok", on_result=on_result).start()
    assert done.wait(1)

    def on_error(message, details):
        errors.append(message)
        done.set()

    done.clear()
    Worker(lambda: 1 / 0, on_error=on_error).start()
    assert done.wait(1)

    assert results == ["ok"]
    assert "division by zero" in errors[0]


def test_stopped_worker_suppresses_callbacks() -> None:
    results = []
    worker = Worker(time.sleep, 0.05, on_result=results.append)
    worker.start()
    worker.stop()

    assert worker.wait(1)
    worker.join(1)
    assert results == []
