from threading import Event

from releasewatch.core.scheduler import run_periodically


def test_runs_until_shutdown() -> None:
    shutdown = Event()
    calls = []

    def cycle():
        calls.append(1)
        if len(calls) == 3:
            shutdown.set()

    assert run_periodically(cycle, interval=0, shutdown_event=shutdown) == 3


def test_failing_cycle_does_not_stop_the_loop() -> None:
    shutdown = Event()
    calls = []

    def cycle():
        calls.append(1)
        if len(calls) == 1:
            raise RuntimeError("boom")
        shutdown.set()

    assert run_periodically(cycle, interval=0, shutdown_event=shutdown) == 2


def test_no_cycle_when_already_stopped() -> None:
    shutdown = Event()
    shutdown.set()
    assert run_periodically(lambda: None, interval=0, shutdown_event=shutdown) == 0
