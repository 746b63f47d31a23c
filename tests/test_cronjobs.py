import threading

import pytest

from linkshort.cronjobs import main, run_every


def test_runs_until_stopped():
    stop = threading.Event()
    calls = []

    def job():
        calls.append(1)
        if len(calls) == 3:
            stop.set()

    runs = run_every(0.01, job, stop)
    assert runs == 3
    assert len(calls) == runs


def test_failing_job_keeps_schedule():
    stop = threading.Event()
    calls = []

    def job():
        calls.append(1)
        if len(calls) < 3:
            raise RuntimeError("boom")
        stop.set()

    assert run_every(0.01, job, stop) == 3
    assert len(calls) == 3


def test_already_stopped_never_runs():
    stop = threading.Event()
    stop.set()
    calls = []
    assert run_every(0.01, lambda: calls.append(1), stop) == 0
    assert calls == []


@pytest.mark.parametrize("interval", [0, -1])
def test_rejects_non_positive_interval(interval):
    with pytest.raises(ValueError):
        run_every(interval, lambda: None, threading.Event())


def test_main_help_exits_cleanly():
    with pytest.raises(SystemExit) as info:
        main(["--help"])
    assert info.value.code == 0


def test_main_rejects_bad_interval():
    with pytest.raises(SystemExit) as info:
        main(["--interval", "0"])
    assert info.value.code == 2