import threading
import time

import pytest

from basnet.io_service_pool import IoService, IoServicePool


def _wait_until(predicate, timeout=5.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return predicate()


def test_run_executes_posted_handlers_in_order():
    service = IoService()
    seen = []
    for i in range(3):
        service.post(lambda i=i: seen.append(i))
    assert service.run() == 3
    assert seen == [0, 1, 2]
    assert service.stopped


def test_run_without_handlers_returns_zero():
    assert IoService().run() == 0


def test_work_keeps_run_alive_until_removed():
    service = IoService()
    service.add_work()
    result = []
    thread = threading.Thread(target=lambda: result.append(service.run()))
    thread.start()
    seen = []
    service.post(lambda: seen.append("x"))
    assert _wait_until(lambda: seen == ["x"])
    assert thread.is_alive()
    service.remove_work()
    thread.join(5)
    assert not thread.is_alive()
    assert result == [1]


def test_stop_leaves_queued_handlers():
    service = IoService()
    seen = []
    service.post(lambda: seen.append(1))
    service.stop()
    assert service.run() == 0
    assert seen == []
    service.restart()
    assert service.run() == 1
    assert seen == [1]


def test_remove_work_without_work_raises():
    with pytest.raises(RuntimeError):
        IoService().remove_work()


@pytest.mark.parametrize(
    "args",
    [(0, 32, 100), (5, 4, 100), (4, 32, 0)],
)
def test_invalid_parameters_rejected(args):
    with pytest.raises(ValueError):
        IoServicePool(*args)


def test_default_size_and_load():
    pool = IoServicePool()
    assert pool.size() == 4
    assert pool.thread_load == 100
    assert pool.idle()


def test_round_robin_cycles_over_services():
    pool = IoServicePool(3, 3, 1)
    services = [pool.get_io_service() for _ in range(6)]
    assert len({id(s) for s in services[:3]}) == 3
    assert all(a is b for a, b in zip(services[:3], services[3:]))


def test_start_runs_handlers_and_stop_marks_busy():
    pool = IoServicePool(2, 2, 10)
    pool.start()
    assert pool.started
    seen = []
    event = threading.Event()
    pool.get_io_service().post(lambda: (seen.append(1), event.set()))
    assert event.wait(5)
    pool.stop()
    assert not pool.started
    assert seen == [1]
    assert not pool.idle()


def test_configure_applies_before_start_only():
    pool = IoServicePool(2, 2, 10)
    returned = pool.configure(3, 5, 20)
    assert returned is pool
    pool.start()
    assert pool.size() == 3
    assert pool.thread_load == 20
    pool.configure(1, 1, 1)
    assert pool.thread_load == 20
    pool.stop()


def test_load_grows_pool_up_to_high_watermark():
    pool = IoServicePool(2, 4, 10)
    pool.start()
    try:
        pool.get_io_service(50)
        assert pool.size() == 3
        for _ in range(5):
            pool.get_io_service(50)
        assert pool.size() == 4
    finally:
        pool.stop()


def test_load_does_not_grow_when_not_started():
    pool = IoServicePool(2, 4, 10)
    pool.get_io_service(1000)
    assert pool.size() == 2


def test_blocked_run_returns_after_stop():
    pool = IoServicePool(2, 2, 10)
    thread = threading.Thread(target=pool.run)
    thread.start()
    assert _wait_until(lambda: pool.started)
    pool.stop()
    thread.join(5)
    assert not thread.is_alive()


def test_force_stop_skips_pending_handlers():
    pool = IoServicePool(1, 1, 10)
    pool.start()
    gate = threading.Event()
    seen = []
    service = pool.get_io_service()
    service.post(gate.wait)
    service.post(lambda: seen.append(1))
    stopper = threading.Thread(target=pool.stop, args=(True,))
    stopper.start()
    assert _wait_until(lambda: service.stopped)
    gate.set()
    stopper.join(5)
    assert not stopper.is_alive()
    assert seen == []


def test_context_manager_starts_and_stops():
    with IoServicePool(1, 1, 10) as pool:
        assert pool.started
    assert not pool.started