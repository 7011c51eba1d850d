"""
CachedValue mutate/revalidate 테스트
"""
import threading

import pytest

from pipeline_dashboard.services.cache import CachedValue


class Counter:
    def __init__(self, values):
        self.values = list(values)
        self.calls = 0

    def __call__(self):
        self.calls += 1
        return self.values[min(self.calls - 1, len(self.values) - 1)]


def test_get_fetches_once():
    f = Counter([[1, 2]])
    c = CachedValue(f)
    assert c.get() == [1, 2]
    assert c.get() == [1, 2]
    assert f.calls == 1
    assert c.is_loading is False


def test_mutate_keeps_optimistic_without_revalidate():
    c = CachedValue(Counter([[1]]))
    c.revalidate()
    out = c.mutate(lambda: "ok", optimistic_update=lambda d: d + [2], should_revalidate_after=False)
    assert out == "ok"
    assert c.data == [1, 2]


def test_mutate_revalidates_after_success():
    f = Counter([[1], [1, 9]])
    c = CachedValue(f)
    c.revalidate()
    c.mutate(lambda: True, optimistic_update=lambda d: d + [2])
    assert c.data == [1, 9]
    assert f.calls == 2


def test_optimistic_applied_before_update():
    c = CachedValue(Counter([[1]]))
    c.revalidate()
    seen = []
    c.mutate(lambda: seen.append(list(c.data)), optimistic_update=lambda d: d + [2], should_revalidate_after=False)
    assert seen == [[1, 2]]


def test_rollback_on_error():
    f = Counter([[1]])
    c = CachedValue(f)
    c.revalidate()

    def fail():
        raise RuntimeError("remote failed")

    with pytest.raises(RuntimeError):
        c.mutate(fail, optimistic_update=lambda d: d + [2], should_revalidate_after=False)
    assert c.data == [1]
    assert f.calls == 1


def test_error_with_revalidate_still_raises_original():
    def fetch():
        if fetch.n:
            raise ConnectionError("offline")
        fetch.n += 1
        return [1]

    fetch.n = 0
    c = CachedValue(fetch)
    c.revalidate()

    def fail():
        raise RuntimeError("remote failed")

    with pytest.raises(RuntimeError, match="remote failed"):
        c.mutate(fail, optimistic_update=lambda d: d + [2])
    assert c.data == [1]


def test_custom_rollback():
    c = CachedValue(Counter([[1]]))
    c.revalidate()

    def fail():
        raise RuntimeError("x")

    with pytest.raises(RuntimeError):
        c.mutate(
            fail,
            optimistic_update=lambda d: d + [2],
            should_revalidate_after=False,
            rollback_on_error=lambda d: d + [3],
        )
    assert c.data == [1, 2, 3]


def test_revalidate_failure_keeps_data():
    def fetch():
        raise ConnectionError("offline")

    c = CachedValue(fetch)
    c.data = [7]
    with pytest.raises(ConnectionError):
        c.revalidate()
    assert c.data == [7]
    assert c.is_loading is False


def test_reader_sees_optimistic_while_update_pending():
    """원격 호출 대기 중에도 reader 는 막히지 않고 예측값을 본다"""
    c = CachedValue(Counter([[1]]))
    c.revalidate()
    entered = threading.Event()
    release = threading.Event()

    def remote():
        entered.set()
        release.wait(timeout=5)
        return True

    writer = threading.Thread(
        target=lambda: c.mutate(remote, optimistic_update=lambda d: d + [2], should_revalidate_after=False)
    )
    writer.start()
    try:
        assert entered.wait(timeout=5)
        seen = []
        reader = threading.Thread(target=lambda: seen.append(c.get()))
        reader.start()
        reader.join(timeout=1)
        assert not reader.is_alive()
        assert seen == [[1, 2]]
    finally:
        release.set()
        writer.join(timeout=5)
    assert c.data == [1, 2]


def test_writers_are_serialized():
    f = Counter([[1]])
    c = CachedValue(f)
    c.revalidate()
    entered = threading.Event()
    release = threading.Event()

    def remote():
        entered.set()
        release.wait(timeout=5)

    first = threading.Thread(target=lambda: c.mutate(remote, should_revalidate_after=False))
    first.start()
    assert entered.wait(timeout=5)
    second = threading.Thread(target=c.revalidate)
    second.start()
    second.join(timeout=0.2)
    assert second.is_alive()
    release.set()
    first.join(timeout=5)
    second.join(timeout=5)
    assert f.calls == 2
