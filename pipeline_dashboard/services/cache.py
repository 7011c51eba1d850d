import logging
import threading
from typing import Callable, Generic, TypeVar

log = logging.getLogger("cache")

T = TypeVar("T")
R = TypeVar("R")


class CachedValue(Generic[T]):
    """fetcher 결과를 들고 있는 공유 캐시.

    mutate() 는 2단계 트랜잭션:
      1) optimistic_update 로 예측값을 즉시 반영
      2) 원격 호출이 실패하면 롤백 후 재발생, should_revalidate_after 면 마지막에 다시 읽음

    writer(mutate/revalidate) 는 _writer 로 직렬화하고, data 읽기/쓰기는 _lock 으로 짧게만 잡는다.
    원격 호출 중에도 reader 는 예측값을 본다.
    """

    def __init__(self, fetcher: Callable[[], T], name: str = "cache"):
        self._fetcher = fetcher
        self._writer = threading.RLock()
        self._lock = threading.Lock()
        self.name = name
        self._data: T | None = None
        self.is_loading = False

    @property
    def data(self) -> T | None:
        with self._lock:
            return self._data

    @data.setter
    def data(self, value: T | None) -> None:
        with self._lock:
            self._data = value

    def revalidate(self) -> T | None:
        with self._writer:
            self.is_loading = True
            try:
                fresh = self._fetcher()
            except Exception:
                log.exception("[%s] revalidate failed, keeping previous data", self.name)
                raise
            finally:
                self.is_loading = False
            self.data = fresh
            return fresh

    def get(self) -> T | None:
        current = self.data
        if current is not None:
            return current
        with self._writer:
            # 다른 writer 가 먼저 채웠을 수 있음
            current = self.data
            if current is not None:
                return current
            return self.revalidate()

    def mutate(
        self,
        update: Callable[[], R] | None = None,
        optimistic_update: Callable[[T | None], T | None] | None = None,
        should_revalidate_after: bool = True,
        rollback_on_error: bool | Callable[[T | None], T | None] = True,
    ) -> R | None:
        with self._writer:
            before = self.data
            try:
                if optimistic_update is not None:
                    self.data = optimistic_update(before)
                result = update() if update is not None else None
            except Exception:
                if callable(rollback_on_error):
                    self.data = rollback_on_error(self.data)
                elif optimistic_update is not None and rollback_on_error:
                    log.info("[%s] rolling back optimistic update", self.name)
                    self.data = before
                if should_revalidate_after:
                    self._revalidate_after_error()
                raise
            if should_revalidate_after:
                self.revalidate()
            return result

    def _revalidate_after_error(self) -> None:
        # 원래 에러를 올려야 하므로 재조회 실패는 로그만 남김 (revalidate 에서 기록)
        try:
            self.revalidate()
        except Exception:
            pass
