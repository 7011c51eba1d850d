import itertools
import logging
import threading
from collections import deque
from dataclasses import dataclass, field, asdict
from datetime import datetime
from enum import Enum

log = logging.getLogger("toasts")


class ToastStyle(str, Enum):
    ANIMATED = "animated"
    SUCCESS = "success"
    FAILURE = "failure"


@dataclass
class Toast:
    id: int
    style: ToastStyle
    title: str
    message: str | None = None
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    def to_dict(self) -> dict:
        d = asdict(self)
        d["style"] = self.style.value
        d["created_at"] = self.created_at.isoformat()
        d["updated_at"] = self.updated_at.isoformat()
        return d


class ToastCenter:
    """토스트 알림 보관소.

    show() 가 돌려준 Toast 핸들을 update() 에 다시 넘겨서 상태를 바꾼다.
    최근 history_size 개만 메모리에 남긴다.
    """

    def __init__(self, history_size: int = 100):
        self._items: deque[Toast] = deque(maxlen=history_size)
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def show(self, style: ToastStyle, title: str, message: str | None = None) -> Toast:
        with self._lock:
            t = Toast(id=next(self._ids), style=style, title=title, message=message)
            self._items.append(t)
        log.info("[toast-%s] %s %s", style.value, title, message or "")
        return t

    def update(
        self,
        toast: Toast,
        style: ToastStyle | None = None,
        title: str | None = None,
        message: str | None = None,
    ) -> Toast:
        with self._lock:
            if style is not None:
                toast.style = style
            if title is not None:
                toast.title = title
            if message is not None:
                toast.message = message
            toast.updated_at = datetime.utcnow()
        level = logging.WARNING if toast.style is ToastStyle.FAILURE else logging.INFO
        log.log(level, "[toast-%s] %s %s", toast.style.value, toast.title, toast.message or "")
        return toast

    def recent(self, limit: int = 50) -> list[Toast]:
        with self._lock:
            items = list(self._items)
        return items[-limit:]
