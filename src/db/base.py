import threading
import time
from datetime import datetime

from sqlalchemy.orm import DeclarativeBase

ID_WIDTH = 20


class Base(DeclarativeBase):
    pass


class IdGenerator:
    """Process-wide source of entity identifiers.

    Ids are zero-padded decimal strings seeded from the wall clock in
    nanoseconds. Each call returns a value strictly greater than the previous
    one, so ids are unique, sort in creation order and are never reused.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._last = 0

    def __call__(self) -> str:
        with self._lock:
            self._last = max(time.time_ns(), self._last + 1)
            return str(self._last).zfill(ID_WIDTH)


generate_id = IdGenerator()


def utcnow() -> datetime:
    return datetime.utcnow().replace(tzinfo=None)
