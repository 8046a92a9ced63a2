from __future__ import annotations

import logging
import threading
import uuid
from collections import OrderedDict
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Callable, Iterator

from .controller import ColorController

log = logging.getLogger(__name__)


@dataclass
class _Entry:
    controller: ColorController
    lock: threading.Lock = field(default_factory=threading.Lock)


class SessionStore:
    """One controller per browser session, least recently used evicted first.

    Controllers are not shared between sessions. Requests of the same session
    are serialized on the entry lock so the controller only ever sees one
    caller at a time.
    """

    def __init__(self, factory: Callable[[], ColorController], max_sessions: int = 1024) -> None:
        if max_sessions < 1:
            raise ValueError("max_sessions must be ≥ 1")
        self._factory = factory
        self._max = max_sessions
        self._entries: OrderedDict[str, _Entry] = OrderedDict()
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, sid: str) -> bool:
        return sid in self._entries

    @staticmethod
    def new_id() -> str:
        return uuid.uuid4().hex

    def _entry(self, sid: str) -> _Entry:
        with self._lock:
            entry = self._entries.get(sid)
            if entry is None:
                entry = _Entry(self._factory())
                self._entries[sid] = entry
                log.info("new color session %s (%d active)", sid[:8], len(self._entries))
                while len(self._entries) > self._max:
                    old, _ = self._entries.popitem(last=False)
                    log.info("evicted color session %s", old[:8])
            else:
                self._entries.move_to_end(sid)
            return entry

    @contextmanager
    def checkout(self, sid: str) -> Iterator[ColorController]:
        entry = self._entry(sid)
        with entry.lock:
            yield entry.controller

    def discard(self, sid: str) -> None:
        with self._lock:
            self._entries.pop(sid, None)
