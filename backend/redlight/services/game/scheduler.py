import heapq
import itertools
import time
from typing import Callable, Dict, List, Tuple


class TimerHandle:
    """Cancellation token for one scheduled callback or interval."""

    def __init__(self):
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class SocketIOScheduler:
    """Runs timers as Socket.IO background tasks.

    Cancellation is checked after each sleep; a callback that has already
    started runs to completion.
    """

    def __init__(self, socketio):
        self._socketio = socketio

    def now_ms(self) -> int:
        return int(time.time() * 1000)

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> TimerHandle:
        handle = TimerHandle()

        def _worker():
            self._socketio.sleep(delay_ms / 1000.0)
            if not handle.cancelled:
                callback()

        self._socketio.start_background_task(_worker)
        return handle

    def call_every(self, interval_ms: int, callback: Callable[[], None]) -> TimerHandle:
        handle = TimerHandle()

        def _worker():
            while True:
                self._socketio.sleep(interval_ms / 1000.0)
                if handle.cancelled:
                    return
                callback()

        self._socketio.start_background_task(_worker)
        return handle


class ManualScheduler:
    """Virtual millisecond clock that only moves when advanced.

    Callbacks due at the same instant fire in the order they were
    scheduled. Intervals are re-armed before their callback runs.
    """

    def __init__(self, start_ms: int = 0):
        self._now = start_ms
        self._seq = itertools.count()
        self._queue: List[Tuple[int, int, TimerHandle, Callable[[], None], int]] = []

    def now_ms(self) -> int:
        return self._now

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> TimerHandle:
        handle = TimerHandle()
        self._push(self._now + delay_ms, handle, callback, 0)
        return handle

    def call_every(self, interval_ms: int, callback: Callable[[], None]) -> TimerHandle:
        handle = TimerHandle()
        self._push(self._now + interval_ms, handle, callback, interval_ms)
        return handle

    def _push(self, due, handle, callback, interval):
        heapq.heappush(self._queue, (due, next(self._seq), handle, callback, interval))

    def advance(self, ms: int) -> None:
        target = self._now + ms
        while self._queue and self._queue[0][0] <= target:
            due, _, handle, callback, interval = heapq.heappop(self._queue)
            if handle.cancelled:
                continue
            self._now = due
            if interval:
                self._push(due + interval, handle, callback, interval)
            callback()
        self._now = target

    def pending(self) -> int:
        return sum(1 for entry in self._queue if not entry[2].cancelled)


class TimerGroup:
    """Named timers owned by one session, guarded by an epoch counter.

    ``cancel_all`` cancels every outstanding handle and advances the epoch,
    so a callback armed under an older epoch does nothing even if its
    cancellation raced with its firing.
    """

    def __init__(self, scheduler, lock):
        self._scheduler = scheduler
        self._lock = lock
        self._handles: Dict[str, TimerHandle] = {}
        self.epoch = 0

    def call_later(self, name: str, delay_ms: int, callback: Callable[[], None]) -> None:
        self.cancel(name)
        epoch = self.epoch
        armed: List[TimerHandle] = []

        def _fire():
            with self._lock:
                if epoch != self.epoch or armed[0].cancelled:
                    return
                if self._handles.get(name) is armed[0]:
                    del self._handles[name]
                callback()

        armed.append(self._scheduler.call_later(delay_ms, _fire))
        self._handles[name] = armed[0]

    def call_every(self, name: str, interval_ms: int, callback: Callable[[], None]) -> None:
        self.cancel(name)
        epoch = self.epoch
        armed: List[TimerHandle] = []

        def _fire():
            with self._lock:
                if epoch != self.epoch or armed[0].cancelled:
                    return
                callback()

        armed.append(self._scheduler.call_every(interval_ms, _fire))
        self._handles[name] = armed[0]

    def cancel(self, name: str) -> None:
        handle = self._handles.pop(name, None)
        if handle:
            handle.cancel()

    def cancel_all(self) -> None:
        self.epoch += 1
        for handle in self._handles.values():
            handle.cancel()
        self._handles.clear()

    def active(self) -> List[str]:
        return sorted(self._handles)
