"""Tick scheduler: calls GameSession.tick() at a fixed cadence while the game is being played."""

import threading
from contextlib import nullcontext
from typing import Callable, Optional

from room_logic.session import GameSession, Phase


class TickScheduler:
    def __init__(
        self,
        session: GameSession,
        interval: float = 1.0,
        on_tick: Optional[Callable[[GameSession], None]] = None,
        lock: Optional[threading.Lock] = None,
    ):
        if interval <= 0:
            raise ValueError(f"interval must be positive, got {interval}")
        self.session = session
        self.interval = interval
        self.on_tick = on_tick
        self.lock = lock
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive() and not self._stop.is_set()

    def start(self):
        """Start ticking. Does nothing if the loop is already running."""
        if self.running:
            return
        self._stop = threading.Event()
        self._thread = threading.Thread(
            target=self._loop,
            args=(self._stop,),
            name="escape-room-tick",
            daemon=True,
        )
        self._thread.start()

    def stop(self, timeout: Optional[float] = None):
        self._stop.set()
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout if timeout is not None else self.interval * 2 + 1)

    def join(self, timeout: Optional[float] = None):
        if self._thread is not None:
            self._thread.join(timeout)

    def _loop(self, stop: threading.Event):
        while not stop.wait(self.interval):
            guard = self.lock if self.lock is not None else nullcontext()
            with guard:
                # stop() may have been called while we waited for the lock
                if stop.is_set() or self.session.phase is not Phase.PLAYING:
                    break
                self.session.tick()
                if self.on_tick is not None:
                    self.on_tick(self.session)
                if self.session.phase is not Phase.PLAYING:
                    break
