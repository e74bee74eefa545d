"""Event loop glue: dispatch, run effects, feed follow-up events back."""

from __future__ import annotations

import logging
import time
from collections import deque
from collections.abc import Callable

from . import events as ev
from .dispatch import dispatch
from .effects import EffectRunner
from .state import Session

logger = logging.getLogger(__name__)

STATUS_TIMEOUT_SECONDS = 3.0


class SessionController:
    """Own one ``Session`` and process events against it one at a time.

    Follow-up events produced by effects are queued and handled before
    ``handle`` returns, so callers always observe a settled session.
    """

    def __init__(
        self,
        session: Session,
        runner: EffectRunner,
        *,
        clock: Callable[[], float] = time.monotonic,
        status_timeout: float = STATUS_TIMEOUT_SECONDS,
    ) -> None:
        self.session = session
        self.runner = runner
        self.clock = clock
        self.status_timeout = status_timeout
        self._status = session.status
        self._status_since = clock()

    @property
    def finished(self) -> bool:
        return self.session.quit_requested

    def handle(self, event: ev.Event) -> None:
        pending: deque[ev.Event] = deque([event])
        while pending:
            current = pending.popleft()
            for effect in dispatch(self.session, current):
                logger.debug("running %s", type(effect).__name__)
                pending.extend(self.runner.run(effect))
        self._track_status()

    def press(self, key: str) -> None:
        self.handle(ev.KeyPressed(key))

    def poll_background(self, timeout_seconds: float = 0.0) -> bool:
        """Deliver finished background work and expire old status text.

        Returns ``True`` when the session changed and needs a redraw.
        """
        changed = False
        for event in self.runner.poll_content_search(timeout_seconds):
            self.handle(event)
            changed = True
        return self.expire_status() or changed

    def expire_status(self) -> bool:
        status = self.session.status
        if not status or self.clock() - self._status_since < self.status_timeout:
            return False
        self.handle(ev.StatusExpired(status))
        return True

    def _track_status(self) -> None:
        if self.session.status != self._status:
            self._status = self.session.status
            self._status_since = self.clock()


__all__ = ["STATUS_TIMEOUT_SECONDS", "SessionController"]
