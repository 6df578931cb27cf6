import logging
from collections import deque
from collections.abc import Callable
from typing import Any

from resumable.core.flow.counter import PauseCounter
from resumable.core.models.notification import Data, End, Error, Notification
from resumable.core.ports.source import Source


class NotificationRelay:
    """
    Moves notifications from a Source to a delivery callback, holding them
    back while the PauseCounter is paused.

    A notification is queued when the counter is paused OR when older
    notifications are still waiting in the queue. The second condition keeps
    arrival order intact while a resume is in progress: a notification that
    arrives during drainage lines up behind the ones being replayed.

    Drainage pops one notification at a time and re-checks the counter before
    each pop, since a listener reacting to a replayed notification may pause
    again. Whatever is left stays queued for the next release.

    The first terminal notification (End or Error) received from the source
    closes the intake: anything the source emits afterwards is discarded.
    `closed` becomes True once that terminal notification has actually been
    delivered.
    """

    def __init__(
        self,
        counter: PauseCounter,
        deliver: Callable[[Notification], None],
    ) -> None:
        self.queue: deque[Notification] = deque()
        self.closed = False

        self._counter = counter
        self._deliver = deliver
        self._terminated = False
        self._source: Source | None = None
        self._logger = logging.getLogger("core.flow.relay")

    def attach(self, source: Source) -> None:
        if self._source is not None:
            raise RuntimeError("Relay is already attached to a source")

        self._source = source
        source.on("data", self._on_data)
        source.on("end", self._on_end)
        source.on("error", self._on_error)

    def detach(self) -> None:
        source = self._source
        if source is None:
            return

        source.remove_listener("data", self._on_data)
        source.remove_listener("end", self._on_end)
        source.remove_listener("error", self._on_error)
        self._source = None

    def push(self, notification: Notification) -> None:
        if self._terminated:
            self._logger.debug(f"Discarding {notification.event!r} received after end of stream")
            return

        if notification.terminal:
            self._terminated = True

        if self._counter.paused or self.queue:
            self.queue.append(notification)
        else:
            self._emit(notification)

    def drain(self) -> None:
        while not self._counter.paused and self.queue:
            self._emit(self.queue.popleft())

    def _emit(self, notification: Notification) -> None:
        if notification.terminal:
            self.closed = True
        self._deliver(notification)

    def _on_data(self, payload: Any) -> None:
        self.push(Data(payload))

    def _on_end(self, *_: Any) -> None:
        self.push(End())

    def _on_error(self, exc: Any = None) -> None:
        self.push(Error(exc))
