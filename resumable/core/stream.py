import logging
from typing import Any

from resumable.core.exception import PipeActiveError, StreamUsageError
from resumable.core.flow.counter import PauseCounter
from resumable.core.flow.pipe import PipeSession
from resumable.core.flow.relay import NotificationRelay
from resumable.core.helpers.emitter import EventEmitter, Listener
from resumable.core.models.notification import Notification
from resumable.core.ports.sink import Sink
from resumable.core.ports.source import Source


class ResumableStream:
    """
    Flow-control adapter over a push-based Source.

    The adapter relays the source's "data", "end" and "error" notifications
    to its own listeners. Unlike the source's native controls, `pause()` is
    reference-counted and never drops anything: while paused, notifications
    are queued and replayed in arrival order once every pause has been
    matched by a `resume()`. Replay happens synchronously inside the final
    `resume()` call, so listeners must be registered before resuming.

    Listeners live on an emitter owned by the adapter. Subscribing here is
    never visible on the source, and several adapters can wrap the same
    source independently.

    Besides the flow-control surface, the adapter forwards a fixed set of
    source capabilities: `destroy()` and `get_extra_info()`. The native
    `pipe()` is disabled in favor of `pipe_to()`, which relies on the
    adapter's own pause mechanism to respect the sink's backpressure.
    """

    def __init__(self, source: Source) -> None:
        self._source = source
        self._events = EventEmitter()
        self._counter = PauseCounter(on_release=self._release)
        self._relay = NotificationRelay(self._counter, deliver=self._deliver)
        self._pipe: PipeSession | None = None
        self._logger = logging.getLogger("core.stream")

        self._relay.attach(source)

    @property
    def pause_depth(self) -> int:
        return self._counter.depth

    @property
    def paused(self) -> bool:
        return self._counter.paused

    @property
    def pending(self) -> int:
        """Number of notifications waiting for the stream to be resumed."""
        return len(self._relay.queue)

    @property
    def closed(self) -> bool:
        """True once "end" or "error" has been delivered to listeners."""
        return self._relay.closed

    @property
    def piping(self) -> bool:
        return self._pipe is not None and self._pipe.active

    def pause(self) -> None:
        """
        Hold back delivery until a matching `resume()`.

        Can be called any number of times; the source keeps producing and
        everything it emits is queued.
        """
        self._counter.pause()

    def resume(self) -> None:
        """
        Release one pause. When the last pause is released, queued
        notifications are delivered before this call returns.

        Resuming a stream that is not paused is logged as a usage error and
        has no effect.
        """
        self._counter.resume()

    def pipe_to(self, sink: Sink) -> PipeSession:
        """
        Forward every data payload into `sink`, pausing while the sink is
        saturated. The sink is ended when this stream ends or fails.

        Only one pipe may be active at a time. Piping a stream that has
        already ended or failed ends the sink right away and returns an
        inactive session.
        """
        if self.piping:
            raise PipeActiveError("Stream is already piped to another sink")

        session = PipeSession(self, sink)
        if self.closed:
            self._logger.debug(f"Stream already closed, ending {sink!r}")
            sink.end()
            return session

        self._pipe = session
        session.start()

        self._logger.debug(f"Pipe started towards {sink!r}")
        return session

    def pipe(self, *_: Any, **__: Any) -> None:
        raise StreamUsageError("Native pipe() is disabled on ResumableStream, use pipe_to()")

    def source_handle(self) -> Source:
        """Return the wrapped source, for identity and diagnostics only."""
        return self._source

    def destroy(self, *args: Any, **kwargs: Any) -> Any:
        return self._source.destroy(*args, **kwargs)

    def get_extra_info(self, name: str, default: Any = None) -> Any:
        return self._source.get_extra_info(name, default)

    def on(self, event: str, listener: Listener) -> "ResumableStream":
        self._events.on(event, listener)
        return self

    add_listener = on

    def once(self, event: str, listener: Listener) -> "ResumableStream":
        self._events.once(event, listener)
        return self

    def remove_listener(self, event: str, listener: Listener) -> "ResumableStream":
        self._events.remove_listener(event, listener)
        return self

    off = remove_listener

    def remove_all_listeners(self, event: str | None = None) -> "ResumableStream":
        self._events.remove_all_listeners(event)
        return self

    def listeners(self, event: str) -> list[Listener]:
        return self._events.listeners(event)

    def listener_count(self, event: str) -> int:
        return self._events.listener_count(event)

    def emit(self, event: str, *args: Any) -> bool:
        return self._events.emit(event, *args)

    def _deliver(self, notification: Notification) -> None:
        self._events.emit(notification.event, *notification.args)

    def _release(self) -> None:
        self._relay.drain()

    def __repr__(self) -> str:
        return (
            f"<ResumableStream source={self._source!r} depth={self.pause_depth} "
            f"pending={self.pending} closed={self.closed}>"
        )
