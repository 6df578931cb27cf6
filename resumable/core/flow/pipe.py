import logging
from typing import Any, TYPE_CHECKING

from resumable.core.ports.sink import Sink

if TYPE_CHECKING:
    from resumable.core.stream import ResumableStream


class PipeSession:
    """
    Forwards the data of a ResumableStream into a Sink while honoring the
    sink's backpressure.

    When `write()` reports saturation the session pauses the stream itself
    (never the wrapped source), so every subsequent notification waits in the
    stream's queue. The matching resume happens on the sink's "drain", or on
    its "close"/"error" so that a dead sink cannot leave the stream stalled
    forever.

    The session ends when the stream delivers "end" or "error" (the sink is
    ended in both cases) or when the sink closes or fails. On teardown every
    listener registered by the session, on both sides, is removed.
    """

    def __init__(self, stream: "ResumableStream", sink: Sink) -> None:
        self.stalling = False
        self.sink_closed = False
        self.active = False

        self._stream = stream
        self._sink = sink
        self._logger = logging.getLogger("core.flow.pipe")

    @property
    def sink(self) -> Sink:
        return self._sink

    def start(self) -> None:
        if self.active:
            return

        self.active = True
        self._stream.on("data", self._on_data)
        self._stream.on("error", self._on_error)
        self._stream.on("end", self._on_end)

        self._sink.on("drain", self._on_drain)
        self._sink.on("error", self._on_sink_closed)
        self._sink.on("close", self._on_sink_closed)

    def _on_data(self, payload: Any) -> None:
        if self.sink_closed or not self._sink.writable:
            return

        # a sink may fail synchronously inside write()
        if self._sink.write(payload) is False and not self.sink_closed:
            self.stalling = True
            self._stream.pause()

    def _on_drain(self) -> None:
        if self.stalling:
            self.stalling = False
            self._stream.resume()

    def _on_sink_closed(self, *_: Any) -> None:
        if self.sink_closed:
            return

        self.sink_closed = True
        self._logger.debug("Sink closed, pipe stops forwarding")
        self._teardown()

        if self.stalling:
            self.stalling = False
            self._stream.resume()

    def _on_error(self, exc: Any = None) -> None:
        self._logger.error(
            "Error in source stream, closing pipe",
            exc_info=exc if isinstance(exc, BaseException) else None
        )
        self._teardown()
        self._sink.end()

    def _on_end(self) -> None:
        self._teardown()
        self._sink.end()

    def _teardown(self) -> None:
        if not self.active:
            return

        self.active = False
        self._stream.remove_listener("data", self._on_data)
        self._stream.remove_listener("error", self._on_error)
        self._stream.remove_listener("end", self._on_end)

        self._sink.remove_listener("drain", self._on_drain)
        self._sink.remove_listener("error", self._on_sink_closed)
        self._sink.remove_listener("close", self._on_sink_closed)
