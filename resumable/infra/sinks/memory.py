import logging
from collections.abc import Sized
from typing import Any

from resumable.core.exception import SinkClosedError
from resumable.core.helpers.emitter import EventEmitter


class MemorySink(EventEmitter):
    """
    In-memory sink with a high-water mark.

    Written payloads accumulate in a buffer until a consumer takes them with
    `read()`. `write()` returns False once the buffered size reaches the
    high-water mark; the next `read()` that empties the buffer then emits
    "drain". Sized payloads such as bytes or str count for their length,
    any other payload counts as a single record. Everything ever written is
    also kept in `chunks`, and joined by `getvalue()` for bytes or str.

    Writing after `end()` or `destroy()` does not raise: the payload is
    rejected and a SinkClosedError is emitted on "error".
    """

    def __init__(self, high_water_mark: int = 16 * 1024) -> None:
        super().__init__()
        self.high_water_mark = high_water_mark
        self.writable = True
        self.finished = False
        self.closed = False

        self.chunks: list[Any] = []
        self._buffer: list[Any] = []
        self._buffered = 0
        self._need_drain = False
        self._logger = logging.getLogger("infra.sinks.memory")

    @property
    def buffered(self) -> int:
        return self._buffered

    def write(self, payload: Any) -> bool:
        if not self.writable:
            self.emit("error", SinkClosedError("write after end"))
            return False

        self.chunks.append(payload)
        self._buffer.append(payload)
        self._buffered += len(payload) if isinstance(payload, Sized) else 1

        if self._buffered >= self.high_water_mark:
            self._need_drain = True
            return False

        return True

    def read(self) -> list[Any]:
        """Hand over the buffered payloads, emitting "drain" if needed."""
        chunks, self._buffer = self._buffer, []
        self._buffered = 0

        if self._need_drain and not self.closed:
            self._need_drain = False
            self.emit("drain")

        return chunks

    def end(self) -> None:
        if not self.writable:
            return

        self.writable = False
        self.finished = True
        self.emit("finish")
        self._close()

    def destroy(self, exc: BaseException | None = None) -> None:
        if self.closed:
            return

        self.writable = False
        if exc is not None:
            self._logger.debug(f"Sink destroyed: {exc!r}")
            self.emit("error", exc)
        self._close()

    def getvalue(self) -> Any:
        if not self.chunks:
            return b""

        empty = self.chunks[0][:0]
        return empty.join(self.chunks)

    def _close(self) -> None:
        if not self.closed:
            self.closed = True
            self.emit("close")
