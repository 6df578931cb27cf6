import asyncio
import logging
from typing import Any

from resumable.core.exception import SinkClosedError
from resumable.core.helpers.emitter import EventEmitter


class WriterSink(EventEmitter):
    """
    Push-based sink over an asyncio.StreamWriter.

    `write()` hands the payload to the transport immediately and reports
    saturation once the transport's write buffer reaches the high-water mark.
    In that case a background task awaits `writer.drain()` and emits "drain"
    when the transport accepts data again.

    `end()` closes the writer in the background and emits "finish" then
    "close". A connection failure while draining or closing is reported on
    "error", followed by "close".
    """

    def __init__(
        self,
        writer: asyncio.StreamWriter,
        high_water_mark: int = 16 * 1024,
    ) -> None:
        super().__init__()
        self.high_water_mark = high_water_mark
        self.writable = True
        self.closed = False

        self._writer = writer
        self._writer.transport.set_write_buffer_limits(high=high_water_mark)
        self._loop = asyncio.get_running_loop()
        self._tasks: set[asyncio.Task[None]] = set()
        self._drain_task: asyncio.Task[None] | None = None
        self._logger = logging.getLogger("infra.sinks.writer")

    def write(self, payload: Any) -> bool:
        if not self.writable:
            self.emit("error", SinkClosedError("write after end"))
            return False

        if self._writer.is_closing():
            self._fail(ConnectionResetError("Connection lost"))
            return False

        self._writer.write(payload)

        if self._writer.transport.get_write_buffer_size() < self.high_water_mark:
            return True

        if self._drain_task is None:
            self._drain_task = self._spawn(self._drain())
        return False

    def end(self) -> None:
        if not self.writable:
            return

        self.writable = False
        self._spawn(self._finish())

    async def _drain(self) -> None:
        try:
            await self._writer.drain()
        except ConnectionError as exc:
            self._fail(exc)
            return
        finally:
            self._drain_task = None

        if not self.closed:
            self.emit("drain")

    async def _finish(self) -> None:
        try:
            if self._writer.can_write_eof():
                self._writer.write_eof()
            self._writer.close()
            await self._writer.wait_closed()
        except ConnectionError as exc:
            self._fail(exc)
            return

        self.emit("finish")
        self._close()

    def _fail(self, exc: BaseException) -> None:
        if self.closed:
            return

        self._logger.warning(f"Sink failed: {exc!r}")
        self.writable = False
        self.emit("error", exc)
        self._close()

    def _close(self) -> None:
        if not self.closed:
            self.closed = True
            self.emit("close")

    def _spawn(self, coro) -> asyncio.Task[None]:
        task = self._loop.create_task(coro)
        task.add_done_callback(self._tasks.discard)
        self._tasks.add(task)
        return task

    def __repr__(self) -> str:
        who = self._writer.get_extra_info("peername")
        return f"<WriterSink peer={who!r} closed={self.closed}>"
