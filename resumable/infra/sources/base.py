import asyncio
import logging
from typing import Any

from resumable.core.exception import SourceDestroyedError
from resumable.core.helpers.emitter import EventEmitter
from resumable.core.ports.sink import Sink


class PushSource(EventEmitter):
    """
    Base class for push-based byte sources driven by an asyncio pump task.

    The pump repeatedly awaits `_read_chunk()` and emits:
    - "data" with each non-empty chunk,
    - "end" when `_read_chunk()` returns an empty chunk,
    - "error" when reading raises,
    followed in every case by "close" once resources are released.

    The pump task is created in the constructor, so a running event loop is
    required. It first runs on the next loop iteration: listeners registered
    right after construction observe every notification.

    The native `pause()`/`resume()` are plain on/off switches checked between
    two reads. They are not counted, which is exactly why ResumableStream does
    not rely on them.
    """

    def __init__(self, chunk_size: int = 64 * 1024) -> None:
        super().__init__()
        if chunk_size <= 0:
            raise ValueError("chunk_size must be strictly positive")

        self.chunk_size = chunk_size
        self.bytes_read = 0
        self.destroyed = False
        self.closed = False
        self._destroy_error: BaseException | None = None

        self._flowing = asyncio.Event()
        self._flowing.set()
        self._logger = logging.getLogger("infra.sources")
        self._task = asyncio.get_running_loop().create_task(self._pump())
        self._task.add_done_callback(self._on_pump_done)

    @property
    def is_paused(self) -> bool:
        return not self._flowing.is_set()

    def pause(self) -> None:
        self._flowing.clear()

    def resume(self) -> None:
        self._flowing.set()

    def pipe(self, sink: Sink) -> Sink:
        """
        Native pipe driven by the native pause/resume. Kept for parity with
        real producers; ResumableStream replaces it with `pipe_to()`.
        """
        def on_data(payload: Any) -> None:
            if sink.writable and sink.write(payload) is False:
                self.pause()

        self.on("data", on_data)
        self.on("end", lambda: sink.end())
        sink.on("drain", self.resume)
        return sink

    def destroy(self, exc: BaseException | None = None) -> None:
        """
        Stop the pump and release the underlying resource.

        A source destroyed before it closed reports "error" with `exc`, or a
        SourceDestroyedError when none is given, then "close". Consumers and
        pipes therefore always see a terminal notification.
        """
        if self.destroyed:
            return

        self.destroyed = True
        self._destroy_error = exc or SourceDestroyedError("Source destroyed")
        self._task.cancel()

    def get_extra_info(self, name: str, default: Any = None) -> Any:
        return default

    async def _open(self) -> None:
        pass

    async def _read_chunk(self) -> bytes:
        raise NotImplementedError

    async def _release(self) -> None:
        pass

    async def _pump(self) -> None:
        try:
            failure = await self._produce()
        except asyncio.CancelledError:
            await self._release()
            self._abort()
            raise
        except BaseException:
            await self._release()
            self._close()
            raise

        await self._release()
        if failure is None:
            self.emit("end")
        else:
            self._logger.debug(f"Read failed: {failure!r}")
            self.emit("error", failure)
        self._close()

    async def _produce(self) -> Exception | None:
        try:
            await self._open()
        except Exception as exc:
            return exc

        while True:
            await self._flowing.wait()
            try:
                chunk = await self._read_chunk()
            except Exception as exc:
                return exc

            if not chunk:
                return None

            self.bytes_read += len(chunk)
            self.emit("data", chunk)

    def _abort(self) -> None:
        if self.closed:
            return

        if self.destroyed:
            self.emit("error", self._destroy_error)
        self._close()

    def _close(self) -> None:
        if not self.closed:
            self.closed = True
            self.emit("close")

    def _on_pump_done(self, task: asyncio.Task[None]) -> None:
        if task.cancelled():
            # possibly cancelled before its first step
            self._abort()
            return

        if ex := task.exception():
            self._logger.error(
                f"Error occurred in source pump {task.get_name()}: {str(ex)}",
                exc_info=ex
            )
