import asyncio
import contextlib
import socket
import struct
from typing import AsyncIterator

from resumable.core.stream import ResumableStream


async def read_throttled(stream: ResumableStream, throttle: float = 0.005) -> bytes:
    """
    Consume `stream` one chunk at a time: every chunk pauses the stream, and
    the stream is resumed later from a timer. Fails if a chunk is delivered
    while the consumer considers the stream paused.
    """
    loop = asyncio.get_running_loop()
    done = loop.create_future()
    buffer = bytearray()
    pausing = True

    def resume_later():
        def resume():
            nonlocal pausing
            pausing = False
            stream.resume()

        loop.call_later(throttle, resume)

    def on_data(chunk):
        nonlocal pausing
        if pausing and not done.done():
            done.set_exception(AssertionError("received data while the stream is paused"))
            return

        buffer.extend(chunk)
        stream.pause()
        pausing = True
        resume_later()

    def on_end():
        if not done.done():
            done.set_result(bytes(buffer))

    def on_error(exc):
        if not done.done():
            done.set_exception(exc)

    stream.pause()
    stream.on("data", on_data)
    stream.on("end", on_end)
    stream.on("error", on_error)
    resume_later()

    return await asyncio.wait_for(done, timeout=10)


@contextlib.asynccontextmanager
async def serve_bytes(content: bytes) -> AsyncIterator[tuple[str, int]]:
    """Loopback server answering every connection with `content`, then EOF."""
    async def handle(reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
        writer.write(content)
        await writer.drain()
        writer.close()
        await writer.wait_closed()

    server = await asyncio.start_server(handle, host="127.0.0.1", port=0)
    try:
        yield server.sockets[0].getsockname()[:2]
    finally:
        server.close()
        await server.wait_closed()


@contextlib.asynccontextmanager
async def collect_bytes(gate: asyncio.Event | None = None) -> AsyncIterator[tuple[tuple[str, int], asyncio.Future[bytes]]]:
    """
    Loopback server reading one connection until EOF. When `gate` is given,
    the server does not start reading before it is set.
    """
    received: asyncio.Future[bytes] = asyncio.get_running_loop().create_future()

    async def handle(reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
        if gate is not None:
            await gate.wait()
        data = await reader.read()
        if not received.done():
            received.set_result(data)
        writer.close()
        await writer.wait_closed()

    server = await asyncio.start_server(handle, host="127.0.0.1", port=0)
    try:
        yield server.sockets[0].getsockname()[:2], received
    finally:
        server.close()
        await server.wait_closed()


@contextlib.asynccontextmanager
async def reset_on(gate: asyncio.Event) -> AsyncIterator[tuple[str, int]]:
    """
    Loopback server that never reads and resets each connection with a RST
    once `gate` is set.
    """
    async def handle(reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
        await gate.wait()
        sock = writer.get_extra_info("socket")
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_LINGER, struct.pack("ii", 1, 0))
        writer.transport.abort()

    server = await asyncio.start_server(handle, host="127.0.0.1", port=0)
    try:
        yield server.sockets[0].getsockname()[:2]
    finally:
        server.close()
        await server.wait_closed()
