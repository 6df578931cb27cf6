import asyncio
import os

import pytest

from tests.helpers import read_throttled, serve_bytes

from resumable.bootstrap import deps
from resumable.core.stream import ResumableStream
from resumable.infra.sources.reader import ReaderSource


@pytest.fixture
def content():
    return os.urandom(200_000)


@pytest.mark.it
@pytest.mark.asyncio
async def test_throttled_resumable_socket_stream(content):
    async with serve_bytes(content) as (host, port):
        reader, writer = await asyncio.open_connection(host, port)
        stream = ResumableStream(ReaderSource(reader, writer, chunk_size=16 * 1024))

        assert await read_throttled(stream) == content

        writer.close()
        await writer.wait_closed()


@pytest.mark.it
@pytest.mark.asyncio
async def test_reader_source_forwards_transport_info(content):
    async with serve_bytes(content) as (host, port):
        reader, writer = await asyncio.open_connection(host, port)
        source = ReaderSource(reader, writer)
        stream = ResumableStream(source)

        assert stream.get_extra_info("peername")[:2] == (host, port)
        assert "ReaderSource" in repr(source)

        closed = asyncio.get_running_loop().create_future()
        source.on("close", lambda: closed.set_result(None))
        stream.destroy()
        await asyncio.wait_for(closed, timeout=5)

        assert source.destroyed is True
        assert writer.is_closing()


@pytest.mark.it
@pytest.mark.asyncio
async def test_reader_source_without_writer_has_no_extra_info():
    reader = asyncio.StreamReader()
    reader.feed_data(b"abc")
    reader.feed_eof()

    source = ReaderSource(reader)
    chunks = []
    done = asyncio.get_running_loop().create_future()
    source.on("data", chunks.append)
    source.on("end", lambda: done.set_result(None))

    await asyncio.wait_for(done, timeout=5)

    assert chunks == [b"abc"]
    assert source.get_extra_info("peername", "n/a") == "n/a"


@pytest.mark.it
@pytest.mark.asyncio
async def test_reader_failure_is_delivered_as_error(clean_settings):
    reader = asyncio.StreamReader()
    reader.feed_data(b"partial")
    boom = ConnectionResetError("reset by peer")

    stream = deps.wrap_reader(reader)
    received = []
    done = asyncio.get_running_loop().create_future()
    stream.on("data", lambda chunk: received.append(("data", chunk)))
    stream.on("error", lambda exc: (received.append(("error", exc)), done.set_result(None)))

    await asyncio.sleep(0.01)
    reader.set_exception(boom)
    await asyncio.wait_for(done, timeout=5)

    assert received == [("data", b"partial"), ("error", boom)]
    assert stream.closed is True


@pytest.mark.it
@pytest.mark.asyncio
async def test_paused_adapter_buffers_while_source_keeps_flowing(clean_settings, content):
    async with serve_bytes(content) as (host, port):
        stream, sink = await deps.open_connection(host, port)
        source = stream.source_handle()
        chunks = []
        done = asyncio.get_running_loop().create_future()
        stream.on("data", chunks.append)
        stream.on("end", lambda: done.set_result(None))

        stream.pause()
        while not source.closed:
            await asyncio.sleep(0.005)

        # the whole response sits in the adapter's queue
        assert chunks == []
        assert stream.pending > 0
        assert source.is_paused is False

        stream.resume()
        assert done.done()
        assert b"".join(chunks) == content

        closed = asyncio.get_running_loop().create_future()
        sink.on("close", lambda: closed.set_result(None))
        sink.end()
        await asyncio.wait_for(closed, timeout=5)
