import asyncio
import json
from functools import lru_cache
from pathlib import Path

from pydantic import ValidationError

from resumable.bootstrap.config.settings import StreamSettings
from resumable.core.helpers.utils import setup_logging
from resumable.core.stream import ResumableStream
from resumable.infra.sinks.writer import WriterSink
from resumable.infra.sources.file import FileSource
from resumable.infra.sources.reader import ReaderSource


@lru_cache
def get_settings() -> StreamSettings:
    try:
        return StreamSettings()
    except ValidationError as ex:
        msg = ["Configuration validation failed:"]
        errs = json.loads(ex.json())
        for err in errs:
            msg.append(f"  {'.'.join(str(loc) for loc in err['loc'])}: {err['msg']}")
        raise SystemExit("\n".join(msg))


def configure_logging() -> None:
    setup_logging(get_settings().log_level)


def open_file(path: str | Path) -> ResumableStream:
    source = FileSource(path, chunk_size=get_settings().chunk_size)
    return ResumableStream(source)


def wrap_reader(
    reader: asyncio.StreamReader,
    writer: asyncio.StreamWriter | None = None,
) -> ResumableStream:
    source = ReaderSource(reader, writer, chunk_size=get_settings().chunk_size)
    return ResumableStream(source)


async def open_connection(host: str, port: int, **kwargs) -> tuple[ResumableStream, WriterSink]:
    """
    Connect to `host:port` and return the incoming side as a ResumableStream
    and the outgoing side as a WriterSink.
    """
    reader, writer = await asyncio.open_connection(host, port, **kwargs)
    return wrap_reader(reader, writer), sink_for(writer)


def sink_for(writer: asyncio.StreamWriter) -> WriterSink:
    return WriterSink(writer, high_water_mark=get_settings().high_water_mark)
