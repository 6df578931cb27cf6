import asyncio
from typing import Any

from resumable.infra.sources.base import PushSource


class ReaderSource(PushSource):
    """
    Push-based source over an asyncio.StreamReader.

    This covers TCP connections, subprocess pipes and response bodies read
    from a socket. When the matching StreamWriter is given, transport
    metadata (peername, sockname, ssl_object, ...) is served from it and
    destroying the source closes the connection.
    """

    def __init__(
        self,
        reader: asyncio.StreamReader,
        writer: asyncio.StreamWriter | None = None,
        chunk_size: int = 64 * 1024,
    ) -> None:
        self._reader = reader
        self._writer = writer
        super().__init__(chunk_size=chunk_size)

    def get_extra_info(self, name: str, default: Any = None) -> Any:
        if self._writer is None:
            return default
        return self._writer.get_extra_info(name, default)

    async def _read_chunk(self) -> bytes:
        return await self._reader.read(self.chunk_size)

    async def _release(self) -> None:
        if self.destroyed and self._writer is not None:
            self._writer.close()

    def __repr__(self) -> str:
        who = self.get_extra_info("peername")
        return f"<ReaderSource peer={who!r} read={self.bytes_read}>"
