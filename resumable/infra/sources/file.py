import asyncio
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Any, BinaryIO

from resumable.infra.sources.base import PushSource


class FileSource(PushSource):
    """
    Push-based reader over a file on disk.

    Blocking calls run one at a time on a single worker thread owned by the
    source. Cancelling the pump cannot stop a read already handed to that
    thread, so closing the file is queued behind it on the same worker.
    The file is opened lazily by the pump task and closed as soon as the
    source ends, fails, or is destroyed.
    """

    def __init__(self, path: str | Path, chunk_size: int = 64 * 1024) -> None:
        self.path = Path(path)
        self._file: BinaryIO | None = None
        self._pool = ThreadPoolExecutor(max_workers=1, thread_name_prefix="file-source")
        super().__init__(chunk_size=chunk_size)

    def get_extra_info(self, name: str, default: Any = None) -> Any:
        if name == "path":
            return self.path
        return default

    async def _open(self) -> None:
        loop = asyncio.get_running_loop()
        self._file = await loop.run_in_executor(self._pool, self.path.open, "rb")

    async def _read_chunk(self) -> bytes:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self._pool, self._file.read, self.chunk_size)

    async def _release(self) -> None:
        file, self._file = self._file, None
        if file is not None:
            loop = asyncio.get_running_loop()
            await loop.run_in_executor(self._pool, file.close)
        self._pool.shutdown(wait=False)

    def __repr__(self) -> str:
        return f"<FileSource path={str(self.path)!r} read={self.bytes_read}>"
