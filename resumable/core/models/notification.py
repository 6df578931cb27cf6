from dataclasses import dataclass
from typing import Any, ClassVar


@dataclass(frozen=True)
class Data:
    """
    A chunk of data produced by the source.
    The payload is opaque: it is never inspected or re-chunked.
    """
    payload: Any

    event: ClassVar[str] = "data"
    terminal: ClassVar[bool] = False

    @property
    def args(self) -> tuple[Any, ...]:
        return (self.payload,)


@dataclass(frozen=True)
class End:
    """
    End-of-stream. Terminal: nothing is delivered after it.
    """
    event: ClassVar[str] = "end"
    terminal: ClassVar[bool] = True

    @property
    def args(self) -> tuple[Any, ...]:
        return ()


@dataclass(frozen=True)
class Error:
    """
    Failure reported by the source. Terminal, like End.
    """
    exc: Any

    event: ClassVar[str] = "error"
    terminal: ClassVar[bool] = True

    @property
    def args(self) -> tuple[Any, ...]:
        return (self.exc,)


Notification = Data | End | Error
"""
One of the three notification kinds relayed from the source to the
listeners of a ResumableStream.
"""
