from typing import Protocol, Any, Callable


class Source(Protocol):
    """
    Defines the push-based producer wrapped by a ResumableStream.

    A source invokes its listeners with three notifications:
    - "data"  (payload)
    - "end"   ()
    - "error" (exception)

    Sources also expose native pause/resume/pipe controls. They are part of
    the contract only because real producers have them: ResumableStream never
    calls them, as they are not reliable when nested or repeated.
    """

    def on(self, event: str, listener: Callable[..., Any]) -> Any:
        """Register a listener for the given notification."""

    def remove_listener(self, event: str, listener: Callable[..., Any]) -> None:
        """Unregister a listener previously passed to `on()`."""

    def pause(self) -> None:
        """Native pause. Not used by ResumableStream."""

    def resume(self) -> None:
        """Native resume. Not used by ResumableStream."""

    def destroy(self) -> None:
        """
        Stop producing and release the underlying resource. A source that
        had not finished yet reports "error" before closing.
        """

    def get_extra_info(self, name: str, default: Any = None) -> Any:
        """Return transport or file metadata, mirroring asyncio transports."""
