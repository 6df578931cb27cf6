from typing import Protocol, Any, Callable


class Sink(Protocol):
    """
    Defines the push-based consumer accepted by `ResumableStream.pipe_to()`.

    A sink signals saturation by returning False from `write()` and later
    emits "drain" once it can accept data again. It emits "close" and/or
    "error" when it terminates on its own.
    """

    writable: bool
    """False once the sink has been ended or has failed."""

    def write(self, payload: Any) -> bool:
        """Accept a payload. Returns False when the sink is saturated."""

    def end(self) -> None:
        """Signal end-of-input. The sink finishes and then closes."""

    def on(self, event: str, listener: Callable[..., Any]) -> Any:
        """Register a listener for "drain", "close", "error" or "finish"."""

    def remove_listener(self, event: str, listener: Callable[..., Any]) -> None:
        """Unregister a listener previously passed to `on()`."""
