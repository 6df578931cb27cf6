import logging
from collections.abc import Callable
from typing import Any

Listener = Callable[..., Any]


class EventEmitter:
    """
    A synchronous, in-process listener registry keyed by event name.

    Listeners are invoked in registration order, on the caller's stack, every
    time `emit()` is called for their event. The listener list is copied
    before dispatch, so a listener may add or remove listeners (including
    itself) without affecting the ongoing emission.

    Exceptions raised by a listener are not caught: they propagate to the
    code that called `emit()`. The only special case is the "error" event,
    which is logged instead of silently disappearing when nobody listens.
    """

    def __init__(self) -> None:
        self._listeners: dict[str, list[Listener]] = {}
        self._logger = logging.getLogger("core.helpers.emitter")

    def on(self, event: str, listener: Listener) -> Listener:
        self._listeners.setdefault(event, []).append(listener)
        return listener

    add_listener = on

    def once(self, event: str, listener: Listener) -> Listener:
        """Register a listener removed right before its first invocation."""
        def wrapper(*args: Any) -> Any:
            self.remove_listener(event, wrapper)
            return listener(*args)

        wrapper.listener = listener  # type: ignore[attr-defined]
        return self.on(event, wrapper)

    def remove_listener(self, event: str, listener: Listener) -> None:
        listeners = self._listeners.get(event)
        if not listeners:
            return

        for i in range(len(listeners) - 1, -1, -1):
            registered = listeners[i]
            if registered == listener or getattr(registered, "listener", None) == listener:
                del listeners[i]
                break

        if not listeners:
            del self._listeners[event]

    off = remove_listener

    def remove_all_listeners(self, event: str | None = None) -> None:
        if event is None:
            self._listeners.clear()
        else:
            self._listeners.pop(event, None)

    def listeners(self, event: str) -> list[Listener]:
        return [
            getattr(listener, "listener", listener)
            for listener in self._listeners.get(event, ())
        ]

    def listener_count(self, event: str) -> int:
        return len(self._listeners.get(event, ()))

    def emit(self, event: str, *args: Any) -> bool:
        """
        Invoke every listener registered for `event` with `args`.

        Returns True if at least one listener was called.
        """
        listeners = self._listeners.get(event)
        if not listeners:
            if event == "error":
                exc = args[0] if args else None
                self._logger.warning("Unhandled 'error' event", exc_info=exc)
            return False

        for listener in list(listeners):
            listener(*args)

        return True
