import logging
from collections.abc import Callable


class PauseCounter:
    """
    Reference-counted pause state.

    Every `pause()` must be matched by one `resume()`. Delivery is allowed
    again only when the last outstanding pause is released, at which point
    the `on_release` callback runs (the relay drains its queue from there).

    An unmatched `resume()` is a caller bug. It is reported on the logger
    with the caller's stack and otherwise ignored: the depth never goes
    below zero and `on_release` is not invoked.
    """

    def __init__(self, on_release: Callable[[], None]) -> None:
        self._depth = 0
        self._on_release = on_release
        self._logger = logging.getLogger("core.flow.counter")

    @property
    def depth(self) -> int:
        return self._depth

    @property
    def paused(self) -> bool:
        return self._depth > 0

    def pause(self) -> None:
        self._depth += 1

    def resume(self) -> bool:
        if self._depth == 0:
            self._logger.warning(
                "resume() called more times than pause()", stack_info=True
            )
            return False

        self._depth -= 1
        if self._depth == 0:
            self._on_release()

        return True
