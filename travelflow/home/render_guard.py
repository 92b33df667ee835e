"""Render epochs for discarding deferred work that a newer render superseded.

Each full render calls ``begin_render()`` and passes the returned epoch to the
continuations it defers. A continuation runs only while its epoch is still
the current one; otherwise it returns without touching the page.
"""

import asyncio
from collections import deque
from typing import Callable, Optional


class RenderGenerationGuard:
    """Monotonic render counter, one per page controller."""

    def __init__(self):
        self._epoch = 0

    @property
    def current(self) -> int:
        return self._epoch

    def begin_render(self) -> int:
        self._epoch += 1
        return self._epoch

    def is_current(self, epoch: int) -> bool:
        return epoch == self._epoch

    def defer(self, scheduler, epoch: int, callback: Callable[[int], None]) -> None:
        """Schedule ``callback(epoch)`` for the next frame, dropped if stale by then."""

        def run_if_current():
            if not self.is_current(epoch):
                print(f"[RENDER] Skipping deferred work of stale render {epoch} (current {self._epoch})")
                return
            callback(epoch)

        scheduler.request_frame(run_if_current)


class FrameScheduler:
    """Queue of callbacks waiting for the next frame.

    ``run_pending()`` plays the role of the browser's animation frame: it runs
    everything queued before the call, in order.
    """

    def __init__(self):
        self._pending = deque()

    def request_frame(self, callback: Callable[[], None]) -> None:
        self._pending.append(callback)

    @property
    def pending(self) -> int:
        return len(self._pending)

    def run_pending(self) -> int:
        """Run the callbacks queued so far. Returns how many ran."""
        count = len(self._pending)
        for _ in range(count):
            callback = self._pending.popleft()
            callback()
        return count


class AsyncioFrameScheduler:
    """Runs deferred callbacks on the next iteration of the asyncio event loop."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self.loop = loop

    def request_frame(self, callback: Callable[[], None]) -> None:
        loop = self.loop or asyncio.get_running_loop()
        loop.call_soon(callback)
