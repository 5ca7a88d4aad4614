"""Background render job.

A RenderJob runs one render on a dedicated worker thread. Taichi fields must
be allocated and materialized on the thread that initialized Taichi, so the
Renderer is built on the caller's thread and the worker only launches its
kernels. Progress values travel to the caller through a single-producer,
single-consumer queue. The caller reads progress until the render reports
100, then joins to collect the pixels.

If building the Renderer or rendering fails, a failure marker is queued so a
caller reading progress is never left waiting, and ``join`` raises
RenderError chained to the original exception.

Example:
    >>> job = start_render(world, camera)
    >>> for percent in job.progress():
    ...     print(f"{percent}%")
    >>> pixels = job.join()
"""

import logging
import queue
import threading
from collections.abc import Iterator
from typing import Optional

import numpy as np
import numpy.typing as npt

from pathtracer.core.renderer import Renderer
from pathtracer.errors import RenderError

logger = logging.getLogger(__name__)

# Queued by the worker when the render raised
_FAILED = object()


class RenderJob:
    """A render running on a background thread.

    Args:
        world: The World to render.
        camera: The Camera to render through.
        light_emission: Whether light surfaces contribute their emission.
    """

    def __init__(self, world, camera, light_emission: bool = True) -> None:
        self._progress: queue.Queue = queue.Queue()
        self._result: Optional[npt.NDArray[np.uint8]] = None
        self._error: Optional[BaseException] = None
        self._renderer: Optional[Renderer] = None
        try:
            self._renderer = Renderer(world, camera, light_emission=light_emission)
        except Exception as exc:
            logger.error("Render setup failed: %s", exc)
            self._error = exc
        self._finished = False
        self._thread = threading.Thread(target=self._run, name="pathtracer-render", daemon=True)

    def start(self) -> "RenderJob":
        """Start the worker thread. Returns self for chaining."""
        self._thread.start()
        return self

    def _run(self) -> None:
        if self._renderer is None:
            self._progress.put(_FAILED)
            return
        try:
            self._result = self._renderer.render(on_progress=self._progress.put)
        except Exception as exc:
            logger.error("Render worker failed: %s", exc)
            self._error = exc
            self._progress.put(_FAILED)

    def progress(self) -> Iterator[int]:
        """Yield progress percentages until the render completes or fails.

        Values are strictly increasing and the last one is 100 for a successful
        render. On failure the iteration simply stops; call ``join`` to get
        the error.
        """
        while not self._finished:
            item = self._progress.get()
            if item is _FAILED:
                self._finished = True
                return
            if item >= 100:
                self._finished = True
            yield item

    def join(self, timeout: Optional[float] = None) -> npt.NDArray[np.uint8]:
        """Wait for the worker and return the rendered pixels.

        Args:
            timeout: Seconds to wait; None waits until the render ends.

        Returns:
            NumPy array of shape (height, width, 3) with dtype uint8.

        Raises:
            RenderError: If the worker failed, or it is still running when
                the timeout expires.
        """
        self._thread.join(timeout)
        if self._thread.is_alive():
            raise RenderError(f"Render did not finish within {timeout} seconds")
        if self._error is not None:
            raise RenderError(f"Render failed: {self._error}") from self._error
        return self._result

    @property
    def is_running(self) -> bool:
        return self._thread.is_alive()


def start_render(world, camera, light_emission: bool = True) -> RenderJob:
    """Start rendering on a worker thread and return the running job."""
    return RenderJob(world, camera, light_emission=light_emission).start()
