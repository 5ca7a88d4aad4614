"""Render driver with integer progress reporting.

The Renderer owns the output pixel buffer and renders pixels in row-major
order, row 0 at the top. Completion is the whole percentage
``completed_pixels * 100 // total_pixels``; the pixels are rendered in spans
that end exactly where that value next grows, so the caller sees every value
the per-pixel count passes through, once each. The sequence is strictly
increasing, starts above 0 and ends at 100.

Example:
    >>> from pathtracer.core.renderer import Renderer
    >>> renderer = Renderer(world, camera)
    >>> pixels = renderer.render(on_progress=lambda pct: print(f"{pct}%"))
    >>> pixels.shape
    (camera.height, camera.width, 3)
"""

import logging
import time
from collections.abc import Callable, Generator
from typing import Optional

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

from pathtracer.core.integrator import quantize, radiance, to_display

logger = logging.getLogger(__name__)

vec3 = tm.vec3

# Callback receives the whole-percent completion, 0..100
ProgressCallback = Callable[[int], None]


@ti.data_oriented
class Renderer:
    """Renders a world through a camera into an 8-bit RGB buffer.

    Args:
        world: The World to render.
        camera: The Camera to render through; its params carry the image
            size, samples per pixel, max depth and background.
        light_emission: Whether light surfaces contribute their emission.
            Disabling it reproduces renders where lights only block rays.
    """

    def __init__(self, world, camera, light_emission: bool = True) -> None:
        params = camera.params
        self.world = world
        self.camera = camera
        self.width = params.width
        self.height = params.height
        self.samples_per_pixel = params.samples_per_pixel
        self.max_depth = params.max_depth
        self.use_sky = params.background is None
        self.light_emission = bool(light_emission)

        self._background = ti.Vector.field(3, dtype=ti.f32, shape=())
        if params.background is not None:
            self._background[None] = vec3(*params.background)

        # Row 0 is the top of the image
        self.pixels = ti.Vector.field(3, dtype=ti.u8, shape=(self.height, self.width))

        # Fields must be materialized on the thread that created them; a
        # RenderJob then only launches kernels from its worker thread
        self.pixels.fill(0)

    @property
    def total_pixels(self) -> int:
        return self.width * self.height

    @ti.kernel
    def _render_span(self, start: ti.i32, end: ti.i32):
        for i in range(start, end):
            row = i // self.width
            col = i % self.width
            total = vec3(0.0, 0.0, 0.0)
            for _ in range(self.samples_per_pixel):
                ray = self.camera.get_ray(col, row)
                total += radiance(
                    self.world,
                    ray,
                    self.max_depth,
                    self._background[None],
                    ti.static(int(self.use_sky)),
                    ti.static(int(self.light_emission)),
                )
            display = to_display(total / self.samples_per_pixel)
            for c in ti.static(range(3)):
                self.pixels[row, col][c] = quantize(display[c])

    def progress_marks(self) -> list[int]:
        """Pixel counts at which the whole-percent completion first grows.

        Each mark is the smallest count c whose ``c * 100 // total`` exceeds the
        value at the previous mark; a 1x200 image gives [2, 4, ..., 200] and a 10x2 image [1, 2, ..., 20].
        """
        total = self.total_pixels
        marks = []
        for percent in range(1, 101):
            # Smallest c with c * 100 >= percent * total
            mark = -(-percent * total // 100)
            if not marks or mark > marks[-1]:
                marks.append(mark)
        return marks

    def render_progressive(self) -> Generator[int, None, None]:
        """Render the image, yielding the completion percentage as it grows.

        Yields:
            Strictly increasing integers in [1, 100]; the last one is 100.
        """
        logger.info(
            "Rendering %dx%d, %d spp, max depth %d",
            self.width,
            self.height,
            self.samples_per_pixel,
            self.max_depth,
        )
        start = time.perf_counter()
        last_reported = 0
        completed = 0
        for mark in self.progress_marks():
            self._render_span(completed, mark)
            completed = mark
            percent = completed * 100 // self.total_pixels
            if percent > last_reported:
                last_reported = percent
                yield percent
        ti.sync()
        logger.info("Render finished in %.2fs", time.perf_counter() - start)

    def render(self, on_progress: Optional[ProgressCallback] = None) -> npt.NDArray[np.uint8]:
        """Render the image.

        Args:
            on_progress: Optional callback receiving each new whole-percent
                completion value.

        Returns:
            NumPy array of shape (height, width, 3) with dtype uint8.
        """
        for percent in self.render_progressive():
            if on_progress is not None:
                on_progress(percent)
        return self.to_numpy()

    def to_numpy(self) -> npt.NDArray[np.uint8]:
        """Copy the pixel buffer to a (height, width, 3) uint8 array."""
        return self.pixels.to_numpy().astype(np.uint8)

    def __repr__(self) -> str:
        return (
            f"Renderer(width={self.width}, height={self.height}, "
            f"samples_per_pixel={self.samples_per_pixel}, max_depth={self.max_depth})"
        )


def render(
    world,
    camera,
    on_progress: Optional[ProgressCallback] = None,
    light_emission: bool = True,
) -> npt.NDArray[np.uint8]:
    """Render a world through a camera on the calling thread."""
    return Renderer(world, camera, light_emission=light_emission).render(on_progress)
