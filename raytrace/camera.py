"""
Pinhole camera and the parallel render loop.

Rows are independent units of work. Each finished row is written into
its own slot of a canvas allocated up front, so the image does not
depend on how many workers there are or the order they finish in.
"""
import math
import time
from concurrent.futures import Executor, ProcessPoolExecutor, ThreadPoolExecutor, as_completed
from typing import Callable, List, Optional

from raytrace import shading
from raytrace.canvas import Canvas
from raytrace.config import BACKENDS, RENDER_BACKEND, RENDER_MAX_DEPTH, RENDER_THREADS
from raytrace.errors import CameraError, ConfigurationError
from raytrace.logging_config import get_logger
from raytrace.rays import Ray
from raytrace.shapes import bounds_of
from raytrace.transforms import Transform, identity
from raytrace.tuples import Color, norm, point, sub

logger = get_logger(__name__)

ProgressCallback = Callable[[int, int], None]


class Camera:
    """Maps canvas pixels to world-space rays.

    The canvas sits one unit in front of the eye; ``transform`` is the
    view transform (world to camera space), usually from
    ``transforms.view_transform``.
    """

    def __init__(self, hsize: int, vsize: int, field_of_view: float,
                 transform: Optional[Transform] = None):
        for name, size in (("hsize", hsize), ("vsize", vsize)):
            if not isinstance(size, int) or size < 1:
                raise CameraError(f"{name} must be a positive integer, got {size!r}")
        if not 0.0 < field_of_view < math.pi:
            raise CameraError(f"field_of_view must lie strictly between 0 and pi, got {field_of_view!r}")

        self.hsize = hsize
        self.vsize = vsize
        self.field_of_view = field_of_view
        self.transform = transform if transform is not None else identity()

        half_view = math.tan(field_of_view / 2.0)
        aspect = hsize / vsize
        if aspect >= 1:
            self.half_width = half_view
            self.half_height = half_view / aspect
        else:
            self.half_width = half_view * aspect
            self.half_height = half_view
        self.pixel_size = self.half_width * 2.0 / hsize

    def __repr__(self) -> str:
        return f"Camera({self.hsize}x{self.vsize}, fov={self.field_of_view:.4f})"

    def ray_for_pixel(self, px: int, py: int) -> Ray:
        """Ray from the eye through the centre of pixel (px, py)."""
        xoffset = (px + 0.5) * self.pixel_size
        yoffset = (py + 0.5) * self.pixel_size
        world_x = self.half_width - xoffset
        world_y = self.half_height - yoffset

        pixel = self.transform.apply_inverse(point(world_x, world_y, -1.0))
        origin = self.transform.apply_inverse(point(0.0, 0.0, 0.0))
        return Ray(origin, norm(sub(pixel, origin)))


def render_row(world, camera: Camera, y: int, max_depth: int = RENDER_MAX_DEPTH) -> List[Color]:
    return [shading.color_at(world, camera.ray_for_pixel(x, y), max_depth)
            for x in range(camera.hsize)]


# Per-process state for the process backend, set once by the pool initializer
_worker_scene = None

def _init_worker(world, camera: Camera, max_depth: int) -> None:
    global _worker_scene
    _worker_scene = (world, camera, max_depth)

def _render_row_in_worker(y: int) -> List[Color]:
    world, camera, max_depth = _worker_scene
    return render_row(world, camera, y, max_depth)


def _make_executor(backend: str, workers: int, world, camera: Camera, max_depth: int) -> Executor:
    if backend == "process":
        # The world is pickled once per worker rather than once per row
        return ProcessPoolExecutor(max_workers=workers, initializer=_init_worker,
                                   initargs=(world, camera, max_depth))
    return ThreadPoolExecutor(max_workers=workers, thread_name_prefix="render")

def render(world, camera: Camera, workers: Optional[int] = None, max_depth: Optional[int] = None,
           progress: Optional[ProgressCallback] = None, backend: Optional[str] = None) -> Canvas:
    """Render ``world`` as seen by ``camera`` on a bounded worker pool.

    ``progress(done_rows, total_rows)`` is called from the calling thread
    once per finished row. The ``process`` backend needs a picklable
    world and sidesteps the GIL; ``thread`` (the default) does not copy
    the scene.
    """
    workers = RENDER_THREADS if workers is None else workers
    max_depth = RENDER_MAX_DEPTH if max_depth is None else max_depth
    backend = (RENDER_BACKEND if backend is None else backend).lower()
    if not isinstance(workers, int) or workers < 1:
        raise ConfigurationError(f"workers must be a positive integer, got {workers!r}")
    if max_depth < 0:
        raise ConfigurationError(f"max_depth must not be negative, got {max_depth!r}")
    if backend not in BACKENDS:
        raise ConfigurationError(f"unknown render backend {backend!r}, expected one of {BACKENDS}")

    # Fill the lazily cached group bounds so workers only read the scene
    for top in world.shapes:
        bounds_of(top)

    canvas = Canvas(camera.hsize, camera.vsize)
    total = camera.vsize
    logger.info("Rendering %dx%d image with %d %s worker(s), max depth %d...",
                camera.hsize, camera.vsize, workers, backend, max_depth)
    start = time.perf_counter()

    step = max(1, total // 10)
    with _make_executor(backend, workers, world, camera, max_depth) as executor:
        if backend == "process":
            futures = {executor.submit(_render_row_in_worker, y): y for y in range(total)}
        else:
            futures = {executor.submit(render_row, world, camera, y, max_depth): y for y in range(total)}
        done = 0
        for future in as_completed(futures):
            canvas.write_row(futures[future], future.result())
            done += 1
            if progress is not None:
                progress(done, total)
            if done % step == 0:
                logger.debug("Progress: %d/%d (%d%%)", done, total, 100 * done // total)

    logger.info("Rendered %d rows in %.2fs", total, time.perf_counter() - start)
    return canvas
