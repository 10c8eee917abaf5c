"""
Linear-RGB pixel buffer and its conversion to an image file.

The renderer only ever produces a ``Canvas``; turning it into 8-bit
pixels (optional tone mapping, gamma encoding) happens here via Pillow.
"""
from typing import List, Sequence

from PIL import Image

from raytrace.errors import ConfigurationError
from raytrace.logging_config import get_logger
from raytrace.tuples import BLACK, Color, clamp01

logger = get_logger(__name__)


class Canvas:
    """``height`` rows of ``width`` colors, addressed as (x, y) from the top left."""

    def __init__(self, width: int, height: int):
        if width < 1 or height < 1:
            raise ConfigurationError(f"canvas size must be positive, got {width}x{height}")
        self.width = width
        self.height = height
        self.rows: List[List[Color]] = [[BLACK] * width for _ in range(height)]

    def __repr__(self) -> str:
        return f"Canvas({self.width}x{self.height})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Canvas):
            return NotImplemented
        return self.rows == other.rows

    def pixel_at(self, x: int, y: int) -> Color:
        return self.rows[y][x]

    def write_pixel(self, x: int, y: int, c: Color) -> None:
        self.rows[y][x] = c

    def write_row(self, y: int, row: Sequence[Color]) -> None:
        if len(row) != self.width:
            raise ValueError(f"row {y} has {len(row)} pixels, expected {self.width}")
        self.rows[y] = list(row)


def tone_map_reinhard(c: Color) -> Color:
    """Reinhard tone mapping."""
    return (c[0] / (1.0 + c[0]), c[1] / (1.0 + c[1]), c[2] / (1.0 + c[2]))

def gamma_correct(c: Color, gamma: float = 2.2) -> Color:
    inv_gamma = 1.0 / gamma
    return (pow(clamp01(c[0]), inv_gamma), pow(clamp01(c[1]), inv_gamma), pow(clamp01(c[2]), inv_gamma))

def to_rgb8(c: Color, tone_map: bool = False, gamma: float = 2.2):
    if tone_map:
        c = tone_map_reinhard(c)
    if gamma != 1.0:
        c = gamma_correct(c, gamma)
    return (
        int(round(clamp01(c[0]) * 255)),
        int(round(clamp01(c[1]) * 255)),
        int(round(clamp01(c[2]) * 255)),
    )

def to_image(canvas: Canvas, tone_map: bool = False, gamma: float = 2.2) -> Image.Image:
    """Encode the canvas as an 8-bit RGB Pillow image."""
    img = Image.new("RGB", (canvas.width, canvas.height))
    pix = img.load()
    for y, row in enumerate(canvas.rows):
        for x, c in enumerate(row):
            pix[x, y] = to_rgb8(c, tone_map, gamma)
    return img

def save(canvas: Canvas, path: str, tone_map: bool = False, gamma: float = 2.2) -> None:
    to_image(canvas, tone_map, gamma).save(path)
    logger.info("Saved %s", path)
