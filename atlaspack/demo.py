"""
Random demo boxes for trying the packer without any input images.

Produces a few optional large boxes and a long tail of small ones, each filled
with a bright random hue.
"""

import colorsys
import random
from typing import List, Optional, Tuple

from atlaspack.packing.rect import SourceImage

DEMO_NAME = "box"

# (width, height), each included with 50% probability
OPTIONAL_BOXES = [(400, 80), (80, 400), (250, 250), (100, 250), (250, 100)]

# (width, height, base count, random extra); count = base + randrange(extra) + 1
BOX_RUNS = [
    (100, 100, 0, 20),
    (60, 60, 0, 10),
    (50, 50, 0, 30),
    (50, 20, 0, 40),
    (20, 50, 50, 50),
    (10, 10, 300, 200),
    (5, 5, 500, 500),
]


def hsla_to_rgba(h: float, s: float, l: float, a: float = 1.0) -> Tuple[int, int, int, int]:
    """Convert HSLA floats (0-1) to an RGBA tuple (0-255)."""
    r, g, b = colorsys.hls_to_rgb(h, l, s)
    return (int(r * 255), int(g * 255), int(b * 255), int(a * 255))


def solid_box(width: int, height: int, color: Tuple[int, int, int, int], name: str = DEMO_NAME) -> SourceImage:
    """A width x height source filled with one RGBA color."""
    return SourceImage(name=name, width=width, height=height, pixels=bytes(color) * (width * height))


def random_boxes(seed: Optional[int] = None) -> List[SourceImage]:
    """
    Generate the demo box set.

    Args:
        seed: Seed for reproducible sets (None = random each call)

    Returns:
        List of solid-colour boxes, all named "box"
    """
    rng = random.Random(seed)

    def box(w: int, h: int) -> SourceImage:
        return solid_box(w, h, hsla_to_rgba(rng.random(), 1.0, 0.7, 1.0))

    boxes = [box(w, h) for w, h in OPTIONAL_BOXES if rng.random() > 0.5]
    for w, h, base, extra in BOX_RUNS:
        count = base + rng.randrange(extra) + 1
        boxes.extend(box(w, h) for _ in range(count))
    return boxes
