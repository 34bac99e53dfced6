"""
Guillotine rectangle packer.

Places textures tallest-first into a fixed square, tracking unoccupied space as
a flat list of non-overlapping rects. Free spaces are scanned newest-first so
small fragments left by earlier splits get filled before the large remainder.

Each placement consumes a padded footprint (texture + 2*expand + border) at the
top-left of the chosen space:

    |-------|-----------|
    |  box  | new space |
    |_______|___________|
    | shrunk space      |
    |___________________|

The exact split shapes decide where later textures land, so placements are
reproducible across runs and across implementations of the same tool.
"""

import logging
from typing import List, Optional

from atlaspack.exceptions import InsufficientSpace, NoFitFound, OversizedTexture
from atlaspack.packing.rect import Rect, StagedTexture

logger = logging.getLogger(__name__)

DEFAULT_UTILIZATION = 0.85  # packer rarely fills more than this of the atlas


def padded_footprint(texture: StagedTexture, expand: int = 0, border: int = 0) -> Rect:
    """Return the atlas region a placed texture consumes, including expand and border margins."""
    padding = expand * 2 + border
    r = texture.rect
    return Rect(r.x - expand, r.y - expand, r.w + padding, r.h + padding)


class RectanglePacker:
    """Owns the free-space list for a single packing run."""

    def __init__(self, size: int, expand: int = 0, border: int = 0):
        self.size = size
        self.expand = expand
        self.border = border
        self.padding = expand * 2 + border
        self.spaces: List[Rect] = [Rect(0, 0, size, size)]

    def find_space(self, w: int, h: int) -> Optional[int]:
        """Index of the first space (scanning back to front) that fits a padded w x h box."""
        for i in range(len(self.spaces) - 1, -1, -1):
            space = self.spaces[i]
            if w <= space.w and h <= space.h:
                return i
        return None

    def place(self, texture: StagedTexture) -> None:
        """Position one texture and split the space it lands in. Raises NoFitFound."""
        rect = texture.rect
        w = rect.w + self.padding
        h = rect.h + self.padding

        i = self.find_space(w, h)
        if i is None:
            raise NoFitFound(texture.name, rect.w, rect.h)

        space = self.spaces[i]
        rect.x = space.x + self.expand
        rect.y = space.y + self.expand

        if w == space.w and h == space.h:
            # perfect fit, swap-remove
            last = self.spaces.pop()
            if i < len(self.spaces):
                self.spaces[i] = last
        elif h == space.h:
            space.x += w
            space.w -= w
        elif w == space.w:
            space.y += h
            space.h -= h
        else:
            self.spaces.append(Rect(space.x + w, space.y, space.w - w, h))
            space.y += h
            space.h -= h

        logger.debug(f"Placed '{texture.name}' {rect.w}x{rect.h} at ({rect.x}, {rect.y}), {len(self.spaces)} free spaces")


def check_capacity(
    textures: List[StagedTexture],
    atlas_size: int,
    expand: int = 0,
    border: int = 0,
    utilization: float = DEFAULT_UTILIZATION
) -> int:
    """
    Validate that textures can plausibly fit before placing anything.

    Returns:
        Total padded area of all textures

    Raises:
        OversizedTexture: A single padded texture is wider or taller than the atlas
        InsufficientSpace: Total padded area exceeds atlas_size² * utilization
    """
    padding = expand * 2 + border
    area = 0
    max_w = 0
    max_h = 0
    for texture in textures:
        w = texture.rect.w + padding
        h = texture.rect.h + padding
        area += w * h
        max_w = max(max_w, w)
        max_h = max(max_h, h)

    if max_w > atlas_size or max_h > atlas_size:
        raise OversizedTexture(max_w, max_h, atlas_size)
    if area > atlas_size * atlas_size * utilization:
        raise InsufficientSpace(area, atlas_size, utilization)
    return area


def pack(
    textures: List[StagedTexture],
    atlas_size: int,
    expand: int = 0,
    border: int = 0,
    utilization: float = DEFAULT_UTILIZATION
) -> List[StagedTexture]:
    """
    Pack textures into a square atlas, mutating them in place.

    The list is sorted tallest-first (stable) and every rect gets its final
    x/y. There is no backtracking: the first texture that finds no space
    fails the whole run and earlier placements should be discarded.

    Args:
        textures: Textures to place; sorted and updated in place
        atlas_size: Side length of the square atlas
        expand: Edge pixels replicated around each texture
        border: Empty gap added after each texture
        utilization: Fraction of the atlas area the inputs may claim

    Returns:
        The same list, now in final packing order

    Raises:
        OversizedTexture, InsufficientSpace, NoFitFound
    """
    area = check_capacity(textures, atlas_size, expand, border, utilization)

    textures.sort(key=lambda t: t.rect.h, reverse=True)

    packer = RectanglePacker(atlas_size, expand, border)
    for texture in textures:
        packer.place(texture)

    logger.info(
        f"Packed {len(textures)} textures into {atlas_size}x{atlas_size} atlas "
        f"({area / (atlas_size * atlas_size):.1%} of area used)"
    )
    return textures
