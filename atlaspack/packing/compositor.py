"""
Pixel staging and atlas compositing.

Source pixels are copied once into a single staging buffer at registration,
then blitted into the atlas after packing. With edge expansion each texture's
border pixels are repeated outward (clamp-to-edge) so linear filtering does not
bleed neighbouring sprites into each other.
"""

import logging
from typing import List

import numpy as np

from atlaspack.exceptions import DecodeFailure
from atlaspack.packing.rect import CHANNELS, AtlasBitmap, Rect, SourceImage, StagedTexture

logger = logging.getLogger(__name__)


class StagingBuffer:
    """Concatenated RGBA data of every registered texture, in insertion order."""

    def __init__(self):
        self.data = bytearray()

    def __len__(self) -> int:
        return len(self.data)

    def add(self, source: SourceImage) -> StagedTexture:
        """
        Append a source image's pixels and return its staged texture.

        Raises:
            DecodeFailure: If the source has no pixel data or the wrong byte count
        """
        if source.pixels is None:
            raise DecodeFailure(source.name)
        expected = source.width * source.height * CHANNELS
        if source.width <= 0 or source.height <= 0 or len(source.pixels) != expected:
            raise DecodeFailure(
                source.name,
                f"expected {expected} bytes for {source.width}x{source.height} RGBA, got {len(source.pixels)}"
            )

        texture = StagedTexture(
            rect=Rect(0, 0, source.width, source.height),
            name=source.name,
            buffer_offset=len(self.data)
        )
        self.data += source.pixels
        return texture

    def pixels_of(self, texture: StagedTexture) -> np.ndarray:
        """Copy of a texture's pixels as an (h, w, 4) uint8 array, detached from the buffer."""
        r = texture.rect
        return np.frombuffer(
            self.data, dtype=np.uint8, count=texture.byte_length, offset=texture.buffer_offset
        ).reshape(r.h, r.w, CHANNELS).copy()


def composite_atlas(
    staging: StagingBuffer,
    textures: List[StagedTexture],
    atlas_size: int,
    expand: int = 0
) -> AtlasBitmap:
    """
    Blit every placed texture into a fresh transparent atlas.

    Bounds are not re-checked here; the packer's padding accounting keeps every
    write region, expand margin included, inside the atlas.

    Args:
        staging: Buffer holding the textures' pixel data
        textures: Placed textures
        atlas_size: Side length of the atlas
        expand: Number of edge pixels to replicate around each texture

    Returns:
        The composited atlas bitmap
    """
    canvas = np.zeros((atlas_size, atlas_size, CHANNELS), dtype=np.uint8)

    for texture in textures:
        r = texture.rect
        src = staging.pixels_of(texture)
        if expand > 0:
            src = np.pad(src, ((expand, expand), (expand, expand), (0, 0)), mode='edge')
            canvas[r.y - expand:r.y + r.h + expand, r.x - expand:r.x + r.w + expand] = src
        else:
            canvas[r.y:r.y + r.h, r.x:r.x + r.w] = src

    logger.info(f"Generated {atlas_size}x{atlas_size} atlas from {len(textures)} textures (expand={expand})")
    return AtlasBitmap(width=atlas_size, height=atlas_size, pixels=bytearray(canvas.tobytes()))
