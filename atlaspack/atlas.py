"""
Core atlas API

Provides the AtlasBuilder context for one packing run and the AtlasResult
class for saving the atlas and its placement metadata.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Union

from atlaspack.config import AtlasConfig
from atlaspack.exceptions import AtlasStateError, DecodeFailure, NotEnoughImages
from atlaspack.packing import (
    AtlasBitmap,
    PlacementRecord,
    SourceImage,
    StagedTexture,
    StagingBuffer,
    composite_atlas,
    pack,
)

logger = logging.getLogger(__name__)


@dataclass
class AtlasResult:
    """
    A finished atlas with its placements.

    Attributes:
        bitmap: Composited RGBA atlas
        textures: Placed textures in final packing order (tallest first)
        config: Configuration used for the run
    """
    bitmap: AtlasBitmap
    textures: List[StagedTexture]
    config: AtlasConfig

    def placements(self) -> List[PlacementRecord]:
        """Placement records in final packing order."""
        return [PlacementRecord.from_texture(t) for t in self.textures]

    def save(self, path: Union[str, Path], binary: bool = False) -> List[Path]:
        """
        Save the atlas PNG plus metadata next to it.

        Writes `<stem>.json` always and `<stem>.bin` when binary is set.

        Returns:
            Paths of all written files
        """
        path = Path(path)
        self.save_png(path)
        return [path] + self.save_metadata(path, binary=binary)

    def save_png(self, path: Union[str, Path]) -> Path:
        """Save only the atlas bitmap as a PNG."""
        path = Path(path)
        self.bitmap.save_png(str(path))
        logger.info(f"Saved atlas to {path}")
        return path

    def save_metadata(self, path: Union[str, Path], binary: bool = False) -> List[Path]:
        """
        Save placement metadata next to an atlas path.

        Returns:
            `<stem>.json`, plus `<stem>.bin` when binary is set
        """
        from atlaspack.metadata import save_binary, save_json

        path = Path(path)
        json_path = path.with_suffix('.json')
        save_json(self, json_path)
        written = [json_path]

        if binary:
            bin_path = path.with_suffix('.bin')
            save_binary(self, bin_path)
            written.append(bin_path)
        return written


class AtlasBuilder:
    """
    Single-use context for building one atlas.

    Lifecycle: create, register every source, pack once, composite once.

    Examples:
        >>> builder = AtlasBuilder(AtlasConfig(atlas_size=256, expand=2))
        >>> for source in sources:
        ...     builder.add_source(source)
        >>> result = builder.build()
        >>> result.save("atlas.png")
    """

    def __init__(self, config: Optional[AtlasConfig] = None):
        self.config = config or AtlasConfig()
        self.staging = StagingBuffer()
        self.textures: List[StagedTexture] = []
        self._packed = False
        self._placed = False
        self._bitmap: Optional[AtlasBitmap] = None

        if self.config.unique:
            logger.warning("Texture deduplication is not implemented, 'unique' is ignored")

    def add_source(self, source: Optional[SourceImage]) -> StagedTexture:
        """
        Register a source image and copy its pixels into the staging buffer.

        Args:
            source: Decoded image, or None when the upstream load failed

        Raises:
            DecodeFailure: Source could not be read
            AtlasStateError: Builder has already packed
        """
        if self._packed:
            raise AtlasStateError("cannot add sources after packing")
        if source is None:
            raise DecodeFailure("<unknown>")

        texture = self.staging.add(source)
        self.textures.append(texture)
        return texture

    def register_sources(self, sources: Iterable[Union[SourceImage, DecodeFailure, None]]) -> int:
        """
        Register many sources, skipping ones that failed to decode.

        Returns:
            Number of registered textures

        Raises:
            NotEnoughImages: Fewer than config.min_images could be registered
        """
        for source in sources:
            if isinstance(source, DecodeFailure):
                logger.warning(f"Skipping image: {source}")
                continue
            try:
                self.add_source(source)
            except DecodeFailure as e:
                logger.warning(f"Skipping image: {e}")

        count = len(self.textures)
        if count < self.config.min_images:
            raise NotEnoughImages(f"not enough images ({count}) to pack, need at least {self.config.min_images}")
        return count

    def pack(self) -> List[StagedTexture]:
        """Compute placements for every registered texture. May only run once."""
        if self._packed:
            raise AtlasStateError("atlas has already been packed")
        # partial placements from a failed run are never reused
        self._packed = True
        cfg = self.config
        pack(self.textures, cfg.atlas_size, cfg.expand, cfg.border, cfg.utilization)
        self._placed = True
        return self.textures

    def composite(self) -> AtlasBitmap:
        """Blit packed textures into the atlas bitmap. May only run once, after pack()."""
        if not self._placed:
            raise AtlasStateError("composite() needs a successful pack()")
        if self._bitmap is not None:
            raise AtlasStateError("atlas has already been composited")
        self._bitmap = composite_atlas(self.staging, self.textures, self.config.atlas_size, self.config.expand)
        return self._bitmap

    def build(self) -> AtlasResult:
        """Pack and composite in one go."""
        self.pack()
        bitmap = self.composite()
        return AtlasResult(bitmap=bitmap, textures=self.textures, config=self.config)


def build_atlas(
    sources: Iterable[SourceImage],
    config: Optional[AtlasConfig] = None,
) -> AtlasResult:
    """
    Build an atlas from already-decoded sources in one call.

    Example:
        >>> result = build_atlas(sources, AtlasConfig(atlas_size=512))
        >>> [p.name for p in result.placements()]
    """
    builder = AtlasBuilder(config)
    for source in sources:
        builder.add_source(source)
    return builder.build()
