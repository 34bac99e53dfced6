"""
Packing engine: rectangle placement and atlas compositing.
"""
from .rect import Rect, SourceImage, StagedTexture, PlacementRecord, AtlasBitmap
from .packer import RectanglePacker, pack, check_capacity, padded_footprint
from .compositor import StagingBuffer, composite_atlas

__all__ = [
    'Rect',
    'SourceImage',
    'StagedTexture',
    'PlacementRecord',
    'AtlasBitmap',
    'RectanglePacker',
    'pack',
    'check_capacity',
    'padded_footprint',
    'StagingBuffer',
    'composite_atlas',
]
