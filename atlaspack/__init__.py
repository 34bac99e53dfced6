"""
atlaspack - Pack sprite images into a single square texture atlas

Greedy guillotine packing into a fixed-size atlas, with optional edge
expansion and borders, plus JSON/binary placement metadata.
"""

from atlaspack.atlas import AtlasBuilder, AtlasResult, build_atlas
from atlaspack.config import AtlasConfig
from atlaspack.packing import SourceImage, PlacementRecord

__version__ = "0.1.0"
__all__ = ["AtlasBuilder", "AtlasResult", "build_atlas", "AtlasConfig", "SourceImage", "PlacementRecord"]
