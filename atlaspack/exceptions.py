"""Custom exceptions for atlas packing operations"""


class AtlasError(Exception):
    """Base exception for atlas errors"""
    pass


class PackingError(AtlasError):
    """A packing run could not place every texture"""
    pass


class OversizedTexture(PackingError):
    """A single texture cannot fit the atlas, even on its own"""

    def __init__(self, width: int, height: int, atlas_size: int):
        self.width = width
        self.height = height
        self.atlas_size = atlas_size
        super().__init__(
            f"max size needed ({width}px, {height}px) larger than atlas size ({atlas_size}px)"
        )


class InsufficientSpace(PackingError):
    """Total padded area exceeds what the atlas can be expected to hold"""

    def __init__(self, area: int, atlas_size: int, utilization: float):
        self.area = area
        self.atlas_size = atlas_size
        self.utilization = utilization
        super().__init__(
            f"total area needed ({area}px) cannot fit in atlas size "
            f"({atlas_size * atlas_size * utilization:.0f}px, AKA {atlas_size} x {atlas_size} "
            f"with {utilization * 100:.2f}% space utilization)"
        )


class NoFitFound(PackingError):
    """Greedy placement ran out of free spaces"""

    def __init__(self, name: str, width: int, height: int):
        self.name = name
        self.width = width
        self.height = height
        super().__init__(f"no free space left for texture '{name}' ({width}px, {height}px)")


class DecodeFailure(AtlasError):
    """A source image could not be read"""

    def __init__(self, source: str, reason: str = "could not read texture data"):
        self.source = source
        self.reason = reason
        super().__init__(f"{reason}: {source}")


class NotEnoughImages(AtlasError):
    """Fewer usable images than the configured minimum"""
    pass


class AtlasStateError(AtlasError):
    """Builder used out of order (e.g. adding sources after packing)"""
    pass


class MetadataError(AtlasError):
    """Placement metadata cannot be encoded"""
    pass
