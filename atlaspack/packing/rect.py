"""
Shared data shapes for packing and compositing.

A Rect doubles as "space still free in the atlas" and "where a texture landed".
"""

from dataclasses import dataclass, field

from PIL import Image

CHANNELS = 4


@dataclass
class Rect:
    """Axis-aligned rectangle in atlas pixels."""
    x: int
    y: int
    w: int
    h: int

    def intersects(self, other: "Rect") -> bool:
        """Check if this rectangle overlaps another (touching edges do not count)."""
        return not (
            self.x + self.w <= other.x or
            self.y + self.h <= other.y or
            self.x >= other.x + other.w or
            self.y >= other.y + other.h
        )

    def contains(self, other: "Rect") -> bool:
        return (
            other.x >= self.x and
            other.y >= self.y and
            other.x + other.w <= self.x + self.w and
            other.y + other.h <= self.y + self.h
        )


@dataclass
class SourceImage:
    """
    A decoded RGBA image handed to the atlas builder.

    Attributes:
        name: Identity used in placement metadata
        width: Width in pixels
        height: Height in pixels
        pixels: Row-major RGBA bytes, width * height * 4 long
    """
    name: str
    width: int
    height: int
    pixels: bytes

    @classmethod
    def from_image(cls, image: Image.Image, name: str) -> "SourceImage":
        """Build a source from a Pillow image, converting to RGBA if needed."""
        if image.mode != 'RGBA':
            image = image.convert('RGBA')
        width, height = image.size
        return cls(name=name, width=width, height=height, pixels=image.tobytes())


@dataclass
class StagedTexture:
    """A registered texture: its rect, identity and where its pixels start in the staging buffer."""
    rect: Rect
    name: str
    buffer_offset: int

    @property
    def byte_length(self) -> int:
        return self.rect.w * self.rect.h * CHANNELS


@dataclass
class PlacementRecord:
    """Final placement of one texture, as handed to metadata serializers."""
    name: str
    x: int
    y: int
    w: int
    h: int

    @classmethod
    def from_texture(cls, texture: StagedTexture) -> "PlacementRecord":
        r = texture.rect
        return cls(name=texture.name, x=r.x, y=r.y, w=r.w, h=r.h)


@dataclass
class AtlasBitmap:
    """Square RGBA atlas; `pixels` is a flat row-major buffer."""
    width: int
    height: int
    pixels: bytearray = field(repr=False)

    def get_pixel(self, x: int, y: int) -> tuple:
        i = (y * self.width + x) * CHANNELS
        return tuple(self.pixels[i:i + CHANNELS])

    def to_image(self) -> Image.Image:
        return Image.frombytes('RGBA', (self.width, self.height), bytes(self.pixels))

    def save_png(self, path: str) -> None:
        """Save bitmap as a PNG file."""
        self.to_image().save(path, format='PNG')
