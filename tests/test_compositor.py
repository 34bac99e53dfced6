"""
Tests for pixel staging and atlas compositing
"""
import numpy as np
import pytest

from atlaspack.exceptions import DecodeFailure
from atlaspack.packing import Rect, SourceImage, StagingBuffer, composite_atlas, pack

RED = (255, 0, 0, 255)


def solid(name, w, h, color=RED):
    return SourceImage(name=name, width=w, height=h, pixels=bytes(color) * (w * h))


def gradient(name, w, h):
    """Every pixel distinct: R = x, G = y, B = 7, A = 255."""
    px = bytearray()
    for y in range(h):
        for x in range(w):
            px += bytes((x, y, 7, 255))
    return SourceImage(name=name, width=w, height=h, pixels=bytes(px))


def as_array(bitmap):
    return np.frombuffer(bytes(bitmap.pixels), dtype=np.uint8).reshape(bitmap.height, bitmap.width, 4)


class TestStagingBuffer:
    """Test source registration into the staging buffer"""

    def test_offsets_partition_buffer(self):
        """Offsets follow insertion order with no gaps"""
        staging = StagingBuffer()
        a = staging.add(solid("a", 2, 3))
        b = staging.add(solid("b", 4, 1))
        c = staging.add(solid("c", 1, 1))
        assert (a.buffer_offset, b.buffer_offset, c.buffer_offset) == (0, 24, 40)
        assert len(staging) == 44

    def test_texture_starts_unplaced(self):
        texture = StagingBuffer().add(solid("a", 5, 6))
        assert texture.rect == Rect(0, 0, 5, 6)
        assert texture.name == "a"

    def test_pixels_copied(self):
        source = gradient("g", 3, 2)
        staging = StagingBuffer()
        texture = staging.add(source)
        assert staging.pixels_of(texture).tobytes() == source.pixels

    def test_pixels_survive_later_adds(self):
        """Arrays from pixels_of stay valid while the buffer keeps growing"""
        source = gradient("g", 3, 2)
        staging = StagingBuffer()
        kept = staging.pixels_of(staging.add(source))
        staging.add(solid("later", 4, 4))
        assert len(staging) == 3 * 2 * 4 + 4 * 4 * 4
        assert kept.tobytes() == source.pixels
        kept[0, 0] = (0, 0, 0, 0)
        assert bytes(staging.data[:4]) == source.pixels[:4]

    def test_wrong_length_rejected(self):
        with pytest.raises(DecodeFailure):
            StagingBuffer().add(SourceImage(name="bad", width=2, height=2, pixels=b"\x00" * 15))

    def test_missing_pixels_rejected(self):
        with pytest.raises(DecodeFailure):
            StagingBuffer().add(SourceImage(name="bad", width=2, height=2, pixels=None))


class TestComposite:
    """Test blitting placed textures into the atlas"""

    def test_blank_atlas_is_transparent(self):
        bitmap = composite_atlas(StagingBuffer(), [], 8)
        assert (bitmap.width, bitmap.height) == (8, 8)
        assert bitmap.pixels == bytearray(8 * 8 * 4)

    def test_direct_copy(self):
        """Without expand, pixels land at rect.x/rect.y and nothing else is written"""
        staging = StagingBuffer()
        texture = staging.add(gradient("g", 3, 2))
        texture.rect.x, texture.rect.y = 4, 5
        canvas = as_array(composite_atlas(staging, [texture], 10))

        assert canvas[5:7, 4:7].tobytes() == staging.pixels_of(texture).tobytes()
        mask = np.ones((10, 10), dtype=bool)
        mask[5:7, 4:7] = False
        assert not canvas[mask].any()

    def test_three_texture_scenario(self):
        """Source pixel bytes survive packing and compositing unchanged"""
        staging = StagingBuffer()
        sources = [gradient("a", 8, 16), solid("b", 16, 8, (0, 255, 0, 255)), solid("c", 8, 8, (0, 0, 255, 255))]
        textures = [staging.add(s) for s in sources]
        pack(textures, 32)
        canvas = as_array(composite_atlas(staging, textures, 32))

        by_name = {s.name: s for s in sources}
        for t in textures:
            r = t.rect
            assert canvas[r.y:r.y + r.h, r.x:r.x + r.w].tobytes() == by_name[t.name].pixels

    def test_expand_left_margin(self):
        """expand=2, 4x4 red at (2, 2): left margin pixels are red"""
        staging = StagingBuffer()
        textures = [staging.add(solid("r", 4, 4))]
        pack(textures, 16, expand=2)
        bitmap = composite_atlas(staging, textures, 16, expand=2)

        assert (textures[0].rect.x, textures[0].rect.y) == (2, 2)
        assert bitmap.get_pixel(0, 2) == RED
        assert bitmap.get_pixel(1, 2) == RED
        assert bitmap.get_pixel(0, 0) == RED  # corner
        assert bitmap.get_pixel(8, 8) == (0, 0, 0, 0)

    def test_expand_clamps_to_edges(self):
        """Every margin pixel equals the clamped source pixel, corners clamped on both axes"""
        e = 3
        staging = StagingBuffer()
        texture = staging.add(gradient("g", 5, 4))
        texture.rect.x, texture.rect.y = 10, 6
        canvas = as_array(composite_atlas(staging, [texture], 24, expand=e))
        src = staging.pixels_of(texture)

        for dy in range(-e, 4 + e):
            for dx in range(-e, 5 + e):
                sx = min(max(dx, 0), 4)
                sy = min(max(dy, 0), 3)
                assert tuple(canvas[6 + dy, 10 + dx]) == tuple(src[sy, sx]), (dx, dy)

        # nothing outside the expanded footprint
        mask = np.ones((24, 24), dtype=bool)
        mask[6 - e:6 + 4 + e, 10 - e:10 + 5 + e] = False
        assert not canvas[mask].any()

    def test_deterministic(self):
        def run():
            staging = StagingBuffer()
            textures = [staging.add(gradient(f"g{i}", 3 + i, 9 - i)) for i in range(6)]
            pack(textures, 64, expand=1, border=2)
            bitmap = composite_atlas(staging, textures, 64, expand=1)
            return bytes(bitmap.pixels), [(t.name, t.rect.x, t.rect.y) for t in textures]

        assert run() == run()
