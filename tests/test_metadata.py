"""
Test JSON and binary placement metadata
"""
import json
import struct

import pytest

from atlaspack import AtlasConfig, SourceImage, build_atlas
from atlaspack.exceptions import MetadataError
from atlaspack.metadata import read_binary, save_json, to_binary, to_json_dict
from atlaspack.packing import AtlasBitmap, PlacementRecord


def solid(name, w, h):
    return SourceImage(name=name, width=w, height=h, pixels=b"\xff" * (w * h * 4))


@pytest.fixture
def result():
    sources = [solid("wide", 16, 8), solid("tall", 8, 16), solid("small", 8, 8)]
    return build_atlas(sources, AtlasConfig(atlas_size=32))


class TestJSON:
    """Test textual metadata"""

    def test_layout(self, result):
        data = to_json_dict(result)
        assert data == {
            'w': 32,
            'h': 32,
            'n': 3,
            'textures': [
                {'name': 'tall', 'x': 0, 'y': 0, 'w': 8, 'h': 16},
                {'name': 'wide', 'x': 8, 'y': 0, 'w': 16, 'h': 8},
                {'name': 'small', 'x': 24, 'y': 0, 'w': 8, 'h': 8},
            ],
        }

    def test_save_json(self, result, tmp_path):
        path = tmp_path / "meta.json"
        save_json(result, path)
        assert json.loads(path.read_text()) == to_json_dict(result)


class TestBinary:
    """Test binary metadata"""

    def test_layout(self, result):
        data = to_binary(result)
        assert struct.unpack_from("<HHH", data, 0) == (32, 32, 3)
        assert struct.unpack_from("<H", data, 6) == (4,)
        assert data[8:12] == b"tall"
        assert struct.unpack_from("<HHHH", data, 12) == (0, 0, 8, 16)
        # 6-byte header + per texture (2 + name + 8)
        assert len(data) == 6 + (10 + 4) + (10 + 4) + (10 + 5)

    def test_read_back(self, result):
        width, height, placements = read_binary(to_binary(result))
        assert (width, height) == (32, 32)
        assert placements == result.placements()

    def test_utf8_names(self, result):
        result.textures[0].name = "épée"
        _, _, placements = read_binary(to_binary(result))
        assert placements[0].name == "épée"

    def test_value_too_large(self, result):
        result.bitmap = AtlasBitmap(width=70000, height=70000, pixels=bytearray())
        with pytest.raises(MetadataError):
            to_binary(result)

    def test_truncated(self, result):
        with pytest.raises(MetadataError):
            read_binary(to_binary(result)[:-3])

    def test_trailing_bytes(self, result):
        with pytest.raises(MetadataError):
            read_binary(to_binary(result) + b"\x00")

    def test_placement_record_fields(self):
        record = PlacementRecord(name="a", x=1, y=2, w=3, h=4)
        assert (record.name, record.x, record.y, record.w, record.h) == ("a", 1, 2, 3, 4)
