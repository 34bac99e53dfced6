"""
Placement metadata serializers.

JSON layout:
    {"w": 256, "h": 256, "n": 3, "textures": [{"name": "a", "x": 0, "y": 0, "w": 8, "h": 16}, ...]}

Binary layout (little-endian, all integers uint16):
    width, height, count, then per texture:
    name length, UTF-8 name bytes, x, y, w, h

Entries are always in final packing order (tallest first), not insertion order.
"""

import json
import logging
import struct
from pathlib import Path
from typing import Any, Dict, List, Tuple, Union

from atlaspack.exceptions import MetadataError
from atlaspack.packing.rect import PlacementRecord

logger = logging.getLogger(__name__)

UINT16_MAX = 0xFFFF


def to_json_dict(result) -> Dict[str, Any]:
    """Build the JSON metadata object for an AtlasResult."""
    placements = result.placements()
    return {
        'w': result.bitmap.width,
        'h': result.bitmap.height,
        'n': len(placements),
        'textures': [
            {'name': p.name, 'x': p.x, 'y': p.y, 'w': p.w, 'h': p.h}
            for p in placements
        ],
    }


def save_json(result, path: Union[str, Path]) -> None:
    """Write JSON metadata for an AtlasResult."""
    with open(path, 'w') as f:
        json.dump(to_json_dict(result), f, indent=2)
    logger.info(f"Saved atlas metadata to {path}")


def _u16(value: int, what: str) -> int:
    if not 0 <= value <= UINT16_MAX:
        raise MetadataError(f"{what} ({value}) does not fit in 16 bits")
    return value


def to_binary(result) -> bytes:
    """
    Encode an AtlasResult's metadata in the binary layout.

    Raises:
        MetadataError: A size, position, count or name length exceeds uint16
    """
    placements = result.placements()
    out = bytearray(struct.pack(
        "<HHH",
        _u16(result.bitmap.width, "atlas width"),
        _u16(result.bitmap.height, "atlas height"),
        _u16(len(placements), "texture count"),
    ))
    for p in placements:
        name = p.name.encode('utf-8')
        out += struct.pack("<H", _u16(len(name), f"name length of '{p.name}'"))
        out += name
        out += struct.pack(
            "<HHHH",
            _u16(p.x, f"x of '{p.name}'"),
            _u16(p.y, f"y of '{p.name}'"),
            _u16(p.w, f"w of '{p.name}'"),
            _u16(p.h, f"h of '{p.name}'"),
        )
    return bytes(out)


def save_binary(result, path: Union[str, Path]) -> None:
    """Write binary metadata for an AtlasResult."""
    data = to_binary(result)
    with open(path, 'wb') as f:
        f.write(data)
    logger.info(f"Saved binary atlas metadata to {path} ({len(data)} bytes)")


def read_binary(data: bytes) -> Tuple[int, int, List[PlacementRecord]]:
    """
    Decode binary metadata.

    Returns:
        Tuple of (atlas width, atlas height, placements)

    Raises:
        MetadataError: Data is truncated or has trailing bytes
    """
    try:
        width, height, count = struct.unpack_from("<HHH", data, 0)
        offset = 6
        placements = []
        for _ in range(count):
            (name_len,) = struct.unpack_from("<H", data, offset)
            offset += 2
            name = data[offset:offset + name_len].decode('utf-8')
            if len(name.encode('utf-8')) != name_len:
                raise MetadataError("truncated texture name")
            offset += name_len
            x, y, w, h = struct.unpack_from("<HHHH", data, offset)
            offset += 8
            placements.append(PlacementRecord(name=name, x=x, y=y, w=w, h=h))
    except (struct.error, UnicodeDecodeError) as e:
        raise MetadataError(f"invalid binary metadata: {e}") from e

    if offset != len(data):
        raise MetadataError(f"{len(data) - offset} trailing bytes after {count} textures")
    return width, height, placements
