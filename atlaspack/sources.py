"""
Source image discovery and decoding.
"""

import logging
import os
from pathlib import Path
from typing import Iterator, List, Tuple, Union

from PIL import Image, UnidentifiedImageError

from atlaspack.exceptions import DecodeFailure
from atlaspack.packing.rect import SourceImage

logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS = ('.png', '.jpg', '.jpeg')


def discover_images(directory: Union[str, Path]) -> List[Path]:
    """
    Recursively list image files under a directory.

    Order is sorted so registration order, and therefore packing ties, are stable.

    Raises:
        FileNotFoundError: If the directory doesn't exist
    """
    directory = Path(directory)
    if not directory.is_dir():
        raise FileNotFoundError(f"Input directory not found: {directory}")

    found = []
    for root, dirs, files in os.walk(directory):
        dirs.sort()
        for name in sorted(files):
            if name.lower().endswith(IMAGE_EXTENSIONS):
                found.append(Path(root) / name)
    return found


def load_image(path: Union[str, Path]) -> SourceImage:
    """
    Decode an image file to RGBA, named after its file stem.

    Raises:
        DecodeFailure: If the file can't be read or decoded
    """
    path = Path(path)
    try:
        with Image.open(path) as img:
            img.load()
            return SourceImage.from_image(img, name=path.stem)
    except (OSError, UnidentifiedImageError) as e:
        raise DecodeFailure(str(path), f"could not decode image ({e})") from e


def load_directory(directory: Union[str, Path]) -> Iterator[Tuple[Path, Union[SourceImage, DecodeFailure]]]:
    """
    Decode every image under a directory.

    Failed decodes are yielded as DecodeFailure instances instead of raised so
    one unreadable file doesn't stop the run.
    """
    for path in discover_images(directory):
        try:
            source = load_image(path)
        except DecodeFailure as e:
            logger.debug(f"Failed to load {path}: {e}")
            yield path, e
        else:
            yield path, source
