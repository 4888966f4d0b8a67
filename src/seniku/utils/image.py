# File: application/src/seniku/utils/image.py
import hashlib
import logging
from dataclasses import dataclass
from io import BytesIO
from typing import Tuple

from PIL import Image, ImageOps, UnidentifiedImageError

from src.seniku.config.settings import (
    IMAGE_MIN_WIDTH,
    IMAGE_MIN_HEIGHT,
    IMAGE_MAX_WIDTH,
    IMAGE_MAX_HEIGHT,
    IMAGE_MEDIUM_SIZE,
    IMAGE_THUMBNAIL_SIZE,
)
from src.seniku.utils.errors import BadRequestError

logger = logging.getLogger(__name__)

FULL_QUALITY = 90
MEDIUM_QUALITY = 85
THUMBNAIL_QUALITY = 80


@dataclass
class ProcessedImage:
    width: int
    height: int
    full: bytes
    medium: bytes
    thumbnail: bytes
    digest: str
    content_type: str = "image/jpeg"
    extension: str = "jpg"


def validate_dimensions(content: bytes) -> Tuple[int, int]:
    """Decode the image header and enforce the artwork size limits."""
    try:
        with Image.open(BytesIO(content)) as img:
            img.verify()
        with Image.open(BytesIO(content)) as img:
            width, height = img.size
    except (UnidentifiedImageError, OSError, SyntaxError) as e:
        logger.warning(f"Rejected unreadable image: {e}")
        raise BadRequestError("Invalid image file")

    if width < IMAGE_MIN_WIDTH or height < IMAGE_MIN_HEIGHT:
        raise BadRequestError(
            f"Image dimensions too small. Minimum size is {IMAGE_MIN_WIDTH}x{IMAGE_MIN_HEIGHT}px"
        )
    if width > IMAGE_MAX_WIDTH or height > IMAGE_MAX_HEIGHT:
        raise BadRequestError(
            f"Image dimensions too large. Maximum size is {IMAGE_MAX_WIDTH}x{IMAGE_MAX_HEIGHT}px"
        )
    return width, height


def _encode_jpeg(img: Image.Image, quality: int) -> bytes:
    buffer = BytesIO()
    img.save(buffer, format="JPEG", quality=quality, optimize=True)
    return buffer.getvalue()


def process_image(content: bytes) -> ProcessedImage:
    """
    Validate an uploaded artwork and build its three stored renditions.

    The full rendition fits inside the maximum box, the medium one inside
    800x600, and the thumbnail is a 300x300 centre crop.
    """
    width, height = validate_dimensions(content)

    with Image.open(BytesIO(content)) as source:
        img = ImageOps.exif_transpose(source).convert("RGB")

    full = img.copy()
    full.thumbnail((IMAGE_MAX_WIDTH, IMAGE_MAX_HEIGHT), Image.Resampling.LANCZOS)

    medium = img.copy()
    medium.thumbnail(IMAGE_MEDIUM_SIZE, Image.Resampling.LANCZOS)

    thumbnail = ImageOps.fit(img, IMAGE_THUMBNAIL_SIZE, Image.Resampling.LANCZOS)

    logger.debug(f"Processed image {width}x{height} into full/medium/thumbnail renditions")
    return ProcessedImage(
        width=width,
        height=height,
        full=_encode_jpeg(full, FULL_QUALITY),
        medium=_encode_jpeg(medium, MEDIUM_QUALITY),
        thumbnail=_encode_jpeg(thumbnail, THUMBNAIL_QUALITY),
        digest=hashlib.sha256(content).hexdigest(),
    )
