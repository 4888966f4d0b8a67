import hashlib
from io import BytesIO

import pytest
from PIL import Image

from src.seniku.utils.errors import BadRequestError
from src.seniku.utils.image import process_image, validate_dimensions
from tests.utils import make_image


def test_validate_dimensions_accepts_artwork_within_limits():
    assert validate_dimensions(make_image(size=(1000, 800))) == (1000, 800)


def test_validate_dimensions_rejects_small_image():
    with pytest.raises(BadRequestError) as exc:
        validate_dimensions(make_image(size=(400, 300)))
    assert "too small" in exc.value.detail


def test_validate_dimensions_rejects_huge_image():
    with pytest.raises(BadRequestError) as exc:
        validate_dimensions(make_image(size=(5200, 800)))
    assert "too large" in exc.value.detail


def test_validate_dimensions_rejects_garbage():
    with pytest.raises(BadRequestError) as exc:
        validate_dimensions(b"definitely not an image")
    assert exc.value.detail == "Invalid image file"


def test_process_image_builds_three_jpeg_renditions():
    content = make_image(size=(1600, 1200))
    processed = process_image(content)

    assert (processed.width, processed.height) == (1600, 1200)
    assert processed.digest == hashlib.sha256(content).hexdigest()

    with Image.open(BytesIO(processed.full)) as full:
        assert full.format == "JPEG"
        assert full.size == (1600, 1200)
    with Image.open(BytesIO(processed.medium)) as medium:
        assert medium.size[0] <= 800 and medium.size[1] <= 600
    with Image.open(BytesIO(processed.thumbnail)) as thumb:
        assert thumb.size == (300, 300)


def test_identical_bytes_give_identical_digest():
    content = make_image(color=(10, 120, 200))
    assert process_image(content).digest == process_image(content).digest
    assert process_image(content).digest != process_image(make_image(color=(11, 120, 200))).digest
