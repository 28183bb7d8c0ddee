import io

import pytest
from PIL import Image

from app.models import ImagePayload


def make_png(color: str = "white", size=(16, 16)) -> bytes:
    img = Image.new('RGB', size, color=color)
    buf = io.BytesIO()
    img.save(buf, format='PNG')
    return buf.getvalue()


@pytest.fixture
def png_bytes() -> bytes:
    return make_png()


@pytest.fixture
def png_factory():
    return make_png


@pytest.fixture
def make_payload(png_bytes):
    def _make(image_id: str = "img_1", filename: str = "menu.png",
              content_type: str = "image/png", data: bytes = None) -> ImagePayload:
        return ImagePayload(
            image_id=image_id,
            filename=filename,
            content_type=content_type,
            data=png_bytes if data is None else data,
        )
    return _make
