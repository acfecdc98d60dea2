import pytest
from unittest.mock import AsyncMock

from siteimg.optimizer import ImageOptimizer
from siteimg.types import SrcSet, SrcSetEntry, TranscodeResult


def _fake_transcode(request):
    width = request.width or 800
    height = request.height or 600
    url = f"/_siteimg/out-{width}x{height}.{request.format.value}"
    return TranscodeResult(
        src=url,
        width=width,
        height=height,
        srcset=SrcSet(values=[SrcSetEntry(url=url, descriptor="1x")]),
    )


@pytest.fixture
def transcoder():
    """AsyncMock transcoder that echoes the requested size."""
    return AsyncMock(side_effect=_fake_transcode)


@pytest.fixture
def failing_transcoder():
    return AsyncMock(side_effect=RuntimeError("codec exploded"))


@pytest.fixture
def optimizer(transcoder):
    return ImageOptimizer(transcoder)


@pytest.fixture
def public_dir(tmp_path):
    """Public folder containing a 1600x900 PNG at /images/hero.png."""
    from PIL import Image

    root = tmp_path / "public"
    (root / "images").mkdir(parents=True)
    Image.new("RGBA", (1600, 900), (200, 30, 30, 255)).save(root / "images" / "hero.png")
    Image.new("RGB", (300, 200), (10, 120, 200)).save(root / "images" / "small.jpg")
    return root
