# tests/test_image_service.py
import pytest
from PIL import Image

from conftest import encode
from reconyx_overlay.config import AppConfig
from reconyx_overlay.errors import AssetLoadError, DecodeError
from reconyx_overlay.services.image_service import ImageService


@pytest.fixture
def service(tmp_path):
    svc = ImageService(AppConfig(overlay_path=tmp_path / "overlay.png"))
    yield svc
    svc.shutdown()


def test_decode_reports_natural_dimensions(service):
    data = encode(Image.new("RGB", (37, 21), (10, 20, 30)))
    surface = service.decode(data)
    assert (surface.width, surface.height) == (37, 21)
    assert surface.pil_image.size == (37, 21)
    assert surface.mode == "RGBA"
    assert surface.size_bytes == len(data)


def test_decode_jpeg(service):
    surface = service.decode(encode(Image.new("RGB", (64, 48), "white"), fmt="JPEG"))
    assert surface.size == (64, 48)


def test_decode_applies_exif_orientation(service):
    exif = Image.Exif()
    exif[0x0112] = 6  # rotate 90 CW
    data = encode(Image.new("RGB", (30, 10), "white"), fmt="JPEG", exif=exif)
    surface = service.decode(data)
    assert surface.size == (10, 30)


@pytest.mark.parametrize("data", [b"", b"not an image at all", b"\x89PNG\r\n\x1a\n garbage"])
def test_decode_rejects_non_images(service, data):
    with pytest.raises(DecodeError):
        service.decode(data)


def test_decode_rejects_truncated_png(service):
    data = encode(Image.effect_noise((64, 64), 50).convert("RGB"))
    with pytest.raises(DecodeError):
        service.decode(data[: len(data) // 2])


def test_load_image_missing_file(service, tmp_path):
    with pytest.raises(DecodeError):
        service.load_image(tmp_path / "nope.png")


def test_load_image_records_source(service, tmp_path):
    path = tmp_path / "photo.png"
    Image.new("RGB", (12, 8), "green").save(path)
    surface = service.load_image(path)
    assert surface.source == path
    assert surface.size_bytes == path.stat().st_size


def test_decode_async_does_not_block(service):
    future = service.decode_async(encode(Image.new("RGB", (5, 6))))
    assert future.result(timeout=5).size == (5, 6)


def test_decode_async_carries_decode_error(service):
    future = service.decode_async(b"broken")
    with pytest.raises(DecodeError):
        future.result(timeout=5)


def test_overlay_is_loaded_once_and_cached(service, tmp_path):
    overlay_path = tmp_path / "overlay.png"
    Image.new("RGBA", (10, 10), (0, 0, 255, 255)).save(overlay_path)

    first = service.load_fixed_overlay()
    second = service.load_fixed_overlay()
    assert first is second
    surface = first.result(timeout=5)

    overlay_path.unlink()
    assert service.load_fixed_overlay().result(timeout=5) is surface


def test_missing_overlay_is_asset_load_error(service):
    with pytest.raises(AssetLoadError):
        service.load_fixed_overlay().result(timeout=5)


def test_failed_overlay_load_can_be_retried(service, tmp_path):
    with pytest.raises(AssetLoadError):
        service.load_fixed_overlay().result(timeout=5)

    Image.new("RGBA", (4, 4), (1, 2, 3, 255)).save(tmp_path / "overlay.png")
    assert service.load_fixed_overlay().result(timeout=5).size == (4, 4)


def test_undecodable_overlay_is_asset_load_error(service, tmp_path):
    (tmp_path / "overlay.png").write_bytes(b"not a png")
    with pytest.raises(AssetLoadError):
        service.load_fixed_overlay().result(timeout=5)


def test_bundled_overlay_asset_decodes():
    svc = ImageService()
    try:
        surface = svc.load_fixed_overlay().result(timeout=5)
    finally:
        svc.shutdown()
    assert surface.width > 0 and surface.height > 0
