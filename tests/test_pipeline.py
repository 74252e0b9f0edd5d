"""Tests for the synchronous conversion pipeline."""

import base64

import cv2
import numpy as np
import pytest
from PIL import Image

from QRCodeConverter.core.codec import QRCodec
from QRCodeConverter.core.errors import (
    AssetIOError,
    InvalidPayloadError,
    OperationCancelled,
    SymbolNotFoundError,
)
from QRCodeConverter.core.image_io import load_raster, read_image_payload
from QRCodeConverter.core.models import (
    FailedResult,
    ImageResult,
    ImageSubtype,
    ImageToText,
    NoOpResult,
    TextResult,
    TextToImage,
)
from QRCodeConverter.core.pipeline import CancellationToken, ConversionPipeline


@pytest.fixture
def pipeline(store):
    return ConversionPipeline(QRCodec(), store)


def test_plain_text_becomes_png_qr_code(pipeline, store):
    result = pipeline.run(TextToImage("hello"))
    assert isinstance(result, ImageResult)
    assert result.subtype is ImageSubtype.PNG
    assert result.path.suffix == ".png"
    assert store.current.path == result.path

    payload = read_image_payload(result.path)
    assert payload.subtype is ImageSubtype.PNG
    assert QRCodec().decode(load_raster(payload)) == "hello"


def test_blank_text_is_noop(pipeline, store):
    assert isinstance(pipeline.run(TextToImage("  \n ")), NoOpResult)
    assert store.assets == ()


@pytest.mark.parametrize("subtype", list(ImageSubtype))
def test_data_uri_bytes_are_written_with_subtype_extension(pipeline, subtype):
    data = b"\x00payload-" + subtype.name.encode()
    text = subtype.data_uri_prefix + base64.b64encode(data).decode()
    result = pipeline.run(TextToImage(text))
    assert isinstance(result, ImageResult)
    assert result.subtype is subtype
    assert result.path.suffix == subtype.extension
    assert result.path.read_bytes() == data


def test_invalid_data_uri_fails_without_writing(pipeline, store):
    result = pipeline.run(TextToImage("data:image/png;base64,@@@"))
    assert isinstance(result, FailedResult)
    assert isinstance(result.error, InvalidPayloadError)
    assert store.assets == ()


def test_cancelled_encode_does_not_write(pipeline, store):
    token = CancellationToken()
    token.cancel()
    with pytest.raises(OperationCancelled):
        pipeline.run(TextToImage("hello"), token)
    assert store.assets == ()


def test_png_file_is_decoded_to_text(pipeline, qr_png):
    result = pipeline.run(ImageToText(qr_png("hello")))
    assert result == TextResult("hello")


def test_bmp_file_is_decoded_to_text(pipeline, tmp_path):
    ok, buf = cv2.imencode(".bmp", QRCodec().encode("bitmap"))
    assert ok
    path = tmp_path / "qr.bmp"
    path.write_bytes(buf.tobytes())
    assert pipeline.run(ImageToText(path)) == TextResult("bitmap")


@pytest.mark.parametrize("ext", [".jpg", ".webp"])
def test_opencv_formats_are_decoded_to_text(pipeline, tmp_path, ext):
    ok, buf = cv2.imencode(ext, QRCodec().encode("hello"))
    assert ok
    path = tmp_path / f"qr{ext}"
    path.write_bytes(buf.tobytes())
    assert pipeline.run(ImageToText(path)) == TextResult("hello")


@pytest.mark.parametrize(
    "fmt, ext, options",
    [("GIF", ".gif", {}), ("ICO", ".ico", {"sizes": [(252, 252)]})],
)
def test_pillow_formats_are_decoded_to_text(pipeline, tmp_path, fmt, ext, options):
    # ICO entries are at most 256 px wide
    raster = QRCodec(size=252).encode("hello")
    path = tmp_path / f"qr{ext}"
    Image.fromarray(raster).save(path, format=fmt, **options)
    assert read_image_payload(path).subtype.extension == ext
    assert pipeline.run(ImageToText(path)) == TextResult("hello")


def _svg_document(text: str) -> str:
    modules = QRCodec(size=21).encode(text) == 0
    n = modules.shape[0]
    rects = "".join(
        f'<rect x="{x}" y="{y}" width="1" height="1"/>' for y, x in zip(*np.nonzero(modules))
    )
    return (
        f'<svg xmlns="http://www.w3.org/2000/svg" width="420" height="420" '
        f'viewBox="0 0 {n} {n}" shape-rendering="crispEdges">'
        f'<rect width="{n}" height="{n}" fill="white"/><g fill="black">{rects}</g></svg>'
    )


def test_svg_file_is_decoded_to_text(qapp, pipeline, tmp_path):
    path = tmp_path / "qr.svg"
    path.write_text(_svg_document("hello"), encoding="utf-8")
    assert read_image_payload(path).subtype is ImageSubtype.SVG
    assert pipeline.run(ImageToText(path)) == TextResult("hello")


def test_file_without_symbol_fails_not_found(pipeline, blank_png):
    result = pipeline.run(ImageToText(blank_png))
    assert isinstance(result, FailedResult)
    assert isinstance(result.error, SymbolNotFoundError)


def test_missing_file_fails_with_io_error(pipeline, tmp_path):
    result = pipeline.run(ImageToText(tmp_path / "missing.png"))
    assert isinstance(result, FailedResult)
    assert isinstance(result.error, AssetIOError)


def test_corrupt_file_fails_with_io_error(pipeline, tmp_path):
    path = tmp_path / "corrupt.png"
    path.write_bytes(b"definitely not an image")
    result = pipeline.run(ImageToText(path))
    assert isinstance(result, FailedResult)
    assert isinstance(result.error, AssetIOError)
