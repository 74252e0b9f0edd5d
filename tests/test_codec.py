"""Tests for the QR codec adapter."""

import numpy as np
import pytest

from QRCodeConverter.core.codec import QRCodec, to_grayscale
from QRCodeConverter.core.errors import EncodeError, SymbolNotFoundError


def test_encode_produces_square_binary_raster():
    raster = QRCodec().encode("hello")
    assert raster.shape == (600, 600)
    assert raster.dtype == np.uint8
    assert set(np.unique(raster)) <= {0, 255}
    # Zero margin: the top-left finder pattern touches the corner
    assert raster[0, 0] == 0


def test_encode_honors_margin_and_size():
    raster = QRCodec(size=300, margin=4).encode("hello")
    assert raster.shape == (300, 300)
    assert raster[0, 0] == 255


@pytest.mark.parametrize("text", ["hello", "https://example.com/path?q=1&x=2", "1234567890", "Mixed Case 42!"])
def test_decode_of_encode_returns_original_text(text):
    codec = QRCodec()
    assert codec.decode(codec.encode(text)) == text


SENTENCE = "The quick brown fox 0123456789 " * 50


@pytest.mark.parametrize("length", list(range(1, 1274, 37)) + [44, 48, 600, 1273])
def test_round_trip_up_to_level_h_capacity(length):
    text = SENTENCE[:length]
    codec = QRCodec()
    assert codec.decode(codec.encode(text)) == text


@pytest.mark.parametrize("text", ["héllo wörld", "日本語のテキスト", "emoji ✓ 🙂", "Ελληνικά και русский"])
def test_round_trip_of_non_ascii_text(text):
    codec = QRCodec()
    assert codec.decode(codec.encode(text)) == text


def test_round_trip_uses_configured_encoding():
    codec = QRCodec(encoding="latin-1")
    assert codec.decode(codec.encode("café crème")) == "café crème"


def test_modules_have_uniform_width_when_size_divides():
    # 21-module symbol at 210 px: exactly 10 px per module
    raster = QRCodec(size=210).encode("hello")
    blocks = raster.reshape(21, 10, 21, 10)
    assert (blocks == blocks[:, :1, :, :1]).all()


def test_decode_accepts_rgba_raster():
    codec = QRCodec()
    gray = codec.encode("hello")
    rgba = np.dstack([gray, gray, gray, np.full_like(gray, 255)])
    assert codec.decode(rgba) == "hello"


def test_decode_without_symbol_raises_not_found():
    blank = np.full((400, 400), 255, dtype=np.uint8)
    with pytest.raises(SymbolNotFoundError):
        QRCodec().decode(blank)


def test_encode_over_capacity_raises():
    with pytest.raises(EncodeError):
        QRCodec().encode("x" * 3000)


def test_encode_unrepresentable_text_raises():
    with pytest.raises(EncodeError):
        QRCodec(encoding="ascii").encode("héllo")


def test_unknown_error_correction_level_is_rejected():
    with pytest.raises(ValueError):
        QRCodec(error_correction="Z")


def test_to_grayscale_flattens_transparency_on_white():
    rgba = np.zeros((2, 2, 4), dtype=np.uint8)
    gray = to_grayscale(rgba)
    assert gray.shape == (2, 2)
    assert (gray == 255).all()
