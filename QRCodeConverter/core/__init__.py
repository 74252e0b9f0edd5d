"""Core conversion utilities (no widget dependencies)."""

from .codec import QRCodec
from .config import ConverterConfig
from .payload import classify, can_handle, parse_data_uri, sniff_subtype, is_image_file, PlainText, DataUri
from .pipeline import CancellationToken, ConversionPipeline
from .temp_assets import TempAssetStore

__all__ = [
    "QRCodec",
    "ConverterConfig",
    "classify",
    "can_handle",
    "parse_data_uri",
    "sniff_subtype",
    "is_image_file",
    "PlainText",
    "DataUri",
    "CancellationToken",
    "ConversionPipeline",
    "TempAssetStore",
]
