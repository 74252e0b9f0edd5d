"""Tests for reading the converter configuration from QSettings."""

from PySide6.QtCore import QSettings

from QRCodeConverter.core.config import ConverterConfig
from QRCodeConverter.core.constants import SETTINGS_ENCODER_KEY


def _settings(tmp_path):
    return QSettings(str(tmp_path / "settings.ini"), QSettings.IniFormat)


def test_defaults(qapp, tmp_path):
    config = ConverterConfig.from_settings(_settings(tmp_path))
    assert config.encoding == "UTF-8"
    assert config.qr_size == 600
    assert config.qr_margin == 0
    assert config.error_correction == "H"
    assert config.debounce_ms == 500


def test_stored_encoding_is_used(qapp, tmp_path):
    settings = _settings(tmp_path)
    settings.setValue(SETTINGS_ENCODER_KEY, "ASCII")
    assert ConverterConfig.from_settings(settings).encoding == "ASCII"


def test_unknown_encoding_falls_back_to_default(qapp, tmp_path):
    settings = _settings(tmp_path)
    settings.setValue(SETTINGS_ENCODER_KEY, "no-such-codec")
    config = ConverterConfig.from_settings(settings, debounce_ms=10)
    assert config.encoding == "UTF-8"
    assert config.debounce_ms == 10
