"""Smoke tests for the converter window wiring."""

import pytest

from QRCodeConverter.core.config import ConverterConfig
from QRCodeConverter.ui.window import ConverterWindow


@pytest.fixture
def window(qtbot, tmp_path):
    w = ConverterWindow(ConverterConfig(debounce_ms=10, temp_dir=tmp_path / "scratch"))
    qtbot.addWidget(w)
    yield w
    w.view_model.dispose()


def test_typed_text_shows_qr_code(qtbot, window):
    with qtbot.waitSignal(window.view_model.output_image_changed, timeout=5000):
        window.text_edit.setPlainText("hello")
    assert window.view_model.input_text == "hello"
    assert not window.image_label.pixmap().isNull()


def test_clipboard_data_uri_is_applied(qtbot, window):
    assert not window.apply_clipboard_content("just some text")
    assert window.view_model.input_text == ""

    text = "data:image/png;base64,aGVsbG8="
    assert window.apply_clipboard_content(text)
    assert window.text_edit.toPlainText() == text


def test_decoded_text_is_shown_in_editor(qtbot, window, qr_png):
    with qtbot.waitSignal(window.view_model.input_text_changed, timeout=5000):
        window.view_model.files_selected([qr_png("from image")])
    assert window.text_edit.toPlainText() == "from image"
