"""Main converter window.

Layout:
- Left: text input (plain text or an image data-URI)
- Right: image preview (encoded QR code, decoded data-URI or selected file)
- Status bar: current conversion state

Images can be opened from the File menu or dropped onto the window; the
decoded text replaces the input.
"""

from pathlib import Path
from typing import Optional

from PySide6.QtCore import Qt
from PySide6.QtGui import QAction, QPixmap
from PySide6.QtWidgets import (
    QFileDialog,
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QPlainTextEdit,
    QStatusBar,
    QWidget,
)

from ..core.config import ConverterConfig
from ..core.payload import is_image_file
from .orchestrator import OrchestratorState
from .view_model import QRCodeViewModel

_STATE_TEXT = {
    OrchestratorState.IDLE: "",
    OrchestratorState.PENDING: "Waiting for input…",
    OrchestratorState.RUNNING: "Converting…",
    OrchestratorState.PUBLISHING: "",
    OrchestratorState.COMPLETED: "Done",
}


class ConverterWindow(QMainWindow):
    """Main application window for QR encoding/decoding.

    Keyboard Shortcuts:
        - Ctrl+O: Open an image to decode
        - Ctrl+Q: Quit
    """

    def __init__(self, config: Optional[ConverterConfig] = None, view_model: Optional[QRCodeViewModel] = None):
        super().__init__()
        self.setWindowTitle("QRCodeConverter")
        self.resize(1000, 600)

        self.view_model = view_model or QRCodeViewModel(config, parent=self)

        central = QWidget(self)
        self.setCentralWidget(central)
        h_layout = QHBoxLayout(central)

        self.text_edit = QPlainTextEdit()
        self.text_edit.setPlaceholderText("Text or data:image/...;base64,...")
        h_layout.addWidget(self.text_edit, 1)

        self.image_label = QLabel()
        self.image_label.setAlignment(Qt.AlignCenter)
        self.image_label.setMinimumSize(300, 300)
        self.image_label.setStyleSheet("border:1px dashed #888;")
        h_layout.addWidget(self.image_label, 1)

        self.status = QStatusBar()
        self.setStatusBar(self.status)
        self.status_state = QLabel()
        self.status.addPermanentWidget(self.status_state, 1)

        self._create_menus()
        self.setAcceptDrops(True)

        self.text_edit.textChanged.connect(self._on_text_edited)
        self.view_model.input_text_changed.connect(self._on_input_text_changed)
        self.view_model.output_image_changed.connect(self._on_output_image_changed)
        self.view_model.orchestrator.state_changed.connect(self._on_state_changed)

    def _create_menus(self):
        file_menu = self.menuBar().addMenu("File")
        file_menu.addAction(QAction("Open image…", self, shortcut="Ctrl+O", triggered=self.open_file))
        file_menu.addAction(
            QAction("Cancel conversion", self, shortcut="Esc", triggered=self.view_model.cancel_conversion)
        )
        file_menu.addSeparator()
        file_menu.addAction(QAction("Quit", self, shortcut="Ctrl+Q", triggered=self.close))

    def apply_clipboard_content(self, text: str) -> bool:
        """Use clipboard content as input when it is an image data-URI."""
        if not self.view_model.can_handle(text):
            return False
        self.view_model.input_text = text
        return True

    def open_file(self):
        """Open file dialog to select an image to decode."""
        path, _ = QFileDialog.getOpenFileName(
            self, "Open image", "", "Images (*.png *.jpg *.jpeg *.bmp *.gif *.ico *.svg *.webp)"
        )
        if path:
            self.view_model.files_selected([path])

    def dragEnterEvent(self, e):
        if e.mimeData().hasUrls():
            e.acceptProposedAction()

    def dropEvent(self, e):
        files = [u.toLocalFile() for u in e.mimeData().urls()]
        image_files = [f for f in files if is_image_file(f)]
        if image_files:
            # Only the first dropped image is decoded
            self.view_model.files_selected(image_files[:1])

    def closeEvent(self, e):
        self.view_model.dispose()
        super().closeEvent(e)

    def _on_text_edited(self):
        self.view_model.input_text = self.text_edit.toPlainText()

    def _on_input_text_changed(self, text: str):
        if self.text_edit.toPlainText() == text:
            return
        self.text_edit.blockSignals(True)
        self.text_edit.setPlainText(text)
        self.text_edit.blockSignals(False)

    def _on_output_image_changed(self, path: Optional[Path]):
        if path is None:
            self.image_label.clear()
            return
        pixmap = QPixmap(str(path))
        if pixmap.isNull():
            self.image_label.clear()
            self.image_label.setText(Path(path).name)
            return
        self.image_label.setPixmap(pixmap.scaled(self.image_label.size(), Qt.KeepAspectRatio, Qt.FastTransformation))

    def _on_state_changed(self, state: OrchestratorState):
        self.status_state.setText(_STATE_TEXT.get(state, ""))
