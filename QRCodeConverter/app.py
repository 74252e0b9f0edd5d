"""Application entry point.

This module provides the main() function that initializes the Qt application
and displays the ConverterWindow.

Usage:
    python -m QRCodeConverter

    # Or from Python:
    from QRCodeConverter import main
    main()
"""

import logging
import sys

from PySide6.QtCore import QSettings
from PySide6.QtWidgets import QApplication

from .core.config import ConverterConfig
from .ui.window import ConverterWindow


def main(argv=None):
    """Run the converter application.

    Args:
        argv: Command-line arguments (defaults to sys.argv)

    Returns:
        Exit code from QApplication.exec()
    """
    if argv is None:
        argv = sys.argv
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    app = QApplication(argv)
    app.setOrganizationName("QRCodeConverter")
    app.setApplicationName("QRCodeConverter")

    config = ConverterConfig.from_settings(QSettings())
    w = ConverterWindow(config)
    # Hand image data-URIs found on the clipboard straight to the tool
    w.apply_clipboard_content(QApplication.clipboard().text())
    w.show()
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
