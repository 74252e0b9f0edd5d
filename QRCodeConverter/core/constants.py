"""Application-wide constants for QRCodeConverter.

This module contains shared defaults used across the application.
"""

# Debounce before a typed text is encoded (milliseconds)
DEBOUNCE_INTERVAL_MS = 500

# QR output geometry
QR_IMAGE_SIZE = 600  # 600x600 px
QR_MARGIN = 0  # quiet-zone modules around the symbol
QR_ERROR_CORRECTION = "H"

# Quiet zone added around a raster before detection (fraction of the side)
DECODE_PADDING_RATIO = 0.1

# Integer upscales tried in turn when a symbol is not read
DECODE_RETRY_SCALES = (1, 2)

# Persisted settings
DEFAULT_ENCODING = "UTF-8"
SETTINGS_ENCODER_KEY = "QRCodeConverter/Encoder"

# Scratch directory name under the system temp folder
TEMP_DIR_NAME = "QRCodeConverter"
