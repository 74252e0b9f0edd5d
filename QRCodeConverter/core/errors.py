"""Exception hierarchy for the conversion pipeline.

Every error raised by the classifier, codec or asset store derives from
``ConversionError`` so the worker boundary can turn it into a failed result.
``OperationCancelled`` is separate: it only marks a superseded job and is
never reported to the user.
"""


class ConversionError(Exception):
    """Base class for conversion failures."""


class ClassificationInconclusive(ConversionError):
    """Input matches no known form (e.g. empty after trimming)."""


class InvalidPayloadError(ConversionError):
    """A data-URI was recognized but its Base64 body is malformed."""


class EncodeError(ConversionError):
    """Text cannot be represented as a QR symbol."""


class DecodeError(ConversionError):
    """No text could be recovered from a raster."""


class SymbolNotFoundError(DecodeError):
    """No QR symbol was located in the raster."""


class SymbolUnreadableError(DecodeError):
    """A QR symbol was located but could not be parsed."""


class AssetIOError(ConversionError):
    """Reading or writing a scratch/image file failed."""


class OperationCancelled(Exception):
    """Raised at a cancellation checkpoint when the job was superseded."""
