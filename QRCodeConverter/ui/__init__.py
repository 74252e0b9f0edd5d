"""UI components package."""

from .orchestrator import ConversionOrchestrator, OrchestratorState
from .view_model import QRCodeViewModel
from .window import ConverterWindow

__all__ = [
    "ConversionOrchestrator",
    "OrchestratorState",
    "QRCodeViewModel",
    "ConverterWindow",
]
