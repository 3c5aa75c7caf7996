"""Qt user interface for MorseFlow (requires the ``gui`` extra)."""

from .main_window import MainWindow, run_gui  # noqa: F401

__all__ = ["MainWindow", "run_gui"]
