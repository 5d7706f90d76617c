"""
GUI components built on PySide6 (optional dependency).
"""

from .main_window import MainWindow
from .worker import SizeTreeWorker

__all__ = ["MainWindow", "SizeTreeWorker"]
