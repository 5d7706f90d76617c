#!/usr/bin/env python3
"""
GUI launcher — entry point for treesize-gui command.
"""
import sys
from PySide6.QtWidgets import QApplication
from treesize.gui.main_window import MainWindow

def main():
    app = QApplication(sys.argv)
    window = MainWindow()
    window.show()
    sys.exit(app.exec())

if __name__ == "__main__":
    main()
