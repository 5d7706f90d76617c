"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License
main_window.py
treesize GUI Application
A PySide6 window that computes a size tree in the background and shows it
as an expandable tree, children in the order the directory listed them.
"""
from typing import Any, Optional

from PySide6.QtWidgets import (
    QMainWindow, QFileDialog, QMessageBox, QProgressDialog,
    QWidget, QVBoxLayout, QHBoxLayout, QLineEdit, QPushButton,
    QTreeWidget, QTreeWidgetItem, QHeaderView,
)
from PySide6.QtCore import Qt, QSettings, QThreadPool
from treesize.core.models import SizeTree, TraversalParams, TraversalStats
from treesize.utils.convert_utils import ConvertUtils
from treesize.gui.worker import SizeTreeWorker


class SettingsManager:
    def __init__(self):
        self.settings = QSettings("InitumSoft", "TreeSize")

    def save_settings(self, key: str, value: Any):
        self.settings.setValue(key, value)

    def load_settings(self, key: str, default: Any = None) -> Any:
        return self.settings.value(key, default)


class MainWindow(QMainWindow):
    """Main application window: root folder picker on top, size tree below."""

    NAME_COLUMN = 0
    SIZE_COLUMN = 1
    BYTES_COLUMN = 2

    def __init__(self):
        super().__init__()
        self.setWindowTitle("TreeSize")
        self.resize(800, 600)

        self.size_tree: Optional[SizeTree] = None
        self.settings_manager = SettingsManager()
        self.worker = None  # Holds reference to current worker for cancellation
        self.progress_dialog = None

        self.setup_ui()
        self.setup_connections()
        self.restore_settings()

    def setup_ui(self):
        central = QWidget(self)
        layout = QVBoxLayout(central)

        top_row = QHBoxLayout()
        self.root_dir_input = QLineEdit(central)
        self.root_dir_input.setPlaceholderText("Folder to measure")
        self.select_dir_button = QPushButton("Browse...", central)
        self.scan_button = QPushButton("Calculate", central)
        top_row.addWidget(self.root_dir_input)
        top_row.addWidget(self.select_dir_button)
        top_row.addWidget(self.scan_button)
        layout.addLayout(top_row)

        self.tree_widget = QTreeWidget(central)
        self.tree_widget.setHeaderLabels(["Name", "Size", "Bytes"])
        self.tree_widget.setSortingEnabled(False)  # keep listing order
        self.tree_widget.header().setSectionResizeMode(self.NAME_COLUMN, QHeaderView.ResizeMode.Stretch)
        layout.addWidget(self.tree_widget)

        self.setCentralWidget(central)
        self.statusBar().showMessage("Select a folder and press Calculate")

    def setup_connections(self):
        self.select_dir_button.clicked.connect(self.select_root_folder)
        self.scan_button.clicked.connect(self.start_computation)
        self.root_dir_input.returnPressed.connect(self.start_computation)

    def select_root_folder(self):
        dir_path = QFileDialog.getExistingDirectory(self, "Select Root Folder")
        if dir_path:
            self.root_dir_input.setText(dir_path)

    def start_computation(self):
        root_dir = self.root_dir_input.text().strip()
        if not root_dir:
            QMessageBox.warning(self, "Input Error", "Please, select folder to scan!")
            return

        # Drop the result of a previous worker that is still running
        if self.worker:
            self.worker.stop()
            self.worker = None

        self.progress_dialog = QProgressDialog("Scanning...", "Cancel", 0, 0, self)
        self.progress_dialog.setMinimumDuration(1000)
        self.progress_dialog.setModal(True)
        self.progress_dialog.setWindowTitle("Processing")
        self.progress_dialog.setAutoReset(False)
        self.progress_dialog.show()

        def cancel_action():
            if self.worker:
                self.worker.stop()
                self.worker = None  # Release reference immediately
            self.statusBar().showMessage("Calculation cancelled")

        self.progress_dialog.canceled.connect(cancel_action)

        self.worker = SizeTreeWorker(TraversalParams(root_dir=root_dir))
        self.worker.signals.progress.connect(self.update_progress)
        self.worker.signals.finished.connect(self.on_computation_finished)
        self.worker.signals.error.connect(self.on_computation_error)
        QThreadPool.globalInstance().start(self.worker)

    def update_progress(self, stage, current, total):
        if not self.progress_dialog or not self.worker:
            return

        try:
            self.progress_dialog.setLabelText(f"{stage}: {current} entries processed...")
        except (TypeError, RuntimeError, AttributeError):
            if self.progress_dialog:
                self.progress_dialog.deleteLater()
                self.progress_dialog = None

    def on_computation_finished(self, size_tree: SizeTree, stats: TraversalStats):
        self.worker = None  # Release reference - worker auto-deleted by pool
        self._close_progress()

        self.size_tree = size_tree
        self.show_tree(size_tree)

        message = (
            f"Total: {ConvertUtils.bytes_to_human(size_tree.size)} | "
            f"Files: {stats.files_counted} | Hard links skipped: {stats.hardlinks_skipped} | "
            f"Time: {stats.total_time:.2f}s"
        )
        if stats.entries_degraded:
            message += f" | Unreadable: {stats.entries_degraded}"
        self.statusBar().showMessage(message)

    def on_computation_error(self, error_message):
        self.worker = None  # Release reference
        self._close_progress()

        QMessageBox.critical(self, "Error", f"Error occurred:\n{error_message}")

    def show_tree(self, size_tree: SizeTree):
        """Fill the tree widget, children in listing order."""
        self.tree_widget.clear()

        root_item = self._make_item(size_tree)
        self.tree_widget.addTopLevelItem(root_item)

        stack = [(size_tree, root_item)]
        while stack:
            node, item = stack.pop()
            for child in node.children:
                child_item = self._make_item(child)
                item.addChild(child_item)
                if child.children:
                    stack.append((child, child_item))

        root_item.setExpanded(True)

    def _make_item(self, node: SizeTree) -> QTreeWidgetItem:
        item = QTreeWidgetItem([node.name, ConvertUtils.bytes_to_human(node.size), str(node.size)])
        item.setTextAlignment(self.SIZE_COLUMN, Qt.AlignmentFlag.AlignRight)
        item.setTextAlignment(self.BYTES_COLUMN, Qt.AlignmentFlag.AlignRight)
        return item

    def _close_progress(self):
        if self.progress_dialog:
            self.progress_dialog.deleteLater()
            self.progress_dialog = None

    def closeEvent(self, event):
        if self.worker:
            self.worker.stop()
            self.worker = None

        self._close_progress()
        self.save_settings()
        super().closeEvent(event)

    def save_settings(self):
        self.settings_manager.save_settings("root_dir", self.root_dir_input.text())

    def restore_settings(self):
        self.root_dir_input.setText(self.settings_manager.load_settings("root_dir", ""))
