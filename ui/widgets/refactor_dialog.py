from PySide6.QtCore import Qt, Signal
from PySide6.QtWidgets import (
    QDialog, QHBoxLayout, QLabel, QPlainTextEdit, QVBoxLayout,
)

import core.style as _s
from ui.components.atoms import CollapsibleSection, MonoButton


class RefactorDialog(QDialog):
    """Modal that asks for a rewrite instruction; driven by engine.refactor.RefactorFlow."""

    sig_submit = Signal(str)
    sig_cancel = Signal()

    def __init__(self, parent=None, ui_bridge=None):
        super().__init__(parent)
        self.ui_bridge = ui_bridge
        self._busy = False

        self.setWindowTitle("NoteGPT: Refactor")
        self.setModal(True)
        self.setWindowModality(Qt.ApplicationModal)
        self.setMinimumWidth(520)

        layout = QVBoxLayout(self)
        layout.setSpacing(10)

        heading = QLabel("REFACTOR SELECTION")
        heading.setObjectName("group_title")
        layout.addWidget(heading)

        self.instruction = QPlainTextEdit()
        self.instruction.setPlaceholderText("How should it be refactored?")
        self.instruction.setFixedHeight(90)
        layout.addWidget(self.instruction)

        self.selection_section = CollapsibleSection("▸ SHOW SELECTION")
        self.selection_view = QPlainTextEdit()
        self.selection_view.setReadOnly(True)
        self.selection_view.setStyleSheet("font-family: Consolas, monospace; font-size: 10px;")
        self.selection_section.set_content_widget(self.selection_view)
        layout.addWidget(self.selection_section)

        self.lbl_error = QLabel("")
        self.lbl_error.setWordWrap(True)
        self.lbl_error.setStyleSheet(f"color: {_s.FG_ERROR}; font-size: 10px;")
        self.lbl_error.hide()
        layout.addWidget(self.lbl_error)

        row = QHBoxLayout()
        self.lbl_busy = QLabel("WORKING…")
        self.lbl_busy.setObjectName("busy_label")
        self.lbl_busy.hide()
        row.addWidget(self.lbl_busy)
        row.addStretch()
        self.btn_cancel = MonoButton("CANCEL")
        self.btn_cancel.clicked.connect(self.reject)
        self.btn_ok = MonoButton("OK", accent=True)
        self.btn_ok.setDefault(True)
        self.btn_ok.clicked.connect(self._submit)
        row.addWidget(self.btn_cancel)
        row.addWidget(self.btn_ok)
        layout.addLayout(row)

    # ---- RefactorPresenter ----

    def open(self, selection: str = ""):
        self.selection_view.setPlainText(selection)
        self.lbl_error.hide()
        self.set_busy(False)
        super().open()
        self.instruction.setFocus()

    def close(self):
        self.done(QDialog.Accepted)
        return True

    def set_busy(self, busy: bool):
        self._busy = busy
        for widget in (self.btn_ok, self.btn_cancel, self.instruction):
            widget.setEnabled(not busy)
        self.lbl_busy.setVisible(busy)

    def notify(self, message: str):
        self.lbl_error.setText(message)
        self.lbl_error.show()
        if self.ui_bridge is not None:
            self.ui_bridge.sig_notice.emit(message)

    # ---- Qt plumbing ----

    def _submit(self):
        self.lbl_error.hide()
        self.sig_submit.emit(self.instruction.toPlainText())

    def reject(self):
        # Esc and the window close button land here; the request cannot be abandoned
        if self._busy:
            return
        self.sig_cancel.emit()
