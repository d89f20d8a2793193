from PySide6.QtCore import Signal
from PySide6.QtWidgets import QPlainTextEdit


class NoteEditor(QPlainTextEdit):
    """Plain markdown editor for one vault note; also the refactor EditorHandle."""

    sig_context_menu = Signal(object, object)   # menu, editor

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setObjectName("note_editor")
        self.note_path: str | None = None
        self.setPlaceholderText("Open a note from the list…")
        self.setReadOnly(True)

    def load(self, note_path: str, text: str):
        self.note_path = note_path
        self.setReadOnly(False)
        self.setPlainText(text)
        self.document().setModified(False)

    def is_dirty(self) -> bool:
        return self.note_path is not None and self.document().isModified()

    # ---- EditorHandle ----

    def get_selection(self) -> str:
        # Qt separates selected lines with U+2029
        return self.textCursor().selectedText().replace("\u2029", "\n")

    def replace_selection(self, text: str) -> None:
        cursor = self.textCursor()
        cursor.beginEditBlock()
        cursor.insertText(text)
        cursor.endEditBlock()
        self.setTextCursor(cursor)
        self.ensureCursorVisible()

    def contextMenuEvent(self, event):
        menu = self.createStandardContextMenu()
        self.sig_context_menu.emit(menu, self)
        menu.exec(event.globalPos())
        menu.deleteLater()
