from PySide6.QtWidgets import QDialog, QDialogButtonBox, QLabel, QVBoxLayout

import core.style as _s
from engine.chat_store import ConversationSummary


class DeleteConversationDialog(QDialog):
    """Asks before a conversation folder is removed from the vault."""

    def __init__(self, summary: ConversationSummary, parent=None):
        super().__init__(parent)
        self.summary = summary
        self._approved = False
        self.setWindowTitle("Delete Conversation")
        self.setModal(True)
        self.setMinimumWidth(420)

        layout = QVBoxLayout(self)
        warning = QLabel(f"Delete “{summary.display_name}”?")
        warning.setStyleSheet(f"color: {_s.ACCENT_DANGER}; font-weight: bold;")
        layout.addWidget(warning)

        created = summary.conversation.created_at.strftime("%Y-%m-%d %H:%M")
        modified = summary.modified_at.strftime("%Y-%m-%d %H:%M")
        detail = QLabel(
            f"Started {created}, last message {modified}.\n"
            f"The folder {summary.id} and its transcript will be removed."
        )
        detail.setWordWrap(True)
        detail.setStyleSheet(f"color: {_s.FG_DIM};")
        layout.addWidget(detail)

        buttons = QDialogButtonBox(QDialogButtonBox.Cancel)
        btn_delete = buttons.addButton("Delete", QDialogButtonBox.DestructiveRole)
        btn_delete.clicked.connect(self.accept)
        buttons.rejected.connect(self.reject)
        buttons.button(QDialogButtonBox.Cancel).setDefault(True)
        layout.addWidget(buttons)

    @property
    def approved(self) -> bool:
        return self._approved

    def accept(self):
        self._approved = True
        super().accept()
