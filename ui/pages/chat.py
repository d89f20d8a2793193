from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QLabel, QLineEdit, QListWidget,
    QListWidgetItem, QStackedWidget, QTextBrowser, QInputDialog,
)
from PySide6.QtCore import Qt, QEvent, QTimer

import core.style as _s
from engine.chat_session import ChatSessionController
from engine.chat_store import UNTITLED
from ui.components.atoms import MonoButton, MonoGroupBox
from ui.render import render_pending_turn, render_transcript, transcript_stylesheet
from ui.widgets import DeleteConversationDialog


class PageChat(QWidget):
    """Conversation list and open conversation; the Qt side of ChatSessionController."""

    def __init__(self, ctx, ui_bridge, runner, parent=None):
        super().__init__(parent)
        self.ctx = ctx
        self.ui_bridge = ui_bridge
        self._transcript_html = ""
        self._watched = None
        self._summaries = {}

        layout = QVBoxLayout(self)
        layout.setContentsMargins(8, 8, 8, 8)
        self.stack = QStackedWidget()
        layout.addWidget(self.stack)

        # === LIST SCREEN ===
        list_group = MonoGroupBox("Conversations")
        list_group.add_header_action("NEW", self._prompt_new)
        self.conversation_list = QListWidget()
        self.conversation_list.setObjectName("conversation_list")
        self.conversation_list.itemDoubleClicked.connect(self._open_item)
        list_group.add_widget(self.conversation_list, 1)

        self.lbl_empty = QLabel("No conversations yet. Press NEW to start one.")
        self.lbl_empty.setStyleSheet(f"color: {_s.FG_DIM}; font-size: 10px;")
        self.lbl_empty.hide()
        list_group.add_widget(self.lbl_empty)

        list_actions = QHBoxLayout()
        self.btn_open = MonoButton("OPEN", accent=True)
        self.btn_open.clicked.connect(lambda: self._open_item(self.conversation_list.currentItem()))
        self.btn_delete = MonoButton("DELETE")
        self.btn_delete.clicked.connect(self._prompt_delete)
        list_actions.addWidget(self.btn_open)
        list_actions.addWidget(self.btn_delete)
        list_actions.addStretch()
        list_group.add_layout(list_actions)
        self.stack.addWidget(list_group)

        # === CONVERSATION SCREEN ===
        open_screen = QWidget()
        open_layout = QVBoxLayout(open_screen)
        open_layout.setContentsMargins(0, 0, 0, 0)
        open_layout.setSpacing(8)

        head = QHBoxLayout()
        self.btn_back = MonoButton("◂ BACK")
        self.btn_back.clicked.connect(lambda: self.controller.back())
        self.lbl_title = QLabel("")
        self.lbl_title.setObjectName("chat_title")
        self.btn_as_note = MonoButton("NOTE")
        self.btn_as_note.setToolTip("Open the transcript in the editor")
        self.btn_as_note.clicked.connect(self._open_as_note)
        head.addWidget(self.btn_back)
        head.addWidget(self.lbl_title, 1)
        head.addWidget(self.btn_as_note)
        open_layout.addLayout(head)

        self.transcript = QTextBrowser()
        self.transcript.setObjectName("transcript")
        self.transcript.setOpenExternalLinks(True)
        self.transcript.document().setDefaultStyleSheet(
            transcript_stylesheet(_s.FG_USER, _s.FG_ASSISTANT, _s.FG_DIM)
        )
        open_layout.addWidget(self.transcript, 1)

        self.lbl_busy = QLabel("WAITING FOR ASSISTANT…")
        self.lbl_busy.setObjectName("busy_label")
        self.lbl_busy.hide()
        open_layout.addWidget(self.lbl_busy)

        input_row = QHBoxLayout()
        self.input = QLineEdit()
        self.input.setPlaceholderText("Message…")
        self.input.returnPressed.connect(self._send)
        self.btn_send = MonoButton("SEND", accent=True)
        self.btn_send.setFixedWidth(80)
        self.btn_send.clicked.connect(self._send)
        input_row.addWidget(self.input)
        input_row.addWidget(self.btn_send)
        open_layout.addLayout(input_row)
        self.stack.addWidget(open_screen)

        self.controller = ChatSessionController(
            ctx.store, ctx.client, self, runner, system_prompt=ctx.config.chat_system
        )
        self.controller.show_list()

    # ---- ChatPresenter ----

    def show_list(self, conversations):
        self.conversation_list.clear()
        self._summaries = {summary.id: summary for summary in conversations}
        for summary in conversations:
            stamp = summary.modified_at.strftime("%Y-%m-%d %H:%M")
            item = QListWidgetItem(f"{summary.display_name}\n{stamp}")
            item.setData(Qt.UserRole, summary.id)
            item.setToolTip(summary.id)
            self.conversation_list.addItem(item)
        has_items = bool(conversations)
        self.lbl_empty.setVisible(not has_items)
        self.btn_open.setEnabled(has_items)
        self.btn_delete.setEnabled(has_items)
        self.stack.setCurrentIndex(0)

    def show_conversation(self, conversation, transcript):
        self.lbl_title.setText(conversation.display_name.upper())
        self._transcript_html = render_transcript(transcript)
        self.transcript.setHtml(self._transcript_html)
        self.stack.setCurrentIndex(1)
        self._scroll_to_bottom()
        self.input.setFocus()

    def show_pending_turn(self, text):
        self.transcript.setHtml(self._transcript_html + render_pending_turn(text))
        self._scroll_to_bottom()

    def clear_pending(self):
        self.transcript.setHtml(self._transcript_html)
        self._scroll_to_bottom()

    def set_input(self, text):
        self.input.setText(text)

    def set_busy(self, busy):
        self.input.setEnabled(not busy)
        self.btn_send.setEnabled(not busy)
        self.lbl_busy.setVisible(busy)
        if not busy:
            self.input.setFocus()

    def notify(self, message):
        self.ui_bridge.sig_notice.emit(message)

    def bind_viewport(self):
        self._watched = self.window()
        self._watched.installEventFilter(self)

    def unbind_viewport(self):
        if self._watched is not None:
            self._watched.removeEventFilter(self)
            self._watched = None

    # ---- Qt plumbing ----

    def eventFilter(self, obj, event):
        if obj is self._watched and event.type() == QEvent.Resize:
            QTimer.singleShot(0, self._scroll_to_bottom)
        return super().eventFilter(obj, event)

    def _scroll_to_bottom(self):
        bar = self.transcript.verticalScrollBar()
        bar.setValue(bar.maximum())

    def _send(self):
        self.controller.send(self.input.text())

    def _open_item(self, item):
        if item is None:
            return
        self.controller.open(item.data(Qt.UserRole))

    def _prompt_new(self):
        name, ok = QInputDialog.getText(self, "New Conversation", "Name:", text=UNTITLED)
        if ok:
            self.controller.new(name)

    def _prompt_delete(self):
        item = self.conversation_list.currentItem()
        if item is None:
            return
        summary = self._summaries.get(item.data(Qt.UserRole))
        if summary is None:
            return
        dialog = DeleteConversationDialog(summary, self)
        dialog.exec()
        if dialog.approved:
            self.controller.delete(summary.id)

    def _open_as_note(self):
        if self.controller.current is not None:
            self.ui_bridge.sig_open_note.emit(self.controller.current.path)

    def shutdown(self):
        self.controller.close()
