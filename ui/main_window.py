import logging

from PySide6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QListWidget, QListWidgetItem,
    QSplitter, QDockWidget, QToolBar, QInputDialog,
)
from PySide6.QtCore import Qt
from PySide6.QtGui import QAction, QKeySequence

from engine.refactor import RefactorFlow
from ui.bridge import UIBridge
from ui.editor import NoteEditor
from ui.pages.chat import PageChat
from ui.widgets import RefactorDialog

logger = logging.getLogger(__name__)

NOTICE_MS = 6000


class NoteGPTWindow(QMainWindow):
    def __init__(self, ctx, ui_bridge: UIBridge, runner):
        super().__init__()
        self.ctx = ctx
        self.ui_bridge = ui_bridge
        self.runner = runner
        self._refactor_dialog = None
        self._refactor_flow = None

        self.setWindowTitle(f"NoteGPT - {ctx.vault.root}")
        self.resize(1200, 760)

        # --- NOTES + EDITOR ---
        split = QSplitter(Qt.Horizontal)
        split.setChildrenCollapsible(False)

        notes_panel = QWidget()
        notes_layout = QVBoxLayout(notes_panel)
        notes_layout.setContentsMargins(0, 0, 0, 0)
        self.note_list = QListWidget()
        self.note_list.setObjectName("note_list")
        self.note_list.itemActivated.connect(self._open_note_item)
        notes_layout.addWidget(self.note_list)

        self.editor = NoteEditor()
        self.editor.sig_context_menu.connect(self._extend_editor_menu)

        split.addWidget(notes_panel)
        split.addWidget(self.editor)
        split.setStretchFactor(0, 1)
        split.setStretchFactor(1, 4)
        split.setSizes([220, 700])
        self.setCentralWidget(split)

        # --- CHAT DOCK ---
        self.page_chat = PageChat(ctx, ui_bridge, runner)
        self.chat_dock = QDockWidget("NoteGPT Chat", self)
        self.chat_dock.setObjectName("chat_dock")
        self.chat_dock.setWidget(self.page_chat)
        self.chat_dock.setFeatures(QDockWidget.DockWidgetMovable | QDockWidget.DockWidgetClosable)
        self.addDockWidget(Qt.RightDockWidgetArea, self.chat_dock)

        self._build_actions()
        self.statusBar().showMessage("READY", 2000)

        ui_bridge.sig_notice.connect(self.show_notice)
        ui_bridge.sig_open_note.connect(self.open_note)
        self.refresh_notes()

    def _build_actions(self):
        self.act_refactor = QAction("Refactor selection with NoteGPT", self)
        self.act_refactor.setShortcut(QKeySequence("Ctrl+Shift+R"))
        self.act_refactor.triggered.connect(self.open_refactor)

        act_save = QAction("Save note", self)
        act_save.setShortcut(QKeySequence.Save)
        act_save.triggered.connect(self.save_note)

        act_new_note = QAction("New note…", self)
        act_new_note.setShortcut(QKeySequence.New)
        act_new_note.triggered.connect(self.new_note)

        act_refresh = QAction("Reload note list", self)
        act_refresh.triggered.connect(self.refresh_notes)

        file_menu = self.menuBar().addMenu("&File")
        file_menu.addAction(act_new_note)
        file_menu.addAction(act_save)
        file_menu.addAction(act_refresh)

        notegpt_menu = self.menuBar().addMenu("&NoteGPT")
        notegpt_menu.addAction(self.act_refactor)
        notegpt_menu.addAction(self.chat_dock.toggleViewAction())

        toolbar = QToolBar("NoteGPT")
        toolbar.setObjectName("notegpt_toolbar")
        toolbar.setMovable(False)
        act_ribbon = QAction("✦ Refactor", self)
        act_ribbon.setToolTip("NoteGPT Refactor")
        act_ribbon.triggered.connect(self.open_refactor)
        toolbar.addAction(act_ribbon)
        toolbar.addAction(self.chat_dock.toggleViewAction())
        self.addToolBar(Qt.TopToolBarArea, toolbar)

    # ---- notices ----

    def show_notice(self, message: str):
        self.statusBar().showMessage(message, NOTICE_MS)

    # ---- notes ----

    def refresh_notes(self):
        current = self.editor.note_path
        self.note_list.clear()
        for rel in self.ctx.vault.list_notes(exclude=self.ctx.config.chat_folder):
            item = QListWidgetItem(rel[:-3] if rel.endswith(".md") else rel)
            item.setData(Qt.UserRole, rel)
            self.note_list.addItem(item)
            if rel == current:
                self.note_list.setCurrentItem(item)

    def _open_note_item(self, item):
        if item is not None:
            self.open_note(item.data(Qt.UserRole))

    def open_note(self, rel: str):
        if self.editor.is_dirty():
            self.save_note()
        try:
            text = self.ctx.vault.read(rel)
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Could not open %s: %s", rel, exc)
            self.show_notice(f"Could not open {rel}: {exc}")
            return
        self.editor.load(rel, text)
        self.setWindowTitle(f"NoteGPT - {rel}")

    def save_note(self):
        if self.editor.note_path is None:
            return
        try:
            self.ctx.vault.write(self.editor.note_path, self.editor.toPlainText())
        except OSError as exc:
            logger.warning("Could not save %s: %s", self.editor.note_path, exc)
            self.show_notice(f"Could not save: {exc}")
            return
        self.editor.document().setModified(False)
        self.show_notice(f"Saved {self.editor.note_path}")

    def new_note(self):
        name, ok = QInputDialog.getText(self, "New Note", "Name:")
        name = (name or "").strip().replace("\\", "-")
        if not ok or not name:
            return
        rel = name if name.endswith(".md") else f"{name}.md"
        try:
            if "/" in rel:
                self.ctx.vault.ensure_folder(rel.rsplit("/", 1)[0])
            if not self.ctx.vault.exists(rel):
                self.ctx.vault.write(rel, "")
        except (OSError, ValueError) as exc:
            self.show_notice(f"Could not create note: {exc}")
            return
        self.refresh_notes()
        self.open_note(rel)

    # ---- refactor ----

    def _extend_editor_menu(self, menu, editor):
        if not editor.get_selection():
            return
        menu.addSeparator()
        act = menu.addAction("NoteGPT: Refactor selection")
        act.triggered.connect(self.open_refactor)

    def open_refactor(self):
        if self.editor.note_path is None:
            self.show_notice("No active editor")
            return
        if self._refactor_flow is not None and self._refactor_flow.busy:
            return
        dialog = RefactorDialog(self, self.ui_bridge)
        flow = RefactorFlow(self.ctx.client, self.editor, dialog, self.runner)
        dialog.sig_submit.connect(flow.submit)
        dialog.sig_cancel.connect(flow.cancel)
        dialog.finished.connect(dialog.deleteLater)
        self._refactor_dialog = dialog
        self._refactor_flow = flow
        flow.start()

    # ---- lifecycle ----

    def closeEvent(self, event):
        if self.editor.is_dirty():
            self.save_note()
        self.page_chat.shutdown()
        super().closeEvent(event)
