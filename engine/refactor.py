from __future__ import annotations

import logging
from typing import Protocol

from core.errors import EmptySelectionError, NoteGPTError
from engine.chat_session import Completer
from engine.tasks import TaskRunner

logger = logging.getLogger(__name__)


class EditorHandle(Protocol):
    def get_selection(self) -> str: ...
    def replace_selection(self, text: str) -> None: ...


class RefactorPresenter(Protocol):
    def open(self, selection: str) -> None: ...
    def close(self) -> None: ...
    def set_busy(self, busy: bool) -> None: ...
    def notify(self, message: str) -> None: ...


class RefactorFlow:
    """Rewrite the editor selection with one completion call."""

    def __init__(
        self,
        completer: Completer,
        editor: EditorHandle,
        presenter: RefactorPresenter,
        runner: TaskRunner,
    ):
        self.completer = completer
        self.editor = editor
        self.presenter = presenter
        self.runner = runner
        self.selection = ""
        self.busy = False
        self.is_open = False

    def start(self) -> None:
        self.selection = str(self.editor.get_selection() or "")
        self.is_open = True
        self.presenter.open(self.selection)

    def submit(self, instruction: str) -> bool:
        if self.busy or not self.is_open:
            return False
        try:
            selection = self.current_selection()
        except EmptySelectionError as exc:
            self.presenter.notify(str(exc))
            return False

        self.busy = True
        self.presenter.set_busy(True)
        self.runner.run(
            lambda: self.completer.complete(instruction or "", selection),
            self._on_result,
            self._on_failure,
        )
        return True

    def current_selection(self) -> str:
        # re-read: the selection may have moved while the dialog was open
        selection = str(self.editor.get_selection() or self.selection)
        if not selection:
            raise EmptySelectionError()
        return selection

    def cancel(self) -> bool:
        if self.busy:
            return False
        self.is_open = False
        self.presenter.close()
        return True

    def _on_result(self, result) -> None:
        self.busy = False
        self.presenter.set_busy(False)
        self.editor.replace_selection(str(result))
        self.is_open = False
        self.presenter.close()

    def _on_failure(self, exc: Exception) -> None:
        self.busy = False
        if isinstance(exc, NoteGPTError):
            logger.warning("Refactor failed: %s", exc)
        else:
            logger.error("Refactor crashed", exc_info=exc)
        self.presenter.set_busy(False)
        self.presenter.notify(str(exc) or exc.__class__.__name__)
