from __future__ import annotations

import logging
from enum import Enum
from typing import Protocol

from core.errors import NoteGPTError
from engine.chat_store import ChatStore, Conversation, ConversationSummary, Speaker
from engine.tasks import TaskRunner

logger = logging.getLogger(__name__)

CHAT_INSTRUCTION = (
    "Continue this conversation. Reply to the latest **You:** message in the transcript below."
)


class ChatScreen(Enum):
    LIST = "list"
    OPEN = "open"


class Completer(Protocol):
    def complete(self, instruction: str, content: str, system: str | None = None) -> str: ...


class ChatPresenter(Protocol):
    def show_list(self, conversations: list[ConversationSummary]) -> None: ...
    def show_conversation(self, conversation: Conversation, transcript: str) -> None: ...
    def show_pending_turn(self, text: str) -> None: ...
    def clear_pending(self) -> None: ...
    def set_input(self, text: str) -> None: ...
    def set_busy(self, busy: bool) -> None: ...
    def notify(self, message: str) -> None: ...
    def bind_viewport(self) -> None: ...
    def unbind_viewport(self) -> None: ...


class ChatSessionController:
    """Two-screen chat flow: conversation list, then one open conversation."""

    def __init__(
        self,
        store: ChatStore,
        completer: Completer,
        presenter: ChatPresenter,
        runner: TaskRunner,
        system_prompt: str | None = None,
    ):
        self.store = store
        self.completer = completer
        self.presenter = presenter
        self.runner = runner
        self.system_prompt = system_prompt
        self.screen = ChatScreen.LIST
        self.current: Conversation | None = None
        self.busy = False
        self._viewport_bound = False

    # ------------------------------------------------------------ navigation

    def show_list(self) -> None:
        self._leave_open()
        self.screen = ChatScreen.LIST
        self.current = None
        try:
            conversations = self.store.list_conversations()
        except NoteGPTError as exc:
            logger.warning("Listing conversations failed: %s", exc)
            self.presenter.notify(str(exc))
            conversations = []
        self.presenter.show_list(conversations)

    def open(self, conversation_id: str) -> None:
        try:
            conversation = self.store.get(conversation_id)
        except NoteGPTError as exc:
            self.presenter.notify(str(exc))
            self.show_list()
            return
        self._enter_open(conversation)

    def new(self, display_name: str | None = None) -> Conversation | None:
        try:
            conversation = self.store.create_conversation(display_name)
        except NoteGPTError as exc:
            logger.warning("Creating conversation failed: %s", exc)
            self.presenter.notify(str(exc))
            return None
        self._enter_open(conversation)
        return conversation

    def delete(self, conversation_id: str) -> None:
        try:
            conversation = self.store.get(conversation_id)
            self.store.delete_conversation(conversation)
        except NoteGPTError as exc:
            logger.warning("Deleting conversation failed: %s", exc)
            self.presenter.notify(str(exc))
        self.show_list()

    def back(self) -> None:
        self.show_list()

    def close(self) -> None:
        """Tear down when the view itself goes away."""
        self._leave_open()
        self.screen = ChatScreen.LIST
        self.current = None

    def _enter_open(self, conversation: Conversation) -> None:
        try:
            transcript = self.store.read_transcript(conversation)
        except NoteGPTError as exc:
            self.presenter.notify(str(exc))
            self.show_list()
            return
        self.screen = ChatScreen.OPEN
        self.current = conversation
        self.presenter.show_conversation(conversation, transcript)
        if not self._viewport_bound:
            self.presenter.bind_viewport()
            self._viewport_bound = True

    def _leave_open(self) -> None:
        if self._viewport_bound:
            self.presenter.unbind_viewport()
            self._viewport_bound = False

    # -------------------------------------------------------------- messaging

    def send(self, text: str) -> bool:
        """Store the user turn, then ask for the assistant reply in the background."""
        if self.screen is not ChatScreen.OPEN or self.current is None:
            return False
        if self.busy or not text or not text.strip():
            return False

        conversation = self.current
        try:
            self.store.append_turn(conversation, Speaker.USER, text)
        except NoteGPTError as exc:
            logger.warning("Storing user turn failed: %s", exc)
            self.presenter.set_input(text)
            self.presenter.notify(str(exc))
            return False

        self.busy = True
        self.presenter.set_input("")
        self.presenter.show_pending_turn(text)
        self.presenter.set_busy(True)

        def _ask():
            transcript = self.store.read_transcript(conversation)
            return self.completer.complete(CHAT_INSTRUCTION, transcript, system=self.system_prompt)

        self.runner.run(
            _ask,
            lambda reply: self._on_reply(conversation, reply),
            lambda exc: self._on_failure(conversation, text, exc),
        )
        return True

    def _on_reply(self, conversation: Conversation, reply) -> None:
        self.busy = False
        self.presenter.set_busy(False)
        try:
            self.store.append_turn(conversation, Speaker.ASSISTANT, str(reply))
        except NoteGPTError as exc:
            logger.warning("Storing assistant turn failed: %s", exc)
            self.presenter.clear_pending()
            self.presenter.notify(str(exc))
            return
        if self.screen is ChatScreen.OPEN and self.current == conversation:
            self._rerender()

    def _on_failure(self, conversation: Conversation, text: str, exc: Exception) -> None:
        self.busy = False
        self.presenter.set_busy(False)
        if isinstance(exc, NoteGPTError):
            logger.warning("Chat completion failed: %s", exc)
        else:
            logger.error("Chat completion crashed", exc_info=exc)
        if self.screen is ChatScreen.OPEN and self.current == conversation:
            self.presenter.clear_pending()
            self.presenter.set_input(text)
        self.presenter.notify(str(exc) or exc.__class__.__name__)

    def _rerender(self) -> None:
        try:
            transcript = self.store.read_transcript(self.current)
        except NoteGPTError as exc:
            self.presenter.notify(str(exc))
            return
        self.presenter.show_conversation(self.current, transcript)
