"""
Chat controller driven end to end against a real store, a scripted completer
and a presenter that records what it was asked to show.
"""

from datetime import datetime

import pytest

from core.errors import ApiError, StorageError
from engine.chat_session import CHAT_INSTRUCTION, ChatScreen, ChatSessionController
from engine.chat_store import ChatStore, Speaker, Turn
from engine.tasks import ImmediateRunner
from engine.vault import Vault


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

class _Presenter:
    def __init__(self):
        self.calls = []
        self.input = ""
        self.busy = False
        self.notices = []
        self.listed = None
        self.shown = None
        self.bound = 0

    def show_list(self, conversations):
        self.calls.append("show_list")
        self.listed = list(conversations)

    def show_conversation(self, conversation, transcript):
        self.calls.append("show_conversation")
        self.shown = (conversation, transcript)

    def show_pending_turn(self, text):
        self.calls.append(("pending", text))

    def clear_pending(self):
        self.calls.append("clear_pending")

    def set_input(self, text):
        self.calls.append(("input", text))
        self.input = text

    def set_busy(self, busy):
        self.calls.append(("busy", busy))
        self.busy = busy

    def notify(self, message):
        self.notices.append(message)

    def bind_viewport(self):
        self.bound += 1

    def unbind_viewport(self):
        self.bound -= 1


class _Completer:
    def __init__(self, reply="Hi there", error=None):
        self.reply = reply
        self.error = error
        self.requests = []

    def complete(self, instruction, content, system=None):
        self.requests.append((instruction, content, system))
        if self.error is not None:
            raise self.error
        return self.reply


class _HeldRunner:
    """Keeps the task until the test releases it."""

    def __init__(self):
        self.pending = []

    def run(self, fn, on_success, on_failure):
        self.pending.append((fn, on_success, on_failure))

    def release(self):
        fn, on_success, on_failure = self.pending.pop(0)
        ImmediateRunner().run(fn, on_success, on_failure)


@pytest.fixture
def store(tmp_path):
    return ChatStore(Vault(tmp_path), "NoteGPT Chats", clock=lambda: datetime(2026, 10, 18, 14, 3, 22))


@pytest.fixture
def presenter():
    return _Presenter()


def _controller(store, presenter, completer=None, runner=None, system_prompt="be brief"):
    return ChatSessionController(
        store,
        completer or _Completer(),
        presenter,
        runner or ImmediateRunner(),
        system_prompt=system_prompt,
    )


# ---------------------------------------------------------------------------
# Navigation
# ---------------------------------------------------------------------------

class TestNavigation:
    def test_starts_on_empty_list(self, store, presenter):
        ctl = _controller(store, presenter)
        ctl.show_list()
        assert ctl.screen is ChatScreen.LIST
        assert presenter.listed == []

    def test_new_opens_conversation(self, store, presenter):
        ctl = _controller(store, presenter)
        conv = ctl.new("Demo")
        assert ctl.screen is ChatScreen.OPEN
        assert ctl.current == conv
        assert presenter.shown[0] == conv
        assert presenter.shown[1].startswith("# Demo")

    def test_open_existing(self, store, presenter):
        conv = store.create_conversation("Demo")
        ctl = _controller(store, presenter)
        ctl.show_list()
        ctl.open(conv.id)
        assert ctl.screen is ChatScreen.OPEN
        assert ctl.current == conv

    def test_open_unknown_notifies_and_lists(self, store, presenter):
        ctl = _controller(store, presenter)
        ctl.open("missing")
        assert ctl.screen is ChatScreen.LIST
        assert presenter.notices
        assert presenter.calls[-1] == "show_list"

    def test_back_returns_to_list(self, store, presenter):
        ctl = _controller(store, presenter)
        conv = ctl.new("Demo")
        ctl.back()
        assert ctl.screen is ChatScreen.LIST
        assert ctl.current is None
        assert [s.id for s in presenter.listed] == [conv.id]

    def test_viewport_bound_while_open(self, store, presenter):
        ctl = _controller(store, presenter)
        ctl.show_list()
        assert presenter.bound == 0
        ctl.new("Demo")
        assert presenter.bound == 1
        ctl.back()
        assert presenter.bound == 0

    def test_viewport_bound_once_across_reopens(self, store, presenter):
        ctl = _controller(store, presenter)
        conv = ctl.new("Demo")
        ctl.send("Hello")
        ctl.open(conv.id)
        assert presenter.bound == 1

    def test_close_releases_viewport(self, store, presenter):
        ctl = _controller(store, presenter)
        ctl.new("Demo")
        ctl.close()
        assert presenter.bound == 0
        ctl.close()
        assert presenter.bound == 0

    def test_delete_removes_and_relists(self, store, presenter):
        conv = store.create_conversation("Demo")
        ctl = _controller(store, presenter)
        ctl.show_list()
        ctl.delete(conv.id)
        assert presenter.listed == []
        assert store.list_conversations() == []

    def test_delete_unknown_notifies(self, store, presenter):
        ctl = _controller(store, presenter)
        ctl.delete("missing")
        assert presenter.notices
        assert presenter.calls[-1] == "show_list"


# ---------------------------------------------------------------------------
# Messaging
# ---------------------------------------------------------------------------

class TestSend:
    def test_round_trip(self, store, presenter):
        completer = _Completer("Hi there")
        ctl = _controller(store, presenter, completer)
        conv = ctl.new("Demo")
        assert ctl.send("Hello") is True

        assert store.turns(conv) == [
            Turn(Speaker.USER, "Hello"),
            Turn(Speaker.ASSISTANT, "Hi there"),
        ]
        raw = store.read_transcript(conv)
        assert raw.index("**You:** Hello") < raw.index("**Assistant:** Hi there")
        assert presenter.shown[1] == raw
        assert presenter.busy is False
        assert presenter.input == ""
        assert ctl.busy is False

    def test_completer_sees_transcript_with_user_turn(self, store, presenter):
        completer = _Completer()
        ctl = _controller(store, presenter, completer, system_prompt="be brief")
        ctl.new("Demo")
        ctl.send("Hello")
        [(instruction, content, system)] = completer.requests
        assert instruction == CHAT_INSTRUCTION
        assert content.startswith("# Demo")
        assert content.endswith("**You:** Hello\n")
        assert system == "be brief"

    def test_ui_order_before_reply(self, store, presenter):
        runner = _HeldRunner()
        ctl = _controller(store, presenter, runner=runner)
        ctl.new("Demo")
        presenter.calls.clear()
        ctl.send("Hello")
        assert presenter.calls == [("input", ""), ("pending", "Hello"), ("busy", True)]
        assert ctl.busy is True

    def test_user_turn_stored_before_reply(self, store, presenter):
        runner = _HeldRunner()
        ctl = _controller(store, presenter, runner=runner)
        conv = ctl.new("Demo")
        ctl.send("Hello")
        assert store.turns(conv) == [Turn(Speaker.USER, "Hello")]
        runner.release()
        assert len(store.turns(conv)) == 2

    def test_failure_keeps_user_turn_and_restores_input(self, store, presenter):
        completer = _Completer(error=ApiError(401, "unauthorized"))
        ctl = _controller(store, presenter, completer)
        conv = ctl.new("Demo")
        ctl.send("Hello")

        assert store.turns(conv) == [Turn(Speaker.USER, "Hello")]
        assert presenter.input == "Hello"
        assert "clear_pending" in presenter.calls
        assert presenter.notices == ["API 401: unauthorized"]
        assert presenter.busy is False
        assert ctl.busy is False

    def test_unexpected_failure_still_recovers(self, store, presenter):
        completer = _Completer(error=RuntimeError())
        ctl = _controller(store, presenter, completer)
        ctl.new("Demo")
        ctl.send("Hello")
        assert presenter.notices == ["RuntimeError"]
        assert ctl.busy is False

    def test_second_send_ignored_while_busy(self, store, presenter):
        completer = _Completer()
        runner = _HeldRunner()
        ctl = _controller(store, presenter, completer, runner)
        conv = ctl.new("Demo")
        assert ctl.send("first") is True
        assert ctl.send("second") is False
        assert len(runner.pending) == 1
        runner.release()
        assert [t.text for t in store.turns(conv)] == ["first", "Hi there"]

    @pytest.mark.parametrize("text", ["", "   ", "\n\t"])
    def test_blank_input_ignored(self, store, presenter, text):
        completer = _Completer()
        ctl = _controller(store, presenter, completer)
        conv = ctl.new("Demo")
        assert ctl.send(text) is False
        assert completer.requests == []
        assert store.turns(conv) == []

    def test_send_ignored_on_list_screen(self, store, presenter):
        completer = _Completer()
        ctl = _controller(store, presenter, completer)
        ctl.show_list()
        assert ctl.send("Hello") is False
        assert completer.requests == []

    def test_reply_after_leaving_is_stored_not_shown(self, store, presenter):
        runner = _HeldRunner()
        ctl = _controller(store, presenter, runner=runner)
        conv = ctl.new("Demo")
        ctl.send("Hello")
        ctl.back()
        presenter.calls.clear()
        runner.release()
        assert "show_conversation" not in presenter.calls
        assert [t.speaker for t in store.turns(conv)] == [Speaker.USER, Speaker.ASSISTANT]

    def test_failure_after_leaving_does_not_touch_input(self, store, presenter):
        runner = _HeldRunner()
        completer = _Completer(error=ApiError(500, "boom"))
        ctl = _controller(store, presenter, completer, runner)
        ctl.new("Demo")
        ctl.send("Hello")
        ctl.back()
        presenter.calls.clear()
        runner.release()
        assert ("input", "Hello") not in presenter.calls
        assert presenter.notices == ["API 500: boom"]

    def test_storage_failure_on_user_turn(self, store, presenter, monkeypatch):
        completer = _Completer()
        ctl = _controller(store, presenter, completer)
        ctl.new("Demo")

        def _fail(*args, **kwargs):
            raise StorageError("disk full")

        monkeypatch.setattr(store, "append_turn", _fail)
        assert ctl.send("Hello") is False
        assert presenter.input == "Hello"
        assert presenter.notices == ["disk full"]
        assert completer.requests == []
        assert ctl.busy is False


class TestBadChatFolder:
    def test_listing_notifies_instead_of_raising(self, tmp_path, presenter):
        store = ChatStore(Vault(tmp_path), "/tmp/elsewhere")
        ctl = _controller(store, presenter)
        ctl.show_list()
        assert presenter.listed == []
        assert len(presenter.notices) == 1

    def test_new_notifies_and_stays_on_list(self, tmp_path, presenter):
        store = ChatStore(Vault(tmp_path), "../chats")
        ctl = _controller(store, presenter)
        ctl.show_list()
        assert ctl.new("Demo") is None
        assert ctl.screen is ChatScreen.LIST
        assert presenter.notices
