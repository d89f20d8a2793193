"""
Startup wiring and ordered shutdown.
"""

from core.config import NoteConfig
from engine.context import AppContext


def _ctx(tmp_path):
    return AppContext.from_config(NoteConfig(vault=tmp_path / "vault", chat_folder="Chats"))


class TestFromConfig:
    def test_creates_vault_root(self, tmp_path):
        ctx = _ctx(tmp_path)
        assert (tmp_path / "vault").is_dir()
        assert ctx.store.chat_folder == "Chats"
        assert ctx.store.vault is ctx.vault
        assert ctx.client.config is ctx.config


class TestShutdown:
    def test_hooks_run_last_registered_first(self, tmp_path):
        ctx = _ctx(tmp_path)
        order = []
        ctx.on_shutdown(lambda: order.append("runner"))
        ctx.on_shutdown(lambda: order.append("page"))
        ctx.shutdown()
        assert order == ["page", "runner"]

    def test_failing_hook_does_not_stop_the_rest(self, tmp_path):
        ctx = _ctx(tmp_path)
        ran = []

        def _boom():
            raise RuntimeError("boom")

        ctx.on_shutdown(lambda: ran.append(True))
        ctx.on_shutdown(_boom)
        ctx.shutdown()
        assert ran == [True]

    def test_second_shutdown_is_harmless(self, tmp_path):
        ctx = _ctx(tmp_path)
        calls = []
        ctx.on_shutdown(lambda: calls.append(1))
        ctx.shutdown()
        ctx.shutdown()
        assert calls == [1]

    def test_client_closed_after_hooks(self, tmp_path):
        ctx = _ctx(tmp_path)
        http = ctx.client._client()
        seen = []
        ctx.on_shutdown(lambda: seen.append(http.is_closed))
        ctx.shutdown()
        assert seen == [False]
        assert http.is_closed
