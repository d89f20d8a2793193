from __future__ import annotations

import logging
from dataclasses import dataclass, field

from core.config import NoteConfig
from engine.chat_store import ChatStore
from engine.completion import CompletionClient
from engine.vault import Vault

logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    """Everything built once at startup and shared by the views."""

    config: NoteConfig
    vault: Vault
    store: ChatStore
    client: CompletionClient
    _closers: list = field(default_factory=list)

    @classmethod
    def from_config(cls, config: NoteConfig) -> "AppContext":
        vault = Vault(config.vault)
        vault.root.mkdir(parents=True, exist_ok=True)
        return cls(
            config=config,
            vault=vault,
            store=ChatStore(vault, config.chat_folder),
            client=CompletionClient(config),
        )

    def on_shutdown(self, callback) -> None:
        self._closers.append(callback)

    def shutdown(self) -> None:
        while self._closers:
            callback = self._closers.pop()
            try:
                callback()
            except Exception:
                logger.exception("Shutdown hook failed")
        self.client.close()
