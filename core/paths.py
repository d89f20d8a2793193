from __future__ import annotations

from pathlib import Path


CONFIG_DIR = (Path.home() / ".notegpt").resolve()
CONFIG_PATH = CONFIG_DIR / "config.json"

DEFAULT_VAULT_ROOT = (Path.home() / "NoteGPT").resolve()
