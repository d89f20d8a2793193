from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from typing import Callable, Optional

from core.paths import CONFIG_PATH, DEFAULT_VAULT_ROOT

DEFAULT_ENDPOINT = "https://api.openai.com/v1/chat/completions"
DEFAULT_MODEL = "gpt-4o-mini"
DEFAULT_TEMPERATURE = 0.3
DEFAULT_MAX_TOKENS = 800
DEFAULT_SYSTEM = "You are a terse expert editor. Refactor clearly, preserve meaning."
DEFAULT_INSTRUCTION = "Refactor the following text."
DEFAULT_CHAT_FOLDER = "NoteGPT Chats"
DEFAULT_THEME = "midnight"

CHAT_SYSTEM_PROMPT = """
You are NoteGPT, an assistant living inside the user's notes.

- The conversation so far is given as a markdown transcript.
- Lines starting with **You:** are the user, lines starting with **Assistant:** are you.
- Reply only to the latest **You:** message.
- Answer in markdown. Do not prefix your answer with a speaker label.
""".strip()


@dataclass(frozen=True)
class NoteConfig:
    api_key: Optional[str] = None
    endpoint: str = DEFAULT_ENDPOINT
    model: str = DEFAULT_MODEL
    temperature: float = DEFAULT_TEMPERATURE
    max_tokens: int = DEFAULT_MAX_TOKENS
    system: str = DEFAULT_SYSTEM
    extra_headers: dict[str, str] = field(default_factory=dict)
    chat_folder: str = DEFAULT_CHAT_FOLDER
    chat_system: str = CHAT_SYSTEM_PROMPT
    timeout: Optional[float] = None
    vault: Path = DEFAULT_VAULT_ROOT
    theme: str = DEFAULT_THEME
    log_level: str = "INFO"

    @classmethod
    def from_dict(cls, data: dict) -> "NoteConfig":
        """Build a config from the raw JSON object, ignoring ill-typed values."""
        defaults = cls()
        max_tokens = data.get("maxTokens", data.get("max_tokens"))
        headers = data.get("extraHeaders")
        if isinstance(headers, dict):
            headers = {str(k): str(v) for k, v in headers.items()}
        else:
            headers = {}
        timeout = _float(data.get("timeout"))
        return cls(
            api_key=_text(data.get("apiKey")),
            endpoint=_text(data.get("endpoint")) or defaults.endpoint,
            model=_text(data.get("model")) or defaults.model,
            temperature=_float(data.get("temperature"), defaults.temperature),
            max_tokens=int(max_tokens) if _is_int(max_tokens) else defaults.max_tokens,
            system=_text(data.get("system")) or defaults.system,
            extra_headers=headers,
            chat_folder=_folder(data.get("chatFolder")) or defaults.chat_folder,
            chat_system=_text(data.get("chatSystem")) or defaults.chat_system,
            timeout=timeout if timeout is not None and timeout > 0 else None,
            vault=_vault(data.get("vault")) or defaults.vault,
            theme=_text(data.get("theme")) or defaults.theme,
            log_level=_text(data.get("logLevel")) or defaults.log_level,
        )


def _text(value) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _float(value, default=None) -> Optional[float]:
    if not _is_number(value):
        return default
    try:
        return float(value)
    except OverflowError:
        return default


def _folder(value) -> Optional[str]:
    """A vault-relative folder; absolute paths and ".." are refused."""
    text = _text(value)
    if text is None:
        return None
    path = PurePosixPath(text.replace("\\", "/"))
    if path.is_absolute() or ".." in path.parts or not path.parts:
        return None
    return path.as_posix()


def _vault(value) -> Optional[Path]:
    text = _text(value)
    if text is None:
        return None
    try:
        return Path(text).expanduser()
    except RuntimeError:
        # "~user" with no such user
        return None


def _read_text(path) -> str:
    return Path(path).read_text(encoding="utf-8")


def load_config(path=CONFIG_PATH, read: Callable[[object], str] | None = None) -> NoteConfig:
    """Load the per-install config; a missing or broken file yields the defaults."""
    reader = read or _read_text
    try:
        data = json.loads(reader(path))
    except Exception:
        return NoteConfig()
    if not isinstance(data, dict):
        return NoteConfig()
    try:
        return NoteConfig.from_dict(data)
    except Exception:
        return NoteConfig()
