"""
Conversation persistence.

Each conversation is a folder under the chat folder of the vault holding one
markdown transcript, ``chat.md``. The transcript is a header followed by
append-only turn blocks::

    # My Chat

    Created: 2026-10-18 14:03:22

    ---

    **You:** Hello

    **Assistant:** Hi there

The file is the only source of truth: nothing here caches turns, and turns are
recovered by scanning the raw text for the two speaker markers. A message line
that starts with a marker is stored behind a backslash (``\\**You:**``) and
unescaped on read.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import PurePosixPath
from typing import Callable

from core.errors import StorageError
from engine.vault import Vault

logger = logging.getLogger(__name__)

TRANSCRIPT_NAME = "chat.md"
UNTITLED = "Untitled"

_STAMP_FORMAT = "%Y-%m-%d-%H-%M-%S"
_CREATED_FORMAT = "%Y-%m-%d %H:%M:%S"
_UNSAFE_CHARS = re.compile(r'[\\/:*?"<>|]')
_STAMP_PREFIX = re.compile(r"^(\d{4}-\d{2}-\d{2}-\d{2}-\d{2}-\d{2})-(.*)$")


class Speaker(Enum):
    USER = "You"
    ASSISTANT = "Assistant"

    @property
    def marker(self) -> str:
        return f"**{self.value}:**"


_MARKERS = "|".join(re.escape(s.marker) for s in Speaker)
# a stored line starting with a marker, behind any number of backslashes
_MARKER_LINE = re.compile(rf"^\\*(?:{_MARKERS})", re.M)
_ESCAPED_MARKER_LINE = re.compile(rf"^\\(\\*(?:{_MARKERS}))", re.M)


@dataclass(frozen=True)
class Turn:
    speaker: Speaker
    text: str


@dataclass(frozen=True)
class Conversation:
    id: str
    display_name: str
    created_at: datetime
    path: str


@dataclass(frozen=True)
class ConversationSummary:
    conversation: Conversation
    modified_at: datetime

    @property
    def id(self) -> str:
        return self.conversation.id

    @property
    def display_name(self) -> str:
        return self.conversation.display_name


def sanitize_name(name: str) -> str:
    return _UNSAFE_CHARS.sub("-", name)


def escape_markers(text: str) -> str:
    """Backslash any line of a message that would otherwise read as a new turn."""
    return _MARKER_LINE.sub(lambda m: "\\" + m.group(0), text)


def unescape_markers(text: str) -> str:
    return _ESCAPED_MARKER_LINE.sub(lambda m: m.group(1), text)


def format_turn(speaker: Speaker, text: str) -> str:
    return f"\n{speaker.marker} {escape_markers(text)}\n"


def transcript_header(display_name: str, created_at: datetime) -> str:
    return f"# {display_name}\n\nCreated: {created_at.strftime(_CREATED_FORMAT)}\n\n---\n"


def parse_turns(raw: str) -> list[Turn]:
    """Recover the ordered turns of a transcript from its speaker markers."""
    turns: list[Turn] = []
    speaker: Speaker | None = None
    lines: list[str] = []

    def _flush():
        if speaker is not None:
            turns.append(Turn(speaker, unescape_markers("\n".join(lines).strip())))

    for line in raw.split("\n"):
        matched = next((s for s in Speaker if line.startswith(s.marker)), None)
        if matched is not None:
            _flush()
            speaker = matched
            lines = [line[len(matched.marker):].lstrip()]
        elif speaker is not None:
            lines.append(line)
    _flush()
    return turns


class ChatStore:
    def __init__(
        self,
        vault: Vault,
        chat_folder: str,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.vault = vault
        self.chat_folder = PurePosixPath(chat_folder).as_posix()
        self._clock = clock

    # ---------------------------------------------------------------- reading

    def list_conversations(self) -> list[ConversationSummary]:
        summaries = []
        try:
            folders = self.vault.list_folders(self.chat_folder)
        except (OSError, ValueError) as exc:
            raise StorageError(f"Could not list {self.chat_folder}: {exc}") from exc
        for folder in folders:
            transcript = f"{folder}/{TRANSCRIPT_NAME}"
            if not self.vault.exists(transcript):
                continue
            try:
                modified = datetime.fromtimestamp(self.vault.mtime(transcript))
                conversation = self._load(folder)
            except (OSError, UnicodeDecodeError) as exc:
                logger.warning("Skipping unreadable conversation %s: %s", folder, exc)
                continue
            summaries.append(ConversationSummary(conversation, modified))
        summaries.sort(key=lambda s: s.modified_at, reverse=True)
        return summaries

    def get(self, conversation_id: str) -> Conversation:
        folder = f"{self.chat_folder}/{conversation_id}"
        try:
            found = self.vault.exists(f"{folder}/{TRANSCRIPT_NAME}")
        except ValueError as exc:
            raise StorageError(f"No conversation named {conversation_id}") from exc
        if not found:
            raise StorageError(f"No conversation named {conversation_id}")
        try:
            return self._load(folder)
        except (OSError, UnicodeDecodeError) as exc:
            raise StorageError(f"Could not read {conversation_id}: {exc}") from exc

    def read_transcript(self, conversation: Conversation) -> str:
        try:
            return self.vault.read(conversation.path)
        except (OSError, UnicodeDecodeError, ValueError) as exc:
            raise StorageError(f"Could not read {conversation.path}: {exc}") from exc

    def turns(self, conversation: Conversation) -> list[Turn]:
        return parse_turns(self.read_transcript(conversation))

    def _load(self, folder: str) -> Conversation:
        conversation_id = PurePosixPath(folder).name
        created_at = None
        fallback_name = conversation_id
        match = _STAMP_PREFIX.match(conversation_id)
        if match:
            created_at = datetime.strptime(match.group(1), _STAMP_FORMAT)
            fallback_name = match.group(2)
        transcript = f"{folder}/{TRANSCRIPT_NAME}"
        title = None
        for line in self.vault.read(transcript).splitlines():
            if line.startswith("# ") and title is None:
                title = line[2:].strip()
            elif line.startswith("Created: ") and created_at is None:
                try:
                    created_at = datetime.strptime(line[len("Created: "):].strip(), _CREATED_FORMAT)
                except ValueError:
                    pass
            elif line.strip() == "---":
                break
        if created_at is None:
            created_at = datetime.fromtimestamp(self.vault.mtime(transcript))
        return Conversation(
            id=conversation_id,
            display_name=title or fallback_name or UNTITLED,
            created_at=created_at,
            path=transcript,
        )

    # --------------------------------------------------------------- mutating

    def create_conversation(self, display_name: str | None = None) -> Conversation:
        # the name becomes the header line, so it must stay on one line
        name = re.sub(r"[\r\n]+", " ", (display_name or "")).strip() or UNTITLED
        created_at = self._clock().replace(microsecond=0)
        base = f"{created_at.strftime(_STAMP_FORMAT)}-{sanitize_name(name)}"
        try:
            self.vault.ensure_folder(self.chat_folder)
            conversation_id = base
            suffix = 2
            while True:
                try:
                    self.vault.create_folder(f"{self.chat_folder}/{conversation_id}")
                    break
                except FileExistsError:
                    conversation_id = f"{base}-{suffix}"
                    suffix += 1
            path = f"{self.chat_folder}/{conversation_id}/{TRANSCRIPT_NAME}"
            self.vault.write(path, transcript_header(name, created_at))
        except (OSError, ValueError) as exc:
            raise StorageError(f"Could not create conversation {name!r}: {exc}") from exc
        logger.info("Created conversation %s", conversation_id)
        return Conversation(id=conversation_id, display_name=name, created_at=created_at, path=path)

    def append_turn(self, conversation: Conversation, speaker: Speaker, text: str) -> None:
        try:
            self.vault.append(conversation.path, format_turn(speaker, text))
        except (OSError, ValueError) as exc:
            raise StorageError(f"Could not append to {conversation.path}: {exc}") from exc

    def delete_conversation(self, conversation: Conversation) -> None:
        folder = str(PurePosixPath(conversation.path).parent)
        try:
            self.vault.remove_tree(folder)
        except (OSError, ValueError) as exc:
            raise StorageError(f"Could not delete {conversation.id}: {exc}") from exc
        logger.info("Deleted conversation %s", conversation.id)
