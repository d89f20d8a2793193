from __future__ import annotations

import re

from markdown import markdown

from engine.chat_store import Speaker

_PARAGRAPH = re.compile(r"<p>(\s*<strong>(You|Assistant):</strong>)")

PENDING_HTML = "<p class='pending'>Assistant is thinking…</p>"


def markdown_to_html(text: str) -> str:
    return markdown(text or "", extensions=["fenced_code", "tables", "sane_lists"])


def classify_turns(html: str) -> str:
    """Tag rendered paragraphs that start with a speaker label, for styling only."""

    def _tag(match: re.Match) -> str:
        cls = "turn-user" if match.group(2) == Speaker.USER.value else "turn-assistant"
        return f"<p class='{cls}'>{match.group(1)}"

    return _PARAGRAPH.sub(_tag, html)


def render_transcript(raw: str) -> str:
    return classify_turns(markdown_to_html(raw))


def render_pending_turn(text: str) -> str:
    return classify_turns(markdown_to_html(f"{Speaker.USER.marker} {text}")) + PENDING_HTML


def transcript_stylesheet(user_color: str, assistant_color: str, dim_color: str) -> str:
    return (
        f"p.turn-user {{ color: {user_color}; margin-top: 10px; }}"
        f"p.turn-assistant {{ color: {assistant_color}; margin-top: 10px; }}"
        f"p.pending {{ color: {dim_color}; font-style: italic; }}"
        f"pre {{ font-family: Consolas, monospace; }}"
    )
