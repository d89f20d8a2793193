"""
Transcript rendering; markdown only, no Qt needed.
"""

from ui.render import (
    PENDING_HTML,
    classify_turns,
    markdown_to_html,
    render_pending_turn,
    render_transcript,
    transcript_stylesheet,
)


RAW = (
    "# Demo\n\nCreated: 2026-10-18 14:03:22\n\n---\n"
    "\n**You:** Hello\n"
    "\n**Assistant:** Hi there\n"
)


class TestRenderTranscript:
    def test_header_is_heading(self):
        assert "<h1>Demo</h1>" in render_transcript(RAW)

    def test_turns_tagged_by_speaker(self):
        html = render_transcript(RAW)
        assert "<p class='turn-user'><strong>You:</strong> Hello</p>" in html
        assert "<p class='turn-assistant'><strong>Assistant:</strong> Hi there</p>" in html

    def test_user_before_assistant(self):
        html = render_transcript(RAW)
        assert html.index("turn-user") < html.index("turn-assistant")

    def test_assistant_markdown_rendered(self):
        raw = RAW + "\n**Assistant:** see\n\n```\ncode()\n```\n"
        assert "<code>code()" in render_transcript(raw)

    def test_empty(self):
        assert render_transcript("") == ""


class TestClassifyTurns:
    def test_plain_paragraph_untouched(self):
        assert classify_turns("<p>just text</p>") == "<p>just text</p>"

    def test_bold_elsewhere_untouched(self):
        html = markdown_to_html("some **You:** inline")
        assert "turn-user" not in classify_turns(html)


class TestPending:
    def test_pending_shows_user_text_and_placeholder(self):
        html = render_pending_turn("Hello")
        assert "turn-user" in html
        assert "Hello" in html
        assert html.endswith(PENDING_HTML)


def test_stylesheet_uses_colors():
    css = transcript_stylesheet("#111111", "#222222", "#333333")
    assert "p.turn-user { color: #111111;" in css
    assert "p.turn-assistant { color: #222222;" in css
    assert "#333333" in css
