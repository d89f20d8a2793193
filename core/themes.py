from __future__ import annotations
from dataclasses import dataclass
from typing import Dict


@dataclass(frozen=True)
class Theme:
    name: str

    # Backgrounds
    bg_main: str
    bg_sidebar: str
    bg_panel: str
    bg_input: str

    # Button states
    bg_button: str
    bg_button_hover: str
    bg_button_disabled: str

    # Borders
    border_dark: str
    border_light: str
    border_subtle: str

    # Foreground / text
    fg_text: str
    fg_dim: str
    fg_error: str
    fg_warn: str

    # Transcript speakers
    fg_user: str
    fg_assistant: str

    # Primary accent
    accent_primary: str
    accent_danger: str


# ---------------------
# BUILT-IN PRESETS
# ---------------------

MIDNIGHT = Theme(
    name="Midnight",
    bg_main="#0e1117",
    bg_sidebar="#12151c",
    bg_panel="#161922",
    bg_input="#0c0f14",
    bg_button="#171b24",
    bg_button_hover="#1e2330",
    bg_button_disabled="#0e1117",
    border_dark="#252a36",
    border_light="#2e3442",
    border_subtle="#1a1f2b",
    fg_text="#d4d8e0",
    fg_dim="#6b7280",
    fg_error="#ef4444",
    fg_warn="#f59e0b",
    fg_user="#9ca3af",
    fg_assistant="#d4d8e0",
    accent_primary="#6d8cff",
    accent_danger="#ef4444",
)

PAPER = Theme(
    name="Paper",
    bg_main="#fbfaf7",
    bg_sidebar="#f2f0ea",
    bg_panel="#ffffff",
    bg_input="#ffffff",
    bg_button="#efede6",
    bg_button_hover="#e6e3da",
    bg_button_disabled="#f4f3ef",
    border_dark="#d6d2c6",
    border_light="#c9c4b5",
    border_subtle="#e4e0d5",
    fg_text="#1f2328",
    fg_dim="#6e6a60",
    fg_error="#c62828",
    fg_warn="#b26a00",
    fg_user="#5b5f66",
    fg_assistant="#1f2328",
    accent_primary="#7c3aed",
    accent_danger="#c62828",
)

SLATE = Theme(
    name="Slate",
    bg_main="#343541",
    bg_sidebar="#202123",
    bg_panel="#444654",
    bg_input="#2d2d3a",
    bg_button="#3e3f4b",
    bg_button_hover="#444654",
    bg_button_disabled="#2a2b32",
    border_dark="#3e3f4b",
    border_light="#4a4b57",
    border_subtle="#2f3040",
    fg_text="#ececf1",
    fg_dim="#8e8ea0",
    fg_error="#ef4444",
    fg_warn="#f59e0b",
    fg_user="#c5c5d2",
    fg_assistant="#ececf1",
    accent_primary="#10a37f",
    accent_danger="#ef4444",
)


# ---------------------
# THEME REGISTRY
# ---------------------

THEMES: Dict[str, Theme] = {
    "midnight": MIDNIGHT,
    "paper": PAPER,
    "slate": SLATE,
}

_active_theme: Theme = MIDNIGHT


def current_theme() -> Theme:
    return _active_theme


def apply_theme(name: str) -> None:
    global _active_theme
    key = (name or "").lower()
    if key not in THEMES:
        key = "midnight"
    _active_theme = THEMES[key]


def list_themes() -> list[str]:
    return [t.name for t in THEMES.values()]
