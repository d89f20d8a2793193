# ======================
# DYNAMIC THEME BRIDGE
# ======================
# Constants mirror the active theme; call refresh_styles() after apply_theme().

from core.themes import current_theme


def _t():
    return current_theme()


BG_MAIN = BG_SIDEBAR = BG_PANEL = BG_INPUT = ""
BG_BUTTON = BG_BUTTON_HOVER = ""
BORDER_DARK = BORDER_LIGHT = BORDER_SUBTLE = ""
FG_TEXT = FG_DIM = FG_ERROR = FG_WARN = ""
FG_USER = FG_ASSISTANT = ""
ACCENT_PRIMARY = ACCENT_DANGER = ""


def refresh_styles():
    global BG_MAIN, BG_SIDEBAR, BG_PANEL, BG_INPUT
    global BG_BUTTON, BG_BUTTON_HOVER
    global BORDER_DARK, BORDER_LIGHT, BORDER_SUBTLE
    global FG_TEXT, FG_DIM, FG_ERROR, FG_WARN, FG_USER, FG_ASSISTANT
    global ACCENT_PRIMARY, ACCENT_DANGER
    t = _t()
    BG_MAIN = t.bg_main
    BG_SIDEBAR = t.bg_sidebar
    BG_PANEL = t.bg_panel
    BG_INPUT = t.bg_input
    BG_BUTTON = t.bg_button
    BG_BUTTON_HOVER = t.bg_button_hover
    BORDER_DARK = t.border_dark
    BORDER_LIGHT = t.border_light
    BORDER_SUBTLE = t.border_subtle
    FG_TEXT = t.fg_text
    FG_DIM = t.fg_dim
    FG_ERROR = t.fg_error
    FG_WARN = t.fg_warn
    FG_USER = t.fg_user
    FG_ASSISTANT = t.fg_assistant
    ACCENT_PRIMARY = t.accent_primary
    ACCENT_DANGER = t.accent_danger


refresh_styles()
