from __future__ import annotations

from PySide6.QtWidgets import QApplication

from core.themes import current_theme


class ThemeEngine:
    """Builds and applies the single app-wide stylesheet from the active theme."""

    def build_stylesheet(self) -> str:
        t = current_theme()
        return f"""
QWidget {{
    background: {t.bg_main};
    color: {t.fg_text};
}}
QLabel {{ color: {t.fg_text}; background: transparent; }}
QPushButton {{
    background: {t.bg_button};
    color: {t.fg_dim};
    border: 1px solid {t.border_light};
    padding: 6px 12px;
    border-radius: 2px;
    font-size: 11px;
    font-weight: bold;
}}
QPushButton:hover {{ background: {t.bg_button_hover}; color: {t.accent_primary}; border-color: {t.accent_primary}; }}
QPushButton:disabled {{ background: {t.bg_button_disabled}; color: {t.border_light}; border-color: {t.border_subtle}; }}
QPushButton.MonoButton {{ font-size: 10px; letter-spacing: 1px; }}
QPushButton.MonoButton[accent="true"] {{ color: {t.accent_primary}; }}

QPushButton#collapsible_toggle {{ background: transparent; border: none; text-align: left; font-weight: bold; font-size: 10px; color: {t.fg_dim}; padding: 4px; }}
QPushButton#collapsible_toggle:checked {{ color: {t.accent_primary}; }}
QScrollArea#collapsible_content {{ background: {t.bg_input}; border: none; }}
QFrame#mono_group_box {{ background: transparent; border: 1px solid {t.border_subtle}; }}
QLabel#group_title {{ color: {t.fg_dim}; font-size: 9px; font-weight: bold; letter-spacing: 1px; }}

QListWidget#note_list, QListWidget#conversation_list {{
    background: {t.bg_input}; color: {t.fg_text}; border: 1px solid {t.border_dark};
}}
QListWidget#note_list::item, QListWidget#conversation_list::item {{ padding: 6px; }}
QListWidget#note_list::item:selected, QListWidget#conversation_list::item:selected {{
    background: {t.bg_button_hover}; color: {t.accent_primary};
}}

QPlainTextEdit#note_editor {{
    background: {t.bg_panel}; color: {t.fg_text}; border: none;
    font-family: Consolas, monospace; font-size: 12px; padding: 8px;
}}
QTextBrowser#transcript {{ background: {t.bg_input}; color: {t.fg_text}; border: 1px solid {t.border_dark}; }}
QLabel#chat_title {{ color: {t.fg_text}; font-size: 10px; font-weight: bold; letter-spacing: 1px; }}
QLabel#busy_label {{ color: {t.fg_warn}; font-size: 9px; font-weight: bold; }}

QLineEdit, QPlainTextEdit, QTextEdit {{
    background: {t.bg_input}; color: {t.fg_text}; border: 1px solid {t.border_dark}; padding: 4px;
}}
QLineEdit:focus, QPlainTextEdit:focus {{ border: 1px solid {t.accent_primary}; }}
QDockWidget::title {{ background: {t.bg_sidebar}; padding: 4px; }}
QToolBar {{ background: {t.bg_sidebar}; border-bottom: 1px solid {t.border_subtle}; }}
QStatusBar {{ background: {t.bg_sidebar}; color: {t.fg_dim}; }}
QMenu {{ background: {t.bg_panel}; border: 1px solid {t.border_light}; color: {t.fg_text}; }}
QMenu::item:selected {{ background: {t.bg_button_hover}; color: {t.accent_primary}; }}
"""

    def apply(self, app: QApplication) -> None:
        app.setStyleSheet(self.build_stylesheet())
