from PySide6.QtWidgets import (
    QWidget, QFrame, QLabel, QHBoxLayout, QVBoxLayout,
    QPushButton, QScrollArea, QSizePolicy
)
from PySide6.QtCore import Qt, QPropertyAnimation, QEasingCurve


def import_vbox(widget, l=10, t=10, r=10, b=10):
    v = QVBoxLayout(widget)
    v.setContentsMargins(l, t, r, b)
    v.setSpacing(8)
    return v


class MonoGroupBox(QFrame):
    """Bordered frame with a small caps title row and optional header actions."""

    def __init__(self, title, parent=None):
        super().__init__(parent)
        self.setObjectName("mono_group_box")
        self.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Expanding)
        self.layout_main = import_vbox(self)

        self._header = QHBoxLayout()
        self._header.setSpacing(4)
        self.lbl_title = QLabel(title.upper())
        self.lbl_title.setObjectName("group_title")
        self._header.addWidget(self.lbl_title)
        self._header.addStretch()
        self.layout_main.addLayout(self._header)

    def set_title(self, title):
        self.lbl_title.setText(title.upper())

    def add_widget(self, widget, stretch=0):
        self.layout_main.addWidget(widget, stretch)

    def add_layout(self, layout):
        self.layout_main.addLayout(layout)

    def add_header_action(self, text, callback):
        btn = MonoButton(text)
        btn.setFixedHeight(20)
        btn.clicked.connect(callback)
        self._header.addWidget(btn)
        return btn


class MonoButton(QPushButton):
    def __init__(self, text, accent=False):
        super().__init__(text)
        self.setCursor(Qt.PointingHandCursor)
        self.setProperty("class", "MonoButton")
        self.setProperty("accent", "true" if accent else "false")


class CollapsibleSection(QWidget):
    def __init__(self, title="", parent=None):
        super().__init__(parent)
        self.layout_main = import_vbox(self, 0, 0, 0, 0)
        self.layout_main.setSpacing(0)
        self.btn_toggle = QPushButton(title)
        self.btn_toggle.setObjectName("collapsible_toggle")
        self.btn_toggle.setCheckable(True)
        self.btn_toggle.setChecked(False)
        self.btn_toggle.clicked.connect(self.toggle_animation)
        self.layout_main.addWidget(self.btn_toggle)
        self.content_area = QScrollArea()
        self.content_area.setObjectName("collapsible_content")
        self.content_area.setMaximumHeight(0)
        self.content_area.setMinimumHeight(0)
        self.content_area.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Fixed)
        self.content_area.setFrameShape(QFrame.NoFrame)
        self.content_area.setWidgetResizable(True)
        self.layout_main.addWidget(self.content_area)
        self.anim = QPropertyAnimation(self.content_area, b"maximumHeight")
        self.anim.setDuration(200)
        self.anim.setEasingCurve(QEasingCurve.InOutQuad)

    def set_content_widget(self, widget):
        self.content_area.setWidget(widget)

    def toggle_animation(self):
        checked = self.btn_toggle.isChecked()
        widget = self.content_area.widget()
        content_height = min(widget.sizeHint().height(), 180) if widget else 100
        self.anim.setStartValue(0 if checked else content_height)
        self.anim.setEndValue(content_height if checked else 0)
        self.anim.start()
